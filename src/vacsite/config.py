"""Client configuration for vacsite."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from vacsite.exceptions import SiteConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SiteConfig:
    """Client configuration.

    Parameters
    ----------
    supabase_url : str
        Base URL of the hosted backend (``https://<project>.supabase.co``).
    anon_key : str
        Public anon API key sent as ``apikey`` on every request.
    cache_dir : str or None
        Directory for the durable local cache. ``None`` keeps the cache in
        memory for the lifetime of the client.
    storage_namespace : str
        Prefix for every cache entry, so several sites can share one
        cache directory.
    request_timeout : float
        Total timeout in seconds for a single backend request.
    watch_interval : float
        Seconds between polls of the shared cache for changes written by
        other clients.
    cross_context_enabled : bool
        Start the shared-cache watcher when the client is opened.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    """

    supabase_url: str = ""
    anon_key: str = ""
    cache_dir: str | None = None
    storage_namespace: str = "vacsite"
    request_timeout: float = 10.0
    watch_interval: float = 1.0
    cross_context_enabled: bool = True
    api_trace_enabled: bool = False

    @property
    def base_url(self) -> str:
        return self.supabase_url.rstrip("/")

    def validate(self) -> None:
        """Raise :class:`SiteConfigError` if the backend cannot be reached with this config."""
        if not self.supabase_url.strip():
            raise SiteConfigError("supabase_url is required (set VAC_SUPABASE_URL)")
        if not self.supabase_url.startswith(("http://", "https://")):
            raise SiteConfigError(f"supabase_url must be an http(s) URL, got {self.supabase_url!r}")
        if not self.anon_key.strip():
            raise SiteConfigError("anon_key is required (set VAC_SUPABASE_ANON_KEY)")
        if self.request_timeout <= 0:
            raise SiteConfigError("request_timeout must be positive")
        if self.watch_interval <= 0:
            raise SiteConfigError("watch_interval must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> SiteConfig:
        """Create configuration from ``VAC_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VAC_SUPABASE_URL": "supabase_url",
            "VAC_SUPABASE_ANON_KEY": "anon_key",
            "VAC_CACHE_DIR": "cache_dir",
            "VAC_STORAGE_NAMESPACE": "storage_namespace",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("VAC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        interval_env = env.get("VAC_WATCH_INTERVAL")
        if interval_env is not None and "watch_interval" not in overrides:
            config_kwargs["watch_interval"] = float(interval_env)

        if "cross_context_enabled" not in overrides:
            config_kwargs["cross_context_enabled"] = _env_bool(env.get("VAC_CROSS_CONTEXT_ENABLED"), True)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(env.get("VAC_API_TRACE_ENABLED"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
