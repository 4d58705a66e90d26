#!/usr/bin/env python3
"""Dump every cached resource the vacsite library can load.

Each resource is resolved through its read-through loader and printed
with its provenance (``remote``, ``cached`` or ``default``), which makes
it easy to see which parts of the site would render from fallbacks.

Usage
-----
Set environment variables and run::

    export VAC_SUPABASE_URL="https://<project>.supabase.co"
    export VAC_SUPABASE_ANON_KEY="<anon key>"
    python scripts/dump_site_content.py

Options::

    --page NAME          Also dump the hero banner and theme of NAME (repeatable)
    --feature KEY        Also dump the feature toggle KEY (repeatable)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from vacsite import SiteClient, SiteConfig  # noqa: E402
from vacsite.models import FooterSectionType  # noqa: E402

_DEFAULT_PAGES = ("home", "about", "services", "careers", "contact")


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _resource_keys(pages: list[str], features: list[str]) -> list[str]:
    keys = ["site_settings", "footer", "testimonials", "job_openings"]
    keys += [f"footer:{section.value}" for section in FooterSectionType]
    for page in pages:
        keys += [f"hero_banner:{page}", f"page_theme:{page}"]
    keys += [f"feature:{feature}" for feature in features]
    return keys


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump every resource vacsite can load, with provenance.",
    )
    parser.add_argument("--page", action="append", default=[], help="Page name for banner/theme (repeatable)")
    parser.add_argument(
        "--feature",
        action="append",
        default=["testimonials_enabled"],
        help="Feature toggle setting key (repeatable)",
    )
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = SiteConfig.from_env(cross_context_enabled=False)
    result: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "backend": config.base_url,
        "resources": {},
    }

    out: list[str] = [_section("vacsite dump_site_content")]
    out.append(f"  time      : {result['timestamp']}")
    out.append(f"  backend   : {result['backend']}")

    async with SiteClient(config) as client:
        for key in _resource_keys(args.page or list(_DEFAULT_PAGES), args.feature):
            resolved = await client.resolve(key)
            result["resources"][key] = {"provenance": resolved.provenance.value, "value": resolved.value}
            out.append(_section(f"{key}  [{resolved.provenance.value}]"))
            out.append(json.dumps(resolved.value, indent=2, ensure_ascii=False, default=str))

    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    elif args.json_mode:
        print(payload)
    else:
        print("\n".join(out))


if __name__ == "__main__":
    asyncio.run(main())
