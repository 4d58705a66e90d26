"""Internal constants shared across the library."""

USER_AGENT = "vacsite/1 (+aiohttp)"

REST_PREFIX = "/rest/v1"
AUTH_TOKEN_PATH = "/auth/v1/token"
STORAGE_PREFIX = "/storage/v1/object"

MEDIA_BUCKET = "hero-media"

# ------------------------------------------------------------------
# Backend tables
# ------------------------------------------------------------------

TABLE_SITE_SETTINGS = "site_settings"
TABLE_FOOTER_CONTENT = "footer_content"
TABLE_HERO_BANNERS = "hero_banners"
TABLE_TESTIMONIALS = "testimonials"
TABLE_JOB_OPENINGS = "job_openings"
TABLE_CONTACT_SUBMISSIONS = "contact_submissions"
TABLE_ACTIVITY_LOGS = "admin_activity_logs"

# ------------------------------------------------------------------
# PostgREST / Postgres error codes
# ------------------------------------------------------------------

NOT_FOUND_CODES: frozenset[str] = frozenset({"PGRST116"})
PERMISSION_CODES: frozenset[str] = frozenset({"42501"})
DUPLICATE_CODES: frozenset[str] = frozenset({"23505", "Duplicate"})
REFERENCED_CODES: frozenset[str] = frozenset({"23503"})
SESSION_EXPIRED_CODES: frozenset[str] = frozenset({"PGRST301", "PGRST302"})

# ------------------------------------------------------------------
# Local cache keys
# ------------------------------------------------------------------

UPDATED_SUFFIX = ":updated"

RESOURCE_SITE_SETTINGS = "site_settings"
RESOURCE_FOOTER = "footer"
RESOURCE_TESTIMONIALS = "testimonials"
RESOURCE_JOB_OPENINGS = "job_openings"


def footer_section_key(section_type: str) -> str:
    return f"footer:{section_type}"


def hero_banner_key(page_name: str) -> str:
    return f"hero_banner:{page_name}"


def feature_key(setting_key: str) -> str:
    return f"feature:{setting_key}"


def page_theme_key(page_name: str) -> str:
    return f"page_theme:{page_name}"


#: Settings that style the default banner of a page without a banner row.
HERO_DEFAULT_SETTING_KEYS: tuple[str, ...] = ("hero_default_overlay_opacity", "hero_default_text_color")
