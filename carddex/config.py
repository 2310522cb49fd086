from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CardDex"
    debug: bool = False

    # Persisted key-value store backing the local cache
    store_url: str = "sqlite:///carddex_store.db"

    # Key layout inside the store
    storage_prefix: str = "carddex_persistence_"
    device_id_key: str = "carddex_device_id"


settings = Settings()


# =============================================================================
# SNAPSHOT SCHEMA
# =============================================================================

# Current snapshot schema tag. Snapshots carrying another version still load,
# but validation surfaces a warning.
INTEGRITY_VERSION = 1


# =============================================================================
# SYNC STALENESS THRESHOLDS (milliseconds)
# =============================================================================

MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS

# Sync younger than this reads as recent
RECENT_SYNC_MS = DAY_MS

# Relative wording ("N days ago") stops at one week
RELATIVE_TIME_LIMIT_MS = 7 * DAY_MS

# Sync older than this is flagged as a month or more stale
STALE_SYNC_MS = 30 * DAY_MS
