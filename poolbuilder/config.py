from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Pool Builder"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/poolbuilder"

    # Shared secret for moderation endpoints. Empty disables them entirely.
    admin_secret: str = ""

    allowed_origin: str = "https://bensonperry.com"

    scryfall_api_url: str = "https://api.scryfall.com"
    sets_url: str = "https://bensonperry.com/shared/sets.json"
    booster_data_url: str = "https://bensonperry.com/booster-data"

    catalog_max_retries: int = 3
    catalog_retry_delay: float = 1.0
    catalog_page_delay: float = 0.1

    submit_max_attempts: int = 3


settings = Settings()


# =============================================================================
# DAILY CHALLENGE RULES
# =============================================================================

MIN_DECK_SIZE = 40

MAX_NAME_LENGTH = 20

DEFAULT_NAME = "anonymous"

# Only sets released on or after this date rotate through the daily challenge
DAILY_SET_CUTOFF = "2020-01-01"


# =============================================================================
# POOL GENERATION
# =============================================================================

DEFAULT_BOOSTER_COUNT = 6

DEFAULT_MYTHIC_RATE = 0.125
