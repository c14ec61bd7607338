from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CheapSwap"
    debug: bool = False
    log_level: str = "INFO"

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "CheapSwap/1.0"
    http_timeout: float = 30.0

    # Scryfall asks for 50-100ms between requests
    scryfall_page_delay: float = 0.1

    # Format every substitute must be legal in
    legality_format: str = "commander"

    # Upper bound on cards fetched per substitute search
    candidate_pool_size: int = 180

    archidekt_api_url: str = "https://archidekt.com/api"
    moxfield_api_url: str = "https://api2.moxfield.com/v2"


settings = Settings()


# =============================================================================
# SUBSTITUTE SEARCH DEFAULTS
# =============================================================================

# Price cap used when the caller gives none, or gives garbage
DEFAULT_MAX_PRICE = 10.0

DEFAULT_MAX_RESULTS = 12

# Single-card searches never return more than this
MAX_SEARCH_RESULTS = 24

# Batch mode never searches below this cap, even for very cheap cards
MIN_BATCH_PRICE_CAP = 0.25

# Smallest cap a query can express; catalog prices are whole cents
MIN_PRICE_CAP = 0.01
