from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "AND Architects"
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"
    CURRENCY_SYMBOL: str = "₹"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Weekly hours override, e.g. {"monday": {"start": "09:00", "end": "17:00", "breaks": [["12:00", "13:00"]]}}
    BUSINESS_HOURS_JSON: str | None = None
    SLOT_STEP_MINUTES: int = 30
    BOOKING_HORIZON_DAYS: int = 90

    BOOKED_INDEX_PATH: str | None = None
    SEED_BOOKED_SLOTS: bool = False
    SEED_BOOKED_SLOTS_DAYS: int = 30
    SEED_BOOKED_SLOTS_RANDOM_SEED: int = 7

    SUBMISSION_TIMEOUT_SECONDS: float = 15.0

    GOOGLE_FORM_URL: str | None = None
    # Mapping of payload field -> form entry id, e.g. {"service": "entry.2005620554", ...}
    GOOGLE_FORM_ENTRY_IDS: str | None = None

    WHATSAPP_ACCESS_TOKEN: str | None = None
    WHATSAPP_PHONE_NUMBER_ID: str | None = None
    WHATSAPP_OPERATOR_NUMBER: str | None = None
    WHATSAPP_GRAPH_API_VERSION: str = "v20.0"


settings = Settings()
