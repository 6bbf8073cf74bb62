from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "cloudbill"
    version: str = "0.1.0"
    DEBUG: bool = False
    APP_DOMAIN: str = "example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/cloudbill.db"
    REDIS_URL: str = "redis://localhost:6379"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Registered business jurisdiction of the seller
    SELLER_STATE: str = "Maharashtra"
    SELLER_STATE_CODE: str = "27"

    # GST
    DEFAULT_GST_RATE: int = 18

    # Invoicing
    INVOICE_NUMBER_PREFIX: str = "INV"
    INVOICE_NET_PAYMENT_TERM_DAYS: int = 30

    # Usage sampling window
    USAGE_LOOKBACK_HOURS: int = 1


settings = Settings()
