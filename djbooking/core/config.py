from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "DJ Jeff Jackson Jr"
    BUSINESS_TIMEZONE: str = "America/New_York"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # The block-schedule check lives on the health-check host, bookings on their own endpoint.
    HEALTH_CHECK_URL: str = "http://localhost:8080"
    BOOKING_API_BASE_URL: str = "http://localhost:8080"
    BOOKING_ENDPOINT_PATH: str = "/api/public/bookings"
    BLOCK_SCHEDULE_PATH: str = "/api/public/blockSchedule/check-availability"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    HEALTH_POLL_INTERVAL_SECONDS: float = 300.0

    PHONE_COUNTRY_PREFIX: str = "+1"
    BOOKABLE_DAYS: int = 30
    MANUAL_PAYMENT_REFERENCE: str = "Scan the PayPal QR code and pay the deposit"

    GATEWAY_KEY_ID: str = ""
    GATEWAY_CURRENCY: str = "USD"


settings = Settings()
