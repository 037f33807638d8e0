from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "SubStack Renewals"
    debug: bool = True

    # Calendar settings
    default_timezone: str = "UTC"  # IANA name used when a request carries none

    # Analytics settings
    timeline_horizon_days: int = 30
    upcoming_window_days: int = 7
    max_insights: int = 4

    class Config:
        env_file = ".env"


settings = Settings()
