from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/rhythms"
    default_tz: str = "UTC"
    rhythm_api_key: str | None = None
    log_level: str = "INFO"

    # Trailing window of day statuses returned with /progress
    progress_window_days: int = 365
    # Longest date range /days and /progress will compute in one request
    max_range_days: int = 3660

    # Day-count chains: completed days a week needs to qualify
    weekly_high_min_days: int = 5
    weekly_low_min_days: int = 3

    # Journey stage thresholds, in weeks with at least one complete day
    journey_building_weeks: int = 2
    journey_becoming_weeks: int = 4
    journey_being_weeks: int = 12

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
