from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://reclaim:reclaim@db:5432/reclaim"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://reclaim.app,https://admin.reclaim.app"
    CORS_ORIGINS: str = "*"

    # False: a streak only counts once today itself is completed.
    # True: an uncompleted "today" keeps the run ending yesterday alive.
    STREAK_GRACE_YESTERDAY: bool = False

    # Include day 1 in the milestone ladder ("first day" reward).
    REWARD_FIRST_DAY_MILESTONE: bool = True

    CONTRIBUTION_GRAPH_WEEKS: int = 12

    # Upper bound on analytics windows (inclusive day count).
    MAX_RANGE_DAYS: int = 3660

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
