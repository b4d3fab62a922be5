from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./raidloot.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Loot policy windows (days)
    RECENCY_THRESHOLD_DAYS: int = 14
    MAX_REVOCATION_DAYS: int = 7
    # Multiplier applied once per recent award by effective_score()
    EFFECTIVE_SCORE_DECAY: float = 0.9

    # Target roster used for missing-role suggestions
    TARGET_TANKS: int = 2
    TARGET_HEALERS: int = 4
    TARGET_DPS: int = 14
    MIN_CONFIRMED_SIGNUPS: int = 10

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
