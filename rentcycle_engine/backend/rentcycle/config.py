from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    database_url: str = "sqlite:///./rentcycle.db"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Rent cycle ----
    engine_version: str = "2026-10-01.v1"

    # last day of the month on which unpaid rent is still "pending"
    rent_grace_period_days: int = 5
    lease_expiring_soon_days: int = 15

    # ---- Listing limits ----
    payments_list_limit: int = 500

    # ---- Logging ----
    log_level: str = "INFO"
    sql_log_level: str = "WARNING"

    def model_post_init(self, __context) -> None:
        if not 1 <= int(self.rent_grace_period_days) <= 27:
            raise ValueError("rent_grace_period_days must be between 1 and 27")
        if int(self.lease_expiring_soon_days) < 0:
            raise ValueError("lease_expiring_soon_days cannot be negative")

        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        # Hard fail: wildcard CORS in prod
        if is_prod:
            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
