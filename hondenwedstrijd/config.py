from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_ENDPOINTS = [
    "https://my.orweja.nl/home/kalender/1",
    "https://my.orweja.nl/home/kalender",
]

# iPhone Safari; the calendar rejects clients without a browser User-Agent
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


class Settings(BaseSettings):
    endpoints: list[str] = DEFAULT_ENDPOINTS
    user_agent: str = DEFAULT_USER_AGENT
    fetch_timeout: float = 30.0
    locale: str = "nl"
    strategy_policy: str = "union"
    endpoint_policy: str = "first-success"
    min_table_columns: int = 3
    refresh_schedule: str = ""
    api_key: str = ""
    log_level: str = "INFO"
    database_url: str = "sqlite+aiosqlite:///data/hondenwedstrijd.db"

    @field_validator("endpoints", mode="before")
    @classmethod
    def default_empty_endpoints(cls, v):
        if not v:
            return list(DEFAULT_ENDPOINTS)
        return v

    @field_validator("strategy_policy", "endpoint_policy")
    @classmethod
    def check_policy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("union", "first-success"):
            raise ValueError(f"Unknown policy '{v}', expected 'union' or 'first-success'")
        return v

    @field_validator("refresh_schedule")
    @classmethod
    def strip_schedule(cls, v: str) -> str:
        return v.strip()

    model_config = {"env_prefix": "", "case_sensitive": False}


settings = Settings()
