from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Expense Events Backend"
    DATABASE_URL: str = "sqlite+aiosqlite:///./expenses.db"
    SQL_ECHO: bool = False

    JWT_SECRET: str = "change-me"
    JWT_ALGO: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"

    # net balances within this many currency units of zero count as settled
    BALANCE_TOLERANCE: Decimal = Decimal("0.01")

    LOG_LEVEL: str = "INFO"

settings = Settings()
