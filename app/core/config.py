from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./school_safety.db"

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # First Direction account, seeded on startup when missing
    DIRECTION_EMAIL: str | None = None
    DIRECTION_PASSWORD: str | None = None
    DIRECTION_NAME: str | None = "Direção"
    ENV: str = "dev"  # "dev" or "prod"

    # Demo only: sign-ins without a profile get a role guessed from the e-mail
    # ("admin"/"direcao" -> Direction, "funcionario" -> Staff). Never enable in prod.
    DEMO_IDENTITY_FALLBACK: bool = False

    NOTIFICATIONS_ENABLED: bool = False

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
