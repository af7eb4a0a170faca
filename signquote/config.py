from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./signquote.db"
    COMPANY_NAME: str = "Signquote Print & Cut"
    COMPANY_EMAIL: str = "sales@signquote.local"
    COMPANY_PHONE: str = ""
    CURRENCY_SYMBOL: str = "£"

    # Nominal packed thickness added to width + height when bands are girth-based
    DELIVERY_THICKNESS_MM: float = 10.0

    # Seed the built-in media/substrates/costs into an empty database on startup
    SEED_DEFAULT_CATALOG: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
