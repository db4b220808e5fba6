from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./construlab.db"
    APP_NAME: str = "Construlab Pro"
    APP_URL: str = "http://localhost:5173"
    ENVIRONMENT: str = "development"  # 'development' | 'production'
    DEFAULT_LANGUAGE: str = "pt"

    # Auth
    JWT_SECRET: str = ""  # REQUIRED in production — fail loudly if missing at auth time
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 60
    JWT_REFRESH_EXPIRE_DAYS: int = 30
    PASSWORD_MIN_LENGTH: int = 6

    # Subscriptions
    TRIAL_DAYS: int = 7
    PRO_PERIOD_DAYS: int = 365
    PAYMENT_SIMULATION_ENABLED: bool = True

    # Stripe hosted checkout
    STRIPE_SECRET_KEY: str = ""
    STRIPE_PRICE_ID: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""

    # Contact form → SendGrid
    SENDGRID_API_KEY: str = ""
    EMAIL_FROM: str = "no-reply@construlab.pro"
    CONTACT_EMAIL: str = "support@construlab.pro"

    # Ad slots are inert placeholders unless ENVIRONMENT == "production"
    ADSENSE_PUBLISHER_ID: str = "ca-pub-XXXXXXXXXXXXXXXX"
    ADSENSE_SLOT_HEADER: str = "0000000001"
    ADSENSE_SLOT_INLINE: str = "0000000002"
    ADSENSE_SLOT_SIDEBAR: str = "0000000003"

    # Cloudflare R2 is optional; logos fall back to local uploads/
    CLOUDFLARE_R2_ACCOUNT_ID: str = ""
    CLOUDFLARE_R2_ACCESS_KEY_ID: str = ""
    CLOUDFLARE_R2_SECRET_ACCESS_KEY: str = ""
    CLOUDFLARE_R2_BUCKET: str = "construlab-logos"

    class Config:
        env_file = ".env"


settings = Settings()
