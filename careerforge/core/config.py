from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "careerforge"

    ACCESS_TOKEN_SECRET: str = "dev-access-secret"
    REFRESH_TOKEN_SECRET: str = "dev-refresh-secret"
    ACCESS_TOKEN_EXPIRES_MINUTES: int = 60 * 24
    REFRESH_TOKEN_EXPIRES_MINUTES: int = 60 * 24 * 10
    RESET_TOKEN_EXPIRES_MINUTES: int = 10

    CORS_ORIGIN: str = "http://localhost:5173"
    FRONTEND_URL: str = ""
    SHARE_LINK_TTL_DAYS: int = 30

    # Comma separated list of emails that are granted admin on register/login
    ADMIN_EMAILS: str = ""
    ADMIN_EMAIL: str = ""
    GMAIL_USER: str = ""
    GMAIL_APP_PASSWORD: str = ""
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587

    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    UPLOAD_DIR: str = "uploads"
    MAX_RESUME_UPLOAD_BYTES: int = 10 * 1024 * 1024
    MAX_IMAGE_UPLOAD_BYTES: int = 5 * 1024 * 1024

    EXPOSE_RESET_TOKEN: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def admin_emails(self) -> List[str]:
        return [e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()]

    @property
    def allowed_origins(self) -> List[str]:
        origins = [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            self.CORS_ORIGIN,
            self.FRONTEND_URL,
        ]
        return [o for o in dict.fromkeys(origins) if o]


settings = Settings()
