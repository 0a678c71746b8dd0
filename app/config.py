from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Environment settings
    environment: str = "development"
    debug: bool = False
    LOG_LEVEL: str = "INFO"

    # Flat-file store
    DATA_PATH: str = "./database/data.json"

    # Identity (bearer tokens issued by the auth provider)
    AUTH_JWT_SECRET: str | None = None
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str | None = None

    # =================================================================
    # SEED VALUES - only used when a fresh document is created
    # =================================================================
    DEFAULT_ALLOWED_EMAIL_DOMAIN: str = "kprit.edu.in"
    DEFAULT_CREDITS_PER_APPROVAL: int = 1
    DEFAULT_MAX_PENDING_CONTACTS_PER_USER: int = 10

    # Emails registered with the admin role on first login (JSON list in env)
    ADMIN_EMAILS: list[str] = []

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def data_path(self) -> Path:
        """Resolve the backing document path."""
        return Path(self.DATA_PATH).expanduser()

    def default_store_settings(self) -> dict[str, str]:
        """
        Settings collection written into a brand-new document.
        Values are stored as strings, matching the persisted {key, value} pairs.
        """
        return {
            "allowed_email_domain": self.DEFAULT_ALLOWED_EMAIL_DOMAIN,
            "credits_per_approval": str(self.DEFAULT_CREDITS_PER_APPROVAL),
            "max_pending_contacts_per_user": str(self.DEFAULT_MAX_PENDING_CONTACTS_PER_USER),
        }


settings = Settings()
