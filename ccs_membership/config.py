"""
Application configuration. Loads from environment variables.
Secrets and platform identifiers must never be hardcoded in service code.
"""

import os

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "CCS Membership"
    debug: bool = False

    # Database (postgresql+psycopg for psycopg3; sqlite URLs are accepted for local runs)
    database_url: str = "postgresql+psycopg://localhost:5432/ccs_membership_dev"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""

    # Hosting platform backend (members, contacts, triggered emails)
    platform_api_base_url: str = ""
    platform_api_key: str = ""
    platform_timeout: float = 15.0

    # Role ids as configured on the platform; empty until set in the environment
    role_site_member_id: str = ""
    role_applicant_id: str = ""
    role_invitee_id: str = ""
    role_member_id: str = ""
    role_admin_id: str = ""

    # Triggered email templates
    template_approval: str = ""
    template_rejection: str = ""
    template_admin_alert: str = ""

    # CRM contact that receives delivery-failure alerts; empty = alerts disabled
    admin_contact_id: str = ""

    # Review
    review_list_limit: int = 100

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'ccs_membership_dev')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        self.secret_key = os.getenv("SECRET_KEY", "")

        self.platform_api_base_url = os.getenv("PLATFORM_API_BASE_URL", "").rstrip("/")
        self.platform_api_key = os.getenv("PLATFORM_API_KEY", "")
        self.platform_timeout = float(os.getenv("PLATFORM_TIMEOUT", str(self.platform_timeout)))

        self.role_site_member_id = os.getenv("ROLE_SITE_MEMBER_ID", self.role_site_member_id)
        self.role_applicant_id = os.getenv("ROLE_APPLICANT_ID", self.role_applicant_id)
        self.role_invitee_id = os.getenv("ROLE_INVITEE_ID", self.role_invitee_id)
        self.role_member_id = os.getenv("ROLE_MEMBER_ID", self.role_member_id)
        self.role_admin_id = os.getenv("ROLE_ADMIN_ID", self.role_admin_id)

        self.template_approval = os.getenv("TEMPLATE_APPROVAL", self.template_approval)
        self.template_rejection = os.getenv("TEMPLATE_REJECTION", self.template_rejection)
        self.template_admin_alert = os.getenv("TEMPLATE_ADMIN_ALERT", self.template_admin_alert)

        self.admin_contact_id = os.getenv("ADMIN_CONTACT_ID", "")

        self.review_list_limit = int(
            os.getenv("REVIEW_LIST_LIMIT", str(self.review_list_limit))
        )

    def missing_platform_ids(self) -> list[str]:
        """Environment names of role and template ids that are still empty."""
        required = {
            "ROLE_SITE_MEMBER_ID": self.role_site_member_id,
            "ROLE_APPLICANT_ID": self.role_applicant_id,
            "ROLE_INVITEE_ID": self.role_invitee_id,
            "ROLE_MEMBER_ID": self.role_member_id,
            "ROLE_ADMIN_ID": self.role_admin_id,
            "TEMPLATE_APPROVAL": self.template_approval,
            "TEMPLATE_REJECTION": self.template_rejection,
            "TEMPLATE_ADMIN_ALERT": self.template_admin_alert,
        }
        return [name for name, value in required.items() if not value]
