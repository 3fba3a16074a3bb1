"""
Runtime configuration pulled from the environment, optionally seeded
from a .env file.
"""
from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_COMPANIES_SHEET = "companies"


def _split_list(raw: str|None) -> list[str]:
    if not raw:
        return ["*"]
    return [v.strip() for v in raw.split(",") if v.strip()]


@dataclass
class Settings:
    spreadsheet_id: str = field(default="")
    service_account_email: str = field(default="")
    private_key: str = field(default="")
    client_secrets: str = field(default="")
    token_cache: str = field(default="")
    companies_sheet: str = field(default=DEFAULT_COMPANIES_SHEET)
    admin_key: str = field(default="")
    log_level: str = field(default="INFO")
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    @property
    def has_service_account(self) -> bool:
        return bool(self.service_account_email) and bool(self.private_key)

    @classmethod
    def from_env(cls, env_file: Path|str|None = None) -> "Settings":
        """
        Build settings from os.environ.  A .env file is loaded first
        (without overriding variables already set) when present.
        """
        if env_file is not None:
            load_dotenv(env_file, override=False)
        else:
            load_dotenv(override=False)
        env = os.environ
        return cls(
            spreadsheet_id=env.get("GOOGLE_SHEET_ID", ""),
            service_account_email=env.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
            # keys stored in env vars usually have their newlines escaped
            private_key=env.get("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n"),
            client_secrets=env.get("GWS_CLIENT_SECRETS", ""),
            token_cache=env.get("GWS_TOKEN_CACHE", ""),
            companies_sheet=env.get("EVENTSHEETS_COMPANIES_SHEET", DEFAULT_COMPANIES_SHEET) or DEFAULT_COMPANIES_SHEET,
            admin_key=env.get("EVENTSHEETS_ADMIN_KEY", ""),
            log_level=env.get("EVENTSHEETS_LOG_LEVEL", "INFO").upper(),
            cors_origins=_split_list(env.get("EVENTSHEETS_CORS_ORIGINS")),
        )

    def validate(self) -> "Settings":
        if not self.spreadsheet_id:
            raise ConfigurationError("GOOGLE_SHEET_ID is not set")
        return self
