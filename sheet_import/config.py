from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from dotenv import dotenv_values

from sheet_import.errors import ConfigurationError

DEFAULT_GHL_BASE_URL = "https://services.leadconnectorhq.com"
DEFAULT_GHL_API_VERSION = "2021-07-28"

_PEM_MARKER = "-----BEGIN"

@dataclass
class SheetsConfig:
    spreadsheet_id: str
    client_email: str = ""
    private_key: str = ""
    service_account_json: str = ""

    def credentials_info(self) -> Dict[str, str]:
        """Service-account info dict for ``Credentials.from_service_account_info``."""
        return {
            "type": "service_account",
            "client_email": self.client_email,
            "private_key": decode_private_key(self.private_key),
            "token_uri": "https://oauth2.googleapis.com/token",
        }

@dataclass
class CRMConfig:
    api_key: str
    base_url: str = DEFAULT_GHL_BASE_URL
    api_version: str = DEFAULT_GHL_API_VERSION

@dataclass
class ImportConfig:
    sheets: SheetsConfig
    crm: CRMConfig
    timeout: int = 30
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, Optional[str]]] = None, env_file: str = ".env") -> "ImportConfig":
        """Build config from ``env`` or from the process environment layered over ``env_file``."""
        if env is None:
            merged = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            merged.update(os.environ)
            env = merged

        def get(name: str, default: str = "") -> str:
            return str(env.get(name) or default).strip()

        try:
            timeout = int(get("HTTP_TIMEOUT", "30"))
        except ValueError:
            raise ConfigurationError(f"HTTP_TIMEOUT must be an integer, got {env.get('HTTP_TIMEOUT')!r}")

        return cls(
            sheets=SheetsConfig(
                spreadsheet_id=get("GOOGLE_SHEET_ID"),
                client_email=get("GOOGLE_CLIENT_EMAIL"),
                # keep the raw value, PEM bodies are whitespace sensitive
                private_key=str(env.get("GOOGLE_PRIVATE_KEY") or ""),
                service_account_json=get("GOOGLE_SERVICE_ACCOUNT_JSON"),
            ),
            crm=CRMConfig(
                api_key=get("GHL_API_KEY"),
                base_url=get("GHL_BASE_URL", DEFAULT_GHL_BASE_URL),
                api_version=get("GHL_API_VERSION", DEFAULT_GHL_API_VERSION),
            ),
            timeout=timeout,
            log_level=get("LOG_LEVEL", "INFO").upper(),
        )

    def missing(self) -> List[str]:
        missing = []
        if not self.crm.api_key:
            missing.append("GHL_API_KEY")
        if not self.sheets.spreadsheet_id:
            missing.append("GOOGLE_SHEET_ID")
        if not self.sheets.service_account_json:
            if not self.sheets.client_email:
                missing.append("GOOGLE_CLIENT_EMAIL")
            if not self.sheets.private_key.strip():
                missing.append("GOOGLE_PRIVATE_KEY")
        return missing

    def validate(self) -> "ImportConfig":
        missing = self.missing()
        if missing:
            raise ConfigurationError("Missing required configuration: " + ", ".join(missing))
        if not self.sheets.service_account_json:
            # fail at startup rather than on the first Sheets call
            decode_private_key(self.sheets.private_key)
        return self

def decode_private_key(raw: str) -> str:
    """
    Return a PEM private key.

    Accepts the PEM text itself (with real or escaped ``\\n`` newlines) or the
    PEM base64-encoded as a single line, which is how most dashboards store it.
    """
    key = raw.strip().strip('"')
    if not key:
        return ""
    if _PEM_MARKER not in key:
        try:
            key = base64.b64decode("".join(key.split()), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ConfigurationError(f"GOOGLE_PRIVATE_KEY is neither PEM nor base64 PEM: {e}")
        if _PEM_MARKER not in key:
            raise ConfigurationError("GOOGLE_PRIVATE_KEY decoded from base64 but is not a PEM key")
    return key.replace("\\n", "\n").strip() + "\n"
