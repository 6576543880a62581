from __future__ import annotations

from typing import Any, Dict

import requests

from sheet_import.config import CRMConfig
from sheet_import.errors import CRMRequestError

class CRMClient:
    """
    GoHighLevel contacts client.
    One request per call, no retries: a failed upsert is reported to the caller.
    """

    def __init__(self, cfg: CRMConfig, timeout: int = 30):
        self.cfg = cfg
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {cfg.api_key}",
                "Version": cfg.api_version,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CRMRequestError(f"CRM request failed: {e}") from e
        if not resp.ok:
            raise CRMRequestError(
                f"CRM returned {resp.status_code}: {resp.text[:200]}", status=resp.status_code
            )
        return resp

    def upsert_contact(self, contact: Dict[str, Any]) -> Dict[str, Any]:
        # POST /contacts/upsert matches on email/phone server-side
        url = f"{self.cfg.base_url.rstrip('/')}/contacts/upsert"
        resp = self._request("POST", url, json=contact)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return {}
