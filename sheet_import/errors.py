from __future__ import annotations

from typing import Optional

class ContactImportError(Exception):
    """Base error for the import pipeline. ``status_code`` is the HTTP status the handler returns."""

    status_code = 500

class ClientError(ContactImportError):
    status_code = 400

class MethodNotAllowedError(ClientError):
    status_code = 405

class ConfigurationError(ContactImportError):
    status_code = 500

class FetchError(ContactImportError):
    status_code = 500

class SheetNotFoundError(FetchError):
    pass

class CRMRequestError(ContactImportError):
    """A single upsert failed. The importer counts these per row."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
