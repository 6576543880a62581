"""
Serverless HTTP entry point.

``handler(event, context)`` takes the usual function-platform event
(``httpMethod``, ``body``, ``isBase64Encoded``) and returns
``{"statusCode", "headers", "body"}``.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Callable, Dict, Optional

from sheet_import.config import ImportConfig
from sheet_import.errors import ClientError, ConfigurationError, ContactImportError, MethodNotAllowedError
from sheet_import.importer import ContactImporter, ImportRequest, build_importer
from sheet_import.logging_setup import configure_logging

logger = logging.getLogger(__name__)

ImporterFactory = Callable[[ImportConfig], ContactImporter]

def _response(status: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }

def parse_body(event: Dict[str, Any]) -> Any:
    raw = event.get("body")
    if raw is None or raw == "":
        raise ClientError("Request body is required")
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ClientError(f"Request body is not valid base64: {e}")
    if isinstance(raw, (dict, list)):
        return raw
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ClientError(f"Invalid JSON body: {e}")

def handle_event(
    event: Dict[str, Any],
    config: Optional[ImportConfig] = None,
    importer_factory: ImporterFactory = build_importer,
) -> Dict[str, Any]:
    method = str(event.get("httpMethod") or "").upper()
    try:
        if method != "POST":
            raise MethodNotAllowedError("Method Not Allowed")

        request = ImportRequest.from_payload(parse_body(event))
        request.validate()

        if config is None:
            config = ImportConfig.from_env()
        config.validate()

        result = importer_factory(config).run(request)
    except ClientError as e:
        logger.info("Rejected request: %s", e)
        return _response(e.status_code, {"message": str(e)})
    except ContactImportError as e:
        logger.error("Import failed: %s", e)
        return _response(e.status_code, {"message": "Error importing contacts", "error": str(e)})
    except Exception as e:
        logger.exception("Unexpected error during import")
        return _response(500, {"message": "Error importing contacts", "error": str(e)})

    return _response(200, result.to_body())

def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    try:
        config = ImportConfig.from_env()
    except ConfigurationError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        return _response(e.status_code, {"message": "Error importing contacts", "error": str(e)})
    configure_logging(config.log_level)
    return handle_event(event, config=config)
