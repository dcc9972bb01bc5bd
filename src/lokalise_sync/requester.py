"""Lokalise export request and response interpretation."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .errors import RemoteProtocolError, RemoteRequestError
from .options import ExportOptions

EXPORT_ENDPOINT = "https://api.lokalise.com/api/project/export"

EXPORT_TYPE = "strings"
BUNDLE_FILENAME = "Localization.zip"
BUNDLE_STRUCTURE = "%LANG_ISO%.lproj/Localizable.%FORMAT%"
EXPORT_EMPTY = "base"

REDACTED = "***"


@dataclass(frozen=True)
class ExportSuccess:
    """Export job produced a bundle at ``archive_path`` in asset storage."""
    archive_path: str


@dataclass(frozen=True)
class ExportFailure:
    """Lokalise reported an error for the export job."""
    code: str
    message: str


@dataclass(frozen=True)
class ExportMalformed:
    """Response decoded as JSON but had an unexpected shape."""
    raw_body: str


ExportOutcome = Union[ExportSuccess, ExportFailure, ExportMalformed]


def _flag(value: bool) -> str:
    return "1" if value else "0"


def encode_form_value(value: Any) -> str:
    """Encode a caller-supplied parameter value for the form body."""
    if isinstance(value, bool):
        return _flag(value)
    if value is None:
        return ""
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value)
    return str(value)


def build_payload(options: ExportOptions) -> Dict[str, str]:
    """Build the form fields of an export request.

    ``extra_parameters`` are applied after every built-in field, so a
    colliding key always takes the caller's value.
    """
    payload = {
        "api_token": options.api_token,
        "id": options.project_id,
        "type": EXPORT_TYPE,
        "use_original": _flag(options.use_original_filenames),
        "bundle_filename": BUNDLE_FILENAME,
        "bundle_structure": BUNDLE_STRUCTURE,
        "ota_plugin_bundle": "0",
        "export_empty": EXPORT_EMPTY,
        "include_comments": _flag(options.include_comments),
    }

    if options.languages:
        payload["langs"] = json.dumps(list(options.languages))

    if options.tags:
        payload["include_tags"] = json.dumps(list(options.tags))

    for key, value in options.extra_parameters.items():
        payload[key] = encode_form_value(value)

    return payload


def redact_payload(payload: Mapping[str, str]) -> Dict[str, str]:
    """Copy of ``payload`` that is safe to log."""
    redacted = dict(payload)
    if "api_token" in redacted:
        redacted["api_token"] = REDACTED
    return redacted


def parse_response(body: str) -> ExportOutcome:
    """Interpret an export response body.

    Raises:
        RemoteProtocolError: If the body is not valid JSON
    """
    try:
        document = json.loads(body)
    except ValueError as e:
        raise RemoteProtocolError(f"Bad response: {body}", raw_body=body) from e

    if not isinstance(document, dict):
        return ExportMalformed(raw_body=body)

    status_block = document.get("response")
    if not isinstance(status_block, dict):
        return ExportMalformed(raw_body=body)

    status = status_block.get("status")
    bundle = document.get("bundle")
    if status == "success" and isinstance(bundle, dict) and isinstance(bundle.get("file"), str):
        return ExportSuccess(archive_path=bundle["file"])

    if status == "error":
        code = status_block.get("code")
        message = status_block.get("message")
        return ExportFailure(
            code="" if code is None else str(code),
            message="" if message is None else str(message),
        )

    return ExportMalformed(raw_body=body)


class ExportRequester:
    """Requests export bundles from the Lokalise API."""

    def __init__(
        self,
        client: httpx.Client,
        endpoint: str = EXPORT_ENDPOINT,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the requester.

        Args:
            client: HTTP client used for the request; its timeout applies
            endpoint: Export endpoint URL
            logger: Logger for progress messages, defaults to the module logger
        """
        self.client = client
        self.endpoint = endpoint
        self.logger = logger or logging.getLogger(__name__)

    def export(self, options: ExportOptions) -> ExportOutcome:
        """Submit an export job and interpret the response.

        Raises:
            RemoteRequestError: On transport failure
            RemoteProtocolError: If the response is not JSON
        """
        payload = build_payload(options)
        self.logger.info(f"Exporting localizations for project {options.project_id}")
        self.logger.debug(f"Export parameters: {redact_payload(payload)}")

        try:
            response = self.client.post(self.endpoint, data=payload)
        except httpx.HTTPError as e:
            raise RemoteRequestError(
                f"Export request failed: {e}", url=self.endpoint
            ) from e

        self.logger.debug(f"Export endpoint answered HTTP {response.status_code}")

        try:
            return parse_response(response.text)
        except RemoteProtocolError as e:
            e.context["status_code"] = response.status_code
            raise
