"""Authenticated HTTP transport for the Page4U REST API"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

import requests

from page4u_mcp.config import API_KEY_ENV, DEFAULT_TIMEOUT_SECONDS, Credential, load_settings
from page4u_mcp.errors import ConfigurationError, NetworkError, ProtocolError
from page4u_mcp.services.bundler import DeployFile
from page4u_mcp.services.envelope import Failure, Success, decode_envelope, unwrap

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
CLIENT_HEADER = "X-Page4U-Client"
CLIENT_NAME = "mcp"
API_KEY_URL = "https://page4u.ai/dashboard/settings"


@dataclass(frozen=True)
class MultipartPayload:
    """Form fields plus a single uploaded file, sent as multipart/form-data."""

    file: DeployFile
    fields: Dict[str, str] = field(default_factory=dict)
    file_field: str = "file"


Payload = Union[Dict[str, Any], MultipartPayload]


def page_path(slug: str, suffix: str = "") -> str:
    """`/pages/{slug}{suffix}` with the slug encoded as one path segment."""
    return f"/pages/{quote(slug, safe='')}{suffix}"


class Page4UClient:
    """One request per :meth:`send`; no retries, no caching."""

    def __init__(
        self,
        credential: Credential,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.credential = credential
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        if not self.credential.is_configured:
            raise ConfigurationError(
                f"{API_KEY_ENV} environment variable is not set. Get your key at {API_KEY_URL}"
            )
        return {
            "Authorization": f"Bearer {self.credential.token}",
            CLIENT_HEADER: CLIENT_NAME,
            "Accept": "application/json",
        }

    def send(
        self,
        method: str,
        path: str,
        payload: Optional[Payload] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Success:
        headers = self._headers()
        url = f"{self.credential.base_url}{API_PREFIX}{path}"

        kwargs: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        if params:
            kwargs["params"] = params
        if isinstance(payload, MultipartPayload):
            # requests picks the multipart boundary and Content-Type itself
            f = payload.file
            kwargs["files"] = {payload.file_field: (f.filename, f.content, f.content_type)}
            if payload.fields:
                kwargs["data"] = dict(payload.fields)
            kind = f"multipart:{f.filename}"
        elif payload is not None:
            headers["Content-Type"] = "application/json"
            kwargs["json"] = payload
            kind = "json"
        else:
            kind = "none"

        logger.debug("→ %s %s (%s)", method, path, kind)
        try:
            resp = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.warning("⚠️ %s %s failed: %s", method, path, e)
            raise NetworkError(f"Request to {path} failed: {e}") from e

        try:
            body = resp.json()
        except ValueError as e:
            snippet = (resp.text or "")[:200]
            raise ProtocolError(
                f"HTTP {resp.status_code} from {path} is not JSON: {snippet!r}"
            ) from e

        envelope = decode_envelope(body)
        if isinstance(envelope, Failure):
            logger.warning("⚠️ %s %s rejected (%s): %s", method, path, envelope.code, envelope.message)
        result = unwrap(envelope, status_code=resp.status_code)
        logger.debug("← %s %s %s", method, path, resp.status_code)
        return result

    def close(self) -> None:
        self.session.close()


# Process-wide client, built on first use from the environment.
_client: Optional[Page4UClient] = None
_client_lock = threading.Lock()


def get_page4u_client() -> Page4UClient:
    global _client
    with _client_lock:
        if _client is None:
            settings = load_settings()
            _client = Page4UClient(settings.credential, timeout=settings.timeout_seconds)
            logger.info("🔗 Page4U client ready for %s", settings.credential.base_url)
        return _client


def install_client(client: Optional[Page4UClient]) -> None:
    """Replace the process-wide client (``None`` resets to lazy construction)."""
    global _client
    with _client_lock:
        _client = client


def clear_client_cache() -> None:
    install_client(None)
