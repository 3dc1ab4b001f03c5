"""
HTTP transport for the wiki API.

Provides a ``requests.Session`` factory and a thin ``Transport`` wrapper
that sends one request and hands back status, headers, the raw
``Set-Cookie`` values and the body.  Cookies are owned by the session
engine, so the ``requests`` cookie jar is switched off here.
"""

import http.cookiejar
import json
from dataclasses import dataclass, field

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import REQUEST_TIMEOUT, USER_AGENT
from ..exceptions import ProtocolError, TransportError
from ..logging_setup import log


def build_session(verify_ssl: bool = True) -> requests.Session:
    """
    Return a requests.Session with keep-alive and no retries.

    Args:
        verify_ssl: Whether to verify SSL certificates

    Returns:
        Configured requests.Session instance
    """
    session = requests.Session()
    # Failures are reported once to the caller; nothing is retried here.
    retry = Retry(total=0, redirect=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.verify = verify_ssl
    # Block every cookie: the engine builds the Cookie header itself.
    session.cookies.set_policy(http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))
    session.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
        "Connection": "keep-alive",
    })
    return session


@dataclass
class TransportResponse:
    status: int
    status_text: str
    headers: dict[str, str] = field(default_factory=dict)
    set_cookies: list[str] = field(default_factory=list)
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self):
        try:
            return json.loads(self.body.decode("utf-8") if self.body else "")
        except (UnicodeDecodeError, ValueError) as exc:
            raise ProtocolError(
                f"Response body is not JSON (HTTP {self.status})", cause=exc
            ) from exc


def _raw_set_cookies(resp: requests.Response) -> list[str]:
    """
    Collect every ``Set-Cookie`` header of *resp* unfolded.

    urllib3 keeps repeated headers apart (``getlist``); ``resp.headers``
    folds them into one comma-joined string, which is the fallback.
    """
    raw_headers = getattr(resp.raw, "headers", None)
    if raw_headers is not None and hasattr(raw_headers, "getlist"):
        values = raw_headers.getlist("Set-Cookie")
        if values:
            return list(values)
    folded = resp.headers.get("Set-Cookie")
    return [folded] if folded else []


class Transport:
    """Sends single requests; never retries, never caches."""

    def __init__(
        self,
        session: requests.Session | None = None,
        verify_ssl: bool = True,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.session = session if session is not None else build_session(verify_ssl)
        self.timeout = timeout

    def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: list[tuple[str, str]] | None = None,
        files: list[tuple[str, tuple]] | None = None,
    ) -> TransportResponse:
        log.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                params=params,
                files=files,
                timeout=self.timeout,
                # requests rebuilds the Cookie header from its own (blocked)
                # jar on each hop, so a 3xx is handed back as-is.
                allow_redirects=False,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed", cause=exc) from exc

        return TransportResponse(
            status=resp.status_code,
            status_text=resp.reason or "",
            headers=dict(resp.headers),
            set_cookies=_raw_set_cookies(resp),
            body=resp.content or b"",
        )

    def close(self) -> None:
        self.session.close()
