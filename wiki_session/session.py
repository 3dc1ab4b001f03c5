"""
Bot session engine for the MediaWiki action API.

``WikiSession`` logs a bot in once and then lets callers ``get`` and
``post`` against ``api.php`` with the session cookies and the right
security token filled in automatically.
"""

import io
import os
import urllib.parse
from dataclasses import dataclass
from pathlib import Path

from .auth.cookies import CookieJar
from .auth.guard import BootstrapMarker, PreconditionGuard
from .auth.token import CSRF, LOGIN, TokenCache, classify, extract_token, token_query
from .config import DEFAULT_API_PATH, LOGIN_SUCCESS, Credentials
from .exceptions import AuthError, ProtocolError, TransportError, ValidationError
from .logging_setup import log, mask
from .network.client import Transport, TransportResponse

_SCALARS = (str, int, float, bool)
_UPLOADS = (bytes, bytearray, Path, io.BufferedIOBase, io.RawIOBase)


@dataclass(frozen=True)
class LoginResult:
    """Outcome of ``WikiSession.login()``: ``ok`` plus the error when it failed."""

    ok: bool
    error: Exception | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> "LoginResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: Exception) -> "LoginResult":
        return cls(ok=False, error=error)


def _stringify(value) -> str:
    if isinstance(value, (list, tuple)):
        return "|".join(str(v) for v in value)
    return str(value)


def _encode_params(params: dict | None) -> list[tuple[str, str]]:
    if not params:
        return []
    return [(k, _stringify(v)) for k, v in params.items() if v is not None]


def _upload_part(key: str, value) -> tuple:
    if isinstance(value, Path):
        return (value.name, value.read_bytes(), "application/octet-stream")
    if isinstance(value, (bytes, bytearray)):
        return (key, bytes(value), "application/octet-stream")
    name = os.path.basename(getattr(value, "name", "") or key)
    return (name, value, "application/octet-stream")


def _validate_payload(data) -> None:
    if not isinstance(data, dict):
        raise ValidationError("Invalid data format. Use a plain dict.")
    for key, value in data.items():
        if not isinstance(key, str):
            raise ValidationError(f"Invalid field name {key!r}; field names must be strings.")
        if isinstance(value, Path):
            if not value.is_file():
                raise ValidationError(f"Invalid value for {key!r}: {value} is not a file.")
            continue
        if value is None or isinstance(value, _SCALARS + _UPLOADS):
            continue
        if isinstance(value, (list, tuple)) and all(isinstance(v, _SCALARS) for v in value):
            continue
        raise ValidationError(
            f"Invalid value for {key!r}: {type(value).__name__} is not a flat field."
        )


def _multipart(data: dict) -> list[tuple[str, tuple]]:
    """Form fields as nameless parts, uploads as file parts."""
    parts: list[tuple[str, tuple]] = []
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, _UPLOADS):
            parts.append((key, _upload_part(key, value)))
        else:
            parts.append((key, (None, _stringify(value))))
    return parts


class WikiSession:
    """
    Authenticated bot session against one wiki.

    Example::

        wiki = WikiSession(Credentials(
            base_url="https://wiki.example.com/w/",
            bot_username="MyBot@task",
            bot_password="secret",
        ))
        result = wiki.login()
        if not result:
            raise result.error
        wiki.post("api.php", {"action": "edit", "title": "Sandbox", "text": "Hello"})

    ``login()`` reports failure through its return value; ``get``,
    ``post`` and ``get_token`` raise ``WikiSessionError`` subclasses.
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        transport: Transport | None = None,
        api_path: str = DEFAULT_API_PATH,
    ) -> None:
        self.credentials = credentials if credentials is not None else Credentials()
        self.transport = transport if transport is not None else Transport()
        self.api_path = api_path
        self._cookies = CookieJar()
        self._tokens = TokenCache()
        self._guard = PreconditionGuard(self.credentials, self._cookies, self._tokens)

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def logged_in(self) -> bool:
        return self._guard.is_established()

    @property
    def cookies(self) -> dict[str, str]:
        """Copy of the current cookie jar."""
        return self._cookies.as_dict()

    def login(self) -> LoginResult:
        """
        Authenticate the bot and warm the CSRF token.

        Never raises.  On failure the cookie jar and token cache are put
        back exactly as they were before the call.
        """
        cookies_before = self._cookies.snapshot()
        tokens_before = self._tokens.snapshot()
        try:
            self._guard.check_configured()

            # Login tokens are single-use, so a re-login starts from scratch.
            self._cookies.clear()
            self._tokens.clear()

            with self._guard.bootstrap("login token") as marker:
                login_token = self.get_token(LOGIN, marker)

            with self._guard.bootstrap("login") as marker:
                json_body = self._post(
                    self.api_path,
                    {
                        "action": "login",
                        "lgname": self.credentials.bot_username,
                        "lgpassword": self.credentials.bot_password,
                        "lgtoken": login_token,
                        "format": "json",
                    },
                    marker,
                )

            self._check_login_response(json_body)

            with self._guard.bootstrap("csrf token") as marker:
                self.get_token(CSRF, marker)

            if not self._guard.is_established():
                raise ProtocolError("Login succeeded but no session cookie was set")
        except Exception as exc:
            self._cookies.restore(cookies_before)
            self._tokens.restore(tokens_before)
            log.error("Login failed for %s: %s", self.credentials.bot_username or "?", exc)
            return LoginResult.failure(exc)
        except BaseException:
            self._cookies.restore(cookies_before)
            self._tokens.restore(tokens_before)
            raise

        log.info(
            "Logged in to %s as %s. Active cookies: %s",
            self.credentials.base_url,
            self.credentials.bot_username,
            list(self._cookies.as_dict()),
        )
        return LoginResult.success()

    @staticmethod
    def _check_login_response(json_body) -> None:
        login = json_body.get("login") if isinstance(json_body, dict) else None
        result = login.get("result") if isinstance(login, dict) else None
        if not result:
            raise ProtocolError(f"Unexpected login response structure: {json_body!r}")
        if result != LOGIN_SUCCESS:
            raise AuthError(f"Login failed: {login.get('reason') or 'Unknown error'}")

    def logout(self) -> None:
        """Forget cookies and tokens.  Local only; safe to call any time."""
        self._cookies.clear()
        self._tokens.clear()
        log.debug("Session state cleared")

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def get_token(self, token_type: str = CSRF, bootstrap: BootstrapMarker | None = None) -> str:
        """
        Return the cached *token_type* token, fetching it on first use.

        One fetch per type per session; concurrent first fetches of the
        same type wait for each other.
        """
        token = self._tokens.get(token_type)
        if token is not None:
            return token

        with self._tokens.fetch_lock(token_type):
            token = self._tokens.get(token_type)
            if token is not None:
                return token
            json_body = self._get(self.api_path, token_query(token_type), bootstrap)
            token = extract_token(token_type, json_body)
            self._tokens.set(token_type, token)
            log.debug("Cached %s token %s", token_type, mask(token))
            return token

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def get(self, path: str, params: dict | None = None):
        """GET *path* relative to ``base_url`` and return the decoded JSON."""
        return self._get(path, params, None)

    def post(self, path: str, data: dict):
        """POST *data* as multipart form to *path* and return the decoded JSON."""
        return self._post(path, data, None)

    def _get(self, path: str, params: dict | None, bootstrap: BootstrapMarker | None):
        self._guard.check_configured()
        if self.credentials.private:
            self._guard.check_established(bootstrap)

        if params is not None and not isinstance(params, dict):
            raise ValidationError("Invalid params format. Use a plain dict.")

        resp = self.transport.send(
            "GET",
            self._url(path),
            self._headers(),
            params=_encode_params(params),
        )
        return self._handle(resp)

    def _post(self, path: str, data: dict, bootstrap: BootstrapMarker | None):
        self._guard.check_configured()
        _validate_payload(data)
        self._guard.check_established(bootstrap)

        fields = dict(data)
        token_type = classify(fields.get("action"))
        if token_type is not None:
            fields.pop("token", None)
            fields["token"] = self.get_token(token_type, bootstrap)

        resp = self.transport.send(
            "POST",
            self._url(path),
            self._headers(),
            files=_multipart(fields),
        )
        return self._handle(resp)

    def _handle(self, resp: TransportResponse):
        if not resp.ok:
            raise TransportError(
                f"HTTP error! status: {resp.status} - {resp.status_text}",
                status=resp.status,
                status_text=resp.status_text,
            )
        self._cookies.apply(resp.set_cookies)
        return resp.json()

    def _url(self, path: str) -> str:
        base = self.credentials.base_url
        if not base.endswith("/"):
            base += "/"
        return urllib.parse.urljoin(base, path)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        cookie = self._cookies.header()
        if cookie:
            headers["Cookie"] = cookie
        return headers
