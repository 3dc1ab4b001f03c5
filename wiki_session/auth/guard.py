"""Precondition checks run before every API call."""

import threading
from contextlib import contextmanager

from ..config import Credentials
from ..exceptions import AuthError, ConfigError
from .cookies import CookieJar
from .token import LOGIN, TokenCache


class BootstrapMarker:
    """Identity token for one bootstrap call chain (login/csrf fetch)."""

    __slots__ = ("purpose",)

    def __init__(self, purpose: str) -> None:
        self.purpose = purpose

    def __repr__(self) -> str:
        return f"<BootstrapMarker {self.purpose}>"


class PreconditionGuard:
    """
    Checks that credentials are present and the session is established.

    The engine has to fetch a login token and post the login itself
    before it counts as logged in.  Those calls run inside
    ``bootstrap()``, which hands out a marker that lets exactly that call
    chain past ``check_established``.
    """

    def __init__(self, credentials: Credentials, cookies: CookieJar, tokens: TokenCache) -> None:
        self._credentials = credentials
        self._cookies = cookies
        self._tokens = tokens
        self._live: BootstrapMarker | None = None
        self._lock = threading.Lock()

    def check_configured(self) -> None:
        missing = self._credentials.missing_fields()
        if missing:
            raise ConfigError(f"Missing {missing[0]}.")

    def is_established(self) -> bool:
        return LOGIN in self._tokens and len(self._cookies) > 0

    def check_established(self, marker: BootstrapMarker | None = None) -> None:
        if marker is not None and marker is self._live:
            return
        if not self.is_established():
            raise AuthError("Not logged in.")

    @contextmanager
    def bootstrap(self, purpose: str):
        marker = BootstrapMarker(purpose)
        with self._lock:
            if self._live is not None:
                raise AuthError(f"Bootstrap already in progress ({self._live.purpose})")
            self._live = marker
        try:
            yield marker
        finally:
            with self._lock:
                self._live = None

    @property
    def bootstrapping(self) -> bool:
        return self._live is not None
