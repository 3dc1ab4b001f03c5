"""Session cookie jar: Set-Cookie parsing and Cookie header rendering."""

import re
import threading
from collections.abc import Iterable

from ..logging_setup import log

# A comma only separates two cookies when it is followed by a new
# ``name=`` pair.  Commas inside ``Expires=Wed, 21 Oct 2015 ...`` are kept.
_FOLDED_SPLIT_RE = re.compile(r",\s*(?=[^;,=\s]+=)")


def split_set_cookie(raw: str | Iterable[str] | None) -> list[str]:
    """
    Normalise raw ``Set-Cookie`` input into one string per cookie.

    Accepts a list of header values, a single comma-folded string, or
    None.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [raw]
    parts: list[str] = []
    for value in raw:
        parts.extend(p for p in _FOLDED_SPLIT_RE.split(value) if p.strip())
    return parts


def parse_cookie_pair(value: str) -> tuple[str, str] | None:
    """Return the leading ``(name, value)`` of a Set-Cookie string, dropping attributes."""
    pair = value.split(";", 1)[0].strip()
    if "=" not in pair:
        return None
    name, _, val = pair.partition("=")
    name = name.strip()
    if not name:
        return None
    return name, val.strip().strip('"')


class CookieJar:
    """
    Name → value store for the session cookies.

    One value per name; the latest response wins.  A cookie sent back
    with an empty value is a deletion.
    """

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}
        self._lock = threading.Lock()

    def apply(self, raw: str | Iterable[str] | None) -> None:
        """Apply every cookie of one response atomically."""
        pairs = [p for p in map(parse_cookie_pair, split_set_cookie(raw)) if p]
        if not pairs:
            return
        with self._lock:
            for name, value in pairs:
                if value:
                    self._cookies[name] = value
                else:
                    self._cookies.pop(name, None)
            names = list(self._cookies)
        log.debug("Cookies now: %s", names)

    def header(self) -> str:
        with self._lock:
            return "; ".join(f"{k}={v}" for k, v in self._cookies.items())

    def get(self, name: str, default: str | None = None) -> str | None:
        with self._lock:
            return self._cookies.get(name, default)

    def as_dict(self) -> dict[str, str]:
        with self._lock:
            return dict(self._cookies)

    snapshot = as_dict

    def restore(self, snapshot: dict[str, str]) -> None:
        with self._lock:
            self._cookies = dict(snapshot)

    def clear(self) -> None:
        with self._lock:
            self._cookies.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._cookies

    def __len__(self) -> int:
        with self._lock:
            return len(self._cookies)
