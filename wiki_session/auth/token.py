"""
Security tokens: which action needs which token, and where tokens live.

MediaWiki hands out one token per *type* from
``action=query&meta=tokens&type=<type>``.  Most write actions share the
``csrf`` token; a handful that touch accounts, moderation or the watch
list have their own type, and ``login`` takes its token through
``lgtoken`` instead of ``token``.
"""

import threading

from ..exceptions import TokenError

CSRF = "csrf"
LOGIN = "login"

# Actions whose token type differs from the shared csrf token.
# None means the action sends no ``token`` field at all.
ACTION_TOKEN_TYPES: dict[str, str | None] = {
    "createaccount": "createaccount",
    "login":         None,
    "patrol":        "patrol",
    "rollback":      "rollback",
    "userrights":    "userrights",
    "watch":         "watch",
}


def classify(action: str | None) -> str | None:
    """Token type a POST with this ``action`` must carry (None = tokenless)."""
    if action in ACTION_TOKEN_TYPES:
        return ACTION_TOKEN_TYPES[action]
    return CSRF


def token_key(token_type: str) -> str:
    """Field name of *token_type* in a token listing, e.g. ``csrf`` → ``csrftoken``."""
    return f"{token_type}token"


def token_query(token_type: str) -> dict[str, str]:
    return {
        "action": "query",
        "meta":   "tokens",
        "type":   token_type,
        "format": "json",
    }


def extract_token(token_type: str, payload) -> str:
    """
    Pull the *token_type* token out of a ``meta=tokens`` response.

    Raises TokenError when the payload is an upstream error envelope or
    does not have the ``{"query": {"tokens": {...}}}`` shape.
    """
    if not isinstance(payload, dict):
        raise TokenError(f"Unexpected {token_type} token response structure: {payload!r}")

    error = payload.get("error")
    if isinstance(error, dict):
        raise TokenError(
            f"Token request for {token_type} rejected: "
            f"{error.get('code', 'unknown')} - {error.get('info', '')}".rstrip(" -")
        )

    query = payload.get("query")
    tokens = query.get("tokens") if isinstance(query, dict) else None
    token = tokens.get(token_key(token_type)) if isinstance(tokens, dict) else None
    if not token or not isinstance(token, str):
        raise TokenError(f"Unexpected {token_type} token response structure: {payload!r}")
    return token


class TokenCache:
    """
    Token type → token value for the current session.

    Entries are written once per type and only ever removed all together
    (logout, or rollback of a failed login).
    """

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}
        self._lock = threading.Lock()
        self._fetch_locks: dict[str, threading.Lock] = {}

    def get(self, token_type: str) -> str | None:
        with self._lock:
            return self._tokens.get(token_type)

    def set(self, token_type: str, value: str) -> None:
        with self._lock:
            self._tokens[token_type] = value

    def fetch_lock(self, token_type: str) -> threading.Lock:
        """Lock that serialises first-time fetches of one token type."""
        with self._lock:
            return self._fetch_locks.setdefault(token_type, threading.Lock())

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._tokens)

    def restore(self, snapshot: dict[str, str]) -> None:
        with self._lock:
            self._tokens = dict(snapshot)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __contains__(self, token_type: object) -> bool:
        with self._lock:
            return token_type in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
