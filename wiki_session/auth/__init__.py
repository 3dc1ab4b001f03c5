"""Authentication submodule – cookie jar, token cache, precondition guard."""

from wiki_session.auth.cookies import CookieJar, parse_cookie_pair, split_set_cookie
from wiki_session.auth.guard import BootstrapMarker, PreconditionGuard
from wiki_session.auth.token import (
    ACTION_TOKEN_TYPES,
    TokenCache,
    classify,
    extract_token,
    token_key,
)

__all__ = [
    "CookieJar",
    "parse_cookie_pair",
    "split_set_cookie",
    "BootstrapMarker",
    "PreconditionGuard",
    "ACTION_TOKEN_TYPES",
    "TokenCache",
    "classify",
    "extract_token",
    "token_key",
]
