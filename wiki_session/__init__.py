"""
wiki_session
============
Bot login and session handling for the MediaWiki action API.

Log a bot account in once, then call ``api.php`` as often as needed;
session cookies and the per-action security token are attached
automatically.

Package structure
-----------------
wiki_session/
├── __init__.py       – package init and public API
├── config.py         – constants and the Credentials dataclass
├── exceptions.py     – ConfigError, AuthError, TokenError, …
├── logging_setup.py  – package logger
├── session.py        – WikiSession: login / logout / get / post
├── cli.py            – argparse CLI (``python -m wiki_session``)
├── auth/             – sub-package: session state
│   ├── cookies.py    – cookie jar and Set-Cookie parsing
│   ├── token.py      – action → token type table, token cache
│   └── guard.py      – configured / logged-in checks, bootstrap bypass
└── network/
    └── client.py     – requests-based Transport

Quick start
-----------
    from wiki_session import Credentials, WikiSession

    wiki = WikiSession(Credentials(
        base_url="https://wiki.example.com/w/",
        bot_username="MyBot@task",
        bot_password="bot_password",
    ))
    if wiki.login():
        wiki.post("api.php", {"action": "edit", "title": "Sandbox", "text": "Hi"})
"""

from .config import Credentials
from .exceptions import (
    AuthError,
    ConfigError,
    ProtocolError,
    TokenError,
    TransportError,
    ValidationError,
    WikiSessionError,
)
from .session import LoginResult, WikiSession
from .auth import classify

__all__ = [
    "Credentials",
    "WikiSession",
    "LoginResult",
    "classify",
    "WikiSessionError",
    "ConfigError",
    "AuthError",
    "TokenError",
    "ProtocolError",
    "TransportError",
    "ValidationError",
]
