"""Configuration constants and bot credentials for wiki_session."""

import os
from dataclasses import dataclass

# Credentials can also be supplied via WIKI_BOT_USERNAME / WIKI_BOT_PASSWORD env vars
DEFAULT_BASE_URL = os.environ.get("WIKI_BASE_URL", "")
DEFAULT_USER = os.environ.get("WIKI_BOT_USERNAME", "")
DEFAULT_PASSWORD = os.environ.get("WIKI_BOT_PASSWORD", "")

DEFAULT_API_PATH = "api.php"

REQUEST_TIMEOUT = 30    # seconds per HTTP request
LOGIN_SUCCESS   = "Success"

USER_AGENT = "wiki-session/1.0 (MediaWiki bot session client; python-requests)"

_TRUTHY = frozenset(["1", "true", "yes", "on"])


def env_flag(name: str, default: bool = False) -> bool:
    """Interpret an environment variable as a boolean switch."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Credentials:
    """
    Connection and bot-login settings for one wiki.

    ``private`` marks a wiki that refuses anonymous reads, so every GET
    must wait until the session is established.
    """

    base_url: str = ""
    bot_username: str = ""
    bot_password: str = ""
    private: bool = False

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls(
            base_url=os.environ.get("WIKI_BASE_URL", ""),
            bot_username=os.environ.get("WIKI_BOT_USERNAME", ""),
            bot_password=os.environ.get("WIKI_BOT_PASSWORD", ""),
            private=env_flag("WIKI_PRIVATE"),
        )

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are empty, in check order."""
        return [
            name
            for name in ("base_url", "bot_username", "bot_password")
            if not getattr(self, name)
        ]

    def __repr__(self) -> str:
        masked = "***" if self.bot_password else ""
        return (
            f"Credentials(base_url={self.base_url!r}, "
            f"bot_username={self.bot_username!r}, "
            f"bot_password={masked!r}, private={self.private!r})"
        )
