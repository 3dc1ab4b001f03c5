"""Failure types raised by the session engine."""


class WikiSessionError(Exception):
    """
    Base class for every failure the session layer reports.

    *cause* keeps the underlying exception when one is wrapped.  Callers
    raising with ``raise ... from exc`` get the same object on
    ``__cause__``; ``cause`` is there for code that only sees the
    exception value (e.g. a failed ``LoginResult``).
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.cause})"
        return self.message


class ConfigError(WikiSessionError):
    """Credentials are missing or incomplete."""


class AuthError(WikiSessionError):
    """Login was rejected upstream, or a call was made before login."""


class TokenError(WikiSessionError):
    """The token endpoint answered with something other than a token listing."""


class ProtocolError(WikiSessionError):
    """A response had an unexpected shape or could not be decoded."""


class TransportError(WikiSessionError):
    """Non-success HTTP status or a transport-level failure."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        status_text: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status = status
        self.status_text = status_text


class ValidationError(WikiSessionError):
    """Caller input is malformed (e.g. a POST payload that is not a flat dict)."""
