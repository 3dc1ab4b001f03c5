"""Logging configuration for wiki_session."""

import logging

import colorlog

log = logging.getLogger("wiki-session")

_LOG_COLORS = {
    "DEBUG":    "cyan",
    "INFO":     "green",
    "WARNING":  "yellow",
    "ERROR":    "red",
    "CRITICAL": "bold_red",
}


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    log.setLevel(level)
    log.handlers.clear()

    handler = colorlog.StreamHandler()
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(message)s",
        datefmt="%H:%M:%S",
        log_colors=_LOG_COLORS,
    ))
    log.addHandler(handler)


def mask(secret: str, keep: int = 4) -> str:
    """Shorten a token or session id for log output."""
    if not secret:
        return ""
    if len(secret) <= keep:
        return "*" * len(secret)
    return secret[:keep] + "…"
