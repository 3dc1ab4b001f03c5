"""
Network operations module for HTTP client setup and request handling.
"""

from wiki_session.network.client import Transport, TransportResponse, build_session

__all__ = ["Transport", "TransportResponse", "build_session"]
