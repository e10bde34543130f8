"""Errors raised by ldap_client."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class DirectoryError(Exception):
    """General directory error.

    ``code`` is the LDAP result code reported by the server, or ``None``
    when the failure happened before a result was received.
    """

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code

    @classmethod
    def from_result(cls, action: str, result: Optional[Mapping[str, Any]]) -> "DirectoryError":
        """Build an error from an ldap3 ``Connection.result`` dictionary."""
        result = dict(result or {})
        desc = result.get("description") or "unknown error"
        msg = result.get("message") or ""
        text = f"{action}: {desc}"
        if msg and msg != desc:
            text += f" ({msg})"
        return cls(text, code=result.get("result"))

    def __str__(self) -> str:
        text = self.args[0] if self.args else ""
        if self.code is None:
            return text
        return f"{text} [{self.code:d}]"


class ConfigurationError(DirectoryError):
    """Raised, when the client configuration is missing or invalid."""


class ConnectionError(DirectoryError):
    """Raised, when the client is not able to connect to the server or to
    negotiate TLS."""


class BindError(DirectoryError):
    """Raised, when a bind with service or user credentials fails."""


class SearchError(DirectoryError):
    """Raised, when a search request fails at the protocol level."""


class NotFoundError(DirectoryError):
    """Raised, when no entry matched the user filter."""


class AmbiguousError(DirectoryError):
    """Raised, when more than one entry matched the user filter."""


class WriteError(DirectoryError):
    """Raised, when the server rejects an add or modify request."""
