from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional

from .errors import DirectoryError


@dataclass(frozen=True)
class AccountSpec:
    """A POSIX account to create with :meth:`DirectoryClient.add_user_account`."""

    username: str
    password: str = field(repr=False)
    ou: str
    uid: int
    gid: int


class AuthResult(NamedTuple):
    """Outcome of :meth:`DirectoryClient.authenticate`.

    ``attributes`` is filled as soon as the user entry was found, so a wrong
    password gives ``(False, {...}, BindError)`` while an unknown user gives
    ``(False, {}, NotFoundError)``. A successful user bind followed by a
    failed service rebind gives ``(True, {...}, BindError)``.
    """

    authenticated: bool
    attributes: Dict[str, str]
    error: Optional[DirectoryError] = None
