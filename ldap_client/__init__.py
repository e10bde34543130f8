"""ldap_client package.

A small LDAP helper to:
- authenticate users (service bind, user lookup by filter template, user bind)
- read user attributes and group names
- add user entries / POSIX accounts and replace attribute values

Usage:

    from ldap_client import DirectoryClient, DirectoryConfig

    config = DirectoryConfig(host="ldap.example.com", base="dc=example,dc=com",
                             bind_dn="uid=readonly,ou=People,dc=example,dc=com",
                             bind_password="readonlypassword",
                             attributes=("givenName", "sn", "mail", "uid"))
    with DirectoryClient(config) as client:
        ok, user, err = client.authenticate("username", "password")
"""
from __future__ import annotations

from .config import CONFIG_SCHEMA, DirectoryConfig, load_config
from .errors import (
    AmbiguousError,
    BindError,
    ConfigurationError,
    ConnectionError,
    DirectoryError,
    NotFoundError,
    SearchError,
    WriteError,
)
from .filters import FilterTemplate
from .ldap import DirectoryClient
from .models import AccountSpec, AuthResult

__all__ = [
    "AccountSpec",
    "AmbiguousError",
    "AuthResult",
    "BindError",
    "CONFIG_SCHEMA",
    "ConfigurationError",
    "ConnectionError",
    "DirectoryClient",
    "DirectoryConfig",
    "DirectoryError",
    "FilterTemplate",
    "NotFoundError",
    "SearchError",
    "WriteError",
    "load_config",
]
