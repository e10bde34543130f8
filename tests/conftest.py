from unittest.mock import MagicMock, patch

import pytest

from ldap_client import DirectoryClient, DirectoryConfig

BASE = "dc=example,dc=com"
SERVICE_DN = "uid=readonly,ou=people,dc=example,dc=com"
SERVICE_PASSWORD = "readonlypassword"
ALICE_DN = "cn=alice,ou=people,dc=example,dc=com"


class FakeAttribute:
    def __init__(self, values):
        self.values = list(values)
        self.raw_values = [v if isinstance(v, bytes) else str(v).encode("utf-8") for v in self.values]


class FakeEntry:
    """Stand-in for ldap3.abstract.entry.Entry."""

    def __init__(self, dn, **attributes):
        self.entry_dn = dn
        self._attributes = {
            name: FakeAttribute(value if isinstance(value, list) else [value])
            for name, value in attributes.items()
        }

    @property
    def entry_attributes(self):
        return list(self._attributes)

    def __contains__(self, item):
        return item in self._attributes

    def __getitem__(self, item):
        return self._attributes[item]


@pytest.fixture
def config():
    return DirectoryConfig(
        host="ldap.example.com",
        base=BASE,
        bind_dn=SERVICE_DN,
        bind_password=SERVICE_PASSWORD,
        user_filter="(uid=%s)",
        group_filter="(memberUid=%s)",
        attributes=("givenName", "sn", "mail", "uid"),
    )


@pytest.fixture
def conn():
    """A connection whose operations all succeed."""
    mock = MagicMock(name="Connection()")
    mock.open.return_value = None
    mock.start_tls.return_value = True
    mock.rebind.return_value = True
    mock.search.return_value = True
    mock.add.return_value = True
    mock.modify.return_value = True
    mock.entries = []
    mock.result = {"result": 0, "description": "success", "message": ""}
    return mock


@pytest.fixture
def connection_cls(conn):
    with patch("ldap_client.ldap.Connection", return_value=conn) as cls:
        yield cls


@pytest.fixture
def client(config, connection_cls):
    cli = DirectoryClient(config)
    yield cli
    cli.close()
