"""
LDAP directory client.
Open connection, bind with service credentials, look up and authenticate users, read groups and write entries.
"""

from __future__ import annotations

import logging
import ssl
from typing import Dict, Iterable, List, Optional, Sequence

from ldap3 import (
    Server,
    Connection,
    Tls,
    ALL,
    ALL_ATTRIBUTES,
    SIMPLE,
    SUBTREE,
    SYNC,
    DEREF_NEVER,
    MODIFY_REPLACE,
)
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SUCCESS
from ldap3.utils.dn import escape_rdn

from .config import DirectoryConfig
from .const import (
    GROUP_NAME_ATTR,
    MEMBER_ATTR,
    DESCRIPTION_ATTR,
    PASSWORD_ATTR,
    PERSON_OBJECT_CLASS,
    POSIX_OBJECT_CLASS,
    HOME_DIRECTORY_ROOT,
    LOGIN_SHELL,
)
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
from .models import AccountSpec, AuthResult

_LOGGER = logging.getLogger(__name__)


class DirectoryClient:
    """Synchronous client holding at most one LDAP connection.

    Every operation connects on demand and reuses the connection until
    :meth:`close`. A client is not safe to share between threads.
    """

    _connection: Optional[Connection] = None

    def __init__(self, config: DirectoryConfig, client_strategy=SYNC):
        self._config = config
        self._client_strategy = client_strategy
        try:
            self._tls = self._build_tls()
            self._server = Server(config.host, port=config.port, use_ssl=config.use_ssl, tls=self._tls, get_info=ALL, connect_timeout=config.timeout)
        except LDAPException as exc:
            raise ConfigurationError(f"Invalid server {config.address}: {exc}") from exc

    def _build_tls(self) -> Tls:
        # StartTLS and direct TLS share one verification policy.
        cfg = self._config
        kwargs = {"validate": ssl.CERT_NONE if cfg.insecure_skip_verify else ssl.CERT_REQUIRED}
        if cfg.server_name:
            kwargs["valid_names"] = [cfg.server_name]
            kwargs["sni"] = cfg.server_name
        return Tls(**kwargs)

    @property
    def connection(self) -> Optional[Connection]:
        return self._connection

    def __enter__(self) -> "DirectoryClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def connect(self) -> Connection:
        """Open the connection unless one is already held."""
        if self._connection is not None:
            return self._connection

        cfg = self._config
        conn = Connection(self._server, client_strategy=self._client_strategy, raise_exceptions=False, receive_timeout=cfg.timeout)
        try:
            try:
                conn.open()
                if not cfg.use_ssl and not cfg.skip_tls:
                    if not conn.start_tls(read_server_info=False):
                        raise ConnectionError.from_result(f"StartTLS with {cfg.address} failed", conn.result)
            except LDAPException as exc:
                raise ConnectionError(f"Cannot connect to {cfg.address}: {exc}") from exc
        except ConnectionError:
            _unbind_quietly(conn)
            raise

        _LOGGER.debug("Connected to %s (ssl=%s, starttls=%s)", cfg.address, cfg.use_ssl, not (cfg.use_ssl or cfg.skip_tls))
        self._connection = conn
        return conn

    def close(self) -> None:
        """Release the connection. Safe to call when not connected."""
        conn, self._connection = self._connection, None
        if conn is None:
            return
        _LOGGER.debug("Closing connection to %s", self._config.address)
        _unbind_quietly(conn)

    def authenticate(self, username: str, password: str) -> AuthResult:
        """Look the user up with the user filter and bind as the found entry.

        Errors are returned in the result instead of being raised; see
        :class:`~ldap_client.models.AuthResult`.
        """
        user: Dict[str, str] = {}
        try:
            self.connect()
            # First bind with a read only user
            self._service_bind()
            entry = self._find_user(username)
            user = {attr: _first_value(entry, attr) for attr in self._config.attributes}
            self._bind(entry.entry_dn, password, "User bind")
        except DirectoryError as exc:
            _LOGGER.debug("Authentication of %s failed: %s", username, exc)
            return AuthResult(False, user, exc)

        # Rebind as the read only user for any further queries
        try:
            self._service_bind()
        except BindError as exc:
            _LOGGER.warning("User %s authenticated but service rebind failed: %s", username, exc)
            return AuthResult(True, user, exc)
        return AuthResult(True, user, None)

    def get_groups_of_user(self, username: str) -> List[str]:
        return self.filter(self._config.group_filter.render(username), [GROUP_NAME_ATTR])

    def filter(self, search_filter: str, attributes: Sequence[str]) -> List[str]:
        """Return every value of every returned attribute of every matching entry.

        Values keep the order the server returned them in; duplicates are kept.
        """
        self.connect()
        entries = self._search(search_filter, list(attributes) or ALL_ATTRIBUTES)
        result: List[str] = []
        for entry in entries:
            for attr in entry.entry_attributes:
                result.extend(_to_str(value) for value in entry[attr].raw_values)
        return result

    def add_user(self, username: str, password: str, ou: str) -> None:
        self._prepare_write()
        self._add(
            self._entry_dn(username, ou),
            [PERSON_OBJECT_CLASS],
            {
                PASSWORD_ATTR: [password],
                "sn": [username],
                "uid": [username],
            },
        )

    def add_user_account(self, account: AccountSpec) -> None:
        self._prepare_write()
        self._add(
            self._entry_dn(account.username, account.ou),
            [PERSON_OBJECT_CLASS, POSIX_OBJECT_CLASS],
            {
                "uidNumber": [str(account.uid)],
                "gidNumber": [str(account.gid)],
                PASSWORD_ATTR: [account.password],
                "homeDirectory": [HOME_DIRECTORY_ROOT + account.username],
                "loginShell": [LOGIN_SHELL],
                "sn": [account.username],
                "uid": [account.username],
            },
        )

    def change_members(self, members: Iterable[str], groupname: str, ou: str) -> None:
        self.change_attribute(self._entry_dn(groupname, ou), MEMBER_ATTR, members)

    def change_description(self, description: str, ou: str) -> None:
        self.change_attribute(self._ou_dn(ou), DESCRIPTION_ATTR, [description])

    def change_password(self, password: str, username: str, ou: str) -> None:
        self.change_attribute(self._entry_dn(username, ou), PASSWORD_ATTR, [password])

    def change_attribute(self, dn: str, attribute: str, values: Iterable[str]) -> None:
        """Replace the whole value set of ``attribute`` on ``dn``."""
        conn = self._prepare_write()
        values = list(values)
        try:
            ok = conn.modify(dn, {attribute: [(MODIFY_REPLACE, values)]})
        except LDAPException as exc:
            raise WriteError(f"Modify {dn} failed: {exc}") from exc
        if not ok:
            raise WriteError.from_result(f"Modify {dn} failed", conn.result)
        _LOGGER.debug("Replaced %s on %s with %d value(s)", attribute, dn, len(values))

    def _prepare_write(self) -> Connection:
        conn = self.connect()
        # First bind with an admin user
        self._service_bind()
        return conn

    def _service_bind(self) -> None:
        if self._config.has_service_credentials:
            self._bind(self._config.bind_dn, self._config.bind_password, "Service bind")

    def _bind(self, dn: str, password: str, action: str) -> None:
        conn = self._connection
        try:
            ok = conn.rebind(user=dn, password=password, authentication=SIMPLE, read_server_info=False)
        except LDAPException as exc:
            raise BindError(f"{action} as {dn} failed: {exc}") from exc
        if not ok:
            raise BindError.from_result(f"{action} as {dn} failed", conn.result)

    def _search(self, search_filter: str, attributes) -> list:
        conn = self._connection
        try:
            ok = conn.search(
                search_base=self._config.base,
                search_filter=search_filter,
                search_scope=SUBTREE,
                dereference_aliases=DEREF_NEVER,
                attributes=attributes,
            )
        except LDAPException as exc:
            raise SearchError(f"Search {search_filter} failed: {exc}") from exc
        if not ok and (conn.result or {}).get("result") != RESULT_SUCCESS:
            raise SearchError.from_result(f"Search {search_filter} failed", conn.result)
        entries = conn.entries
        _LOGGER.debug("Search %s under %s returned %d entries", search_filter, self._config.base, len(entries))
        return entries

    def _find_user(self, username: str):
        search_filter = self._config.user_filter.render(username)
        entries = self._search(search_filter, list(self._config.attributes) or None)
        if len(entries) < 1:
            raise NotFoundError(f"User {username} does not exist")
        if len(entries) > 1:
            raise AmbiguousError(f"Too many entries returned for user {username}")
        return entries[0]

    def _add(self, dn: str, object_class: List[str], attributes: Dict[str, List[str]]) -> None:
        conn = self._connection
        try:
            ok = conn.add(dn, object_class=object_class, attributes=attributes)
        except LDAPException as exc:
            raise WriteError(f"Add {dn} failed: {exc}") from exc
        if not ok:
            raise WriteError.from_result(f"Add {dn} failed", conn.result)
        _LOGGER.debug("Added %s", dn)

    def _entry_dn(self, cn: str, ou: str) -> str:
        return f"cn={escape_rdn(cn)},{self._ou_dn(ou)}"

    def _ou_dn(self, ou: str) -> str:
        return f"ou={escape_rdn(ou)},{self._config.base}"


def _first_value(entry, attr: str) -> str:
    if attr not in entry:
        return ""
    values = entry[attr].raw_values
    return _to_str(values[0]) if values else ""


def _to_str(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _unbind_quietly(conn: Connection) -> None:
    try:
        conn.unbind()
    except LDAPException as exc:
        _LOGGER.debug("Ignoring error while closing connection: %s", exc)
