"""Configuration for ldap_client.

Settings can be passed directly to :class:`DirectoryConfig`, validated from a
mapping with :meth:`DirectoryConfig.from_dict`, or read from the
``ldap_client:`` section of a YAML file with :func:`load_config`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

import voluptuous as vol
import yaml

from .const import (
    DOMAIN,
    CONF_HOST,
    CONF_PORT,
    CONF_USE_SSL,
    CONF_SKIP_TLS,
    CONF_INSECURE_SKIP_VERIFY,
    CONF_SERVER_NAME,
    CONF_BASE,
    CONF_BIND_DN,
    CONF_BIND_PASSWORD,
    CONF_USER_FILTER,
    CONF_GROUP_FILTER,
    CONF_ATTRIBUTES,
    CONF_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_USE_SSL,
    DEFAULT_SKIP_TLS,
    DEFAULT_INSECURE_SKIP_VERIFY,
    DEFAULT_USER_FILTER,
    DEFAULT_GROUP_FILTER,
    DEFAULT_TIMEOUT,
)
from .errors import ConfigurationError
from .filters import FilterTemplate

_LOGGER = logging.getLogger(__name__)


def _optional_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _attributes(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise vol.Invalid("attributes must be a list or a comma-separated string")
    return tuple(str(item).strip() for item in items if str(item).strip())


def _filter_template(value: Any) -> FilterTemplate:
    try:
        return FilterTemplate(value)
    except ValueError as exc:
        raise vol.Invalid(str(exc)) from exc


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(vol.Coerce(int), vol.Range(min=1, max=65535)),
        vol.Optional(CONF_USE_SSL, default=DEFAULT_USE_SSL): vol.Boolean(),
        vol.Optional(CONF_SKIP_TLS, default=DEFAULT_SKIP_TLS): vol.Boolean(),
        vol.Optional(CONF_INSECURE_SKIP_VERIFY, default=DEFAULT_INSECURE_SKIP_VERIFY): vol.Boolean(),
        vol.Optional(CONF_SERVER_NAME, default=""): _optional_str,
        vol.Required(CONF_BASE): vol.All(str, vol.Strip),
        vol.Optional(CONF_BIND_DN, default=""): _optional_str,
        # Passwords are kept verbatim, surrounding whitespace included.
        vol.Optional(CONF_BIND_PASSWORD, default=""): vol.Any(None, vol.Coerce(str)),
        vol.Optional(CONF_USER_FILTER, default=DEFAULT_USER_FILTER): _filter_template,
        vol.Optional(CONF_GROUP_FILTER, default=DEFAULT_GROUP_FILTER): _filter_template,
        vol.Optional(CONF_ATTRIBUTES, default=list): _attributes,
        vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)


@dataclass(frozen=True)
class DirectoryConfig:
    """Connection and search settings of a :class:`~ldap_client.DirectoryClient`."""

    host: str
    base: str
    port: int = DEFAULT_PORT
    use_ssl: bool = DEFAULT_USE_SSL
    skip_tls: bool = DEFAULT_SKIP_TLS
    insecure_skip_verify: bool = DEFAULT_INSECURE_SKIP_VERIFY
    server_name: str = ""
    bind_dn: str = ""
    bind_password: str = field(default="", repr=False)
    user_filter: FilterTemplate = field(default=FilterTemplate(DEFAULT_USER_FILTER))
    group_filter: FilterTemplate = field(default=FilterTemplate(DEFAULT_GROUP_FILTER))
    attributes: Tuple[str, ...] = ()
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "user_filter", FilterTemplate(self.user_filter))
        object.__setattr__(self, "group_filter", FilterTemplate(self.group_filter))
        object.__setattr__(self, "attributes", tuple(self.attributes))
        object.__setattr__(self, "bind_password", self.bind_password or "")

    @property
    def has_service_credentials(self) -> bool:
        return bool(self.bind_dn and self.bind_password)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DirectoryConfig":
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as exc:
            raise ConfigurationError(f"Invalid {DOMAIN} configuration: {exc}") from exc
        return cls(**validated)


def load_config(path: Union[str, Path]) -> DirectoryConfig:
    """Read the ``ldap_client:`` section of a YAML file."""
    cfg_path = Path(path)
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Configuration file not found: {cfg_path}") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to read/parse YAML: {cfg_path}: {exc}") from exc

    section = data.get(DOMAIN) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(f"Missing or invalid '{DOMAIN}:' section in {cfg_path}")

    _LOGGER.debug("Loaded %s configuration from %s", DOMAIN, cfg_path)
    return DirectoryConfig.from_dict(section)
