"""Constants for ldap_client."""

DOMAIN = "ldap_client"

# Config keys
CONF_HOST = "host"
CONF_PORT = "port"
CONF_USE_SSL = "use_ssl"
CONF_SKIP_TLS = "skip_tls"
CONF_INSECURE_SKIP_VERIFY = "insecure_skip_verify"
CONF_SERVER_NAME = "server_name"
CONF_BASE = "base"
CONF_BIND_DN = "bind_dn"
CONF_BIND_PASSWORD = "bind_password"
CONF_USER_FILTER = "user_filter"
CONF_GROUP_FILTER = "group_filter"
CONF_ATTRIBUTES = "attributes"
CONF_TIMEOUT = "timeout"

DEFAULT_PORT = 389
DEFAULT_USE_SSL = False
DEFAULT_SKIP_TLS = False
DEFAULT_INSECURE_SKIP_VERIFY = False
DEFAULT_USER_FILTER = "(uid=%s)"
DEFAULT_GROUP_FILTER = "(memberUid=%s)"
DEFAULT_TIMEOUT = 10

# Directory layout
GROUP_NAME_ATTR = "cn"
MEMBER_ATTR = "memberUid"
DESCRIPTION_ATTR = "description"
PASSWORD_ATTR = "userPassword"
PERSON_OBJECT_CLASS = "inetOrgPerson"
POSIX_OBJECT_CLASS = "posixAccount"
HOME_DIRECTORY_ROOT = "/home/"
LOGIN_SHELL = "/bin/bash"
