import dataclasses

import pytest

from ldap_client import ConfigurationError, DirectoryConfig, FilterTemplate, load_config


def test_defaults():
    cfg = DirectoryConfig.from_dict({"host": "ldap.example.com", "base": "dc=example,dc=com"})
    assert cfg.port == 389
    assert cfg.use_ssl is False
    assert cfg.skip_tls is False
    assert cfg.insecure_skip_verify is False
    assert cfg.server_name == ""
    assert cfg.user_filter == FilterTemplate("(uid=%s)")
    assert cfg.group_filter == FilterTemplate("(memberUid=%s)")
    assert cfg.attributes == ()
    assert cfg.timeout == 10
    assert cfg.has_service_credentials is False
    assert cfg.address == "ldap.example.com:389"


def test_from_dict_coerces_values():
    cfg = DirectoryConfig.from_dict(
        {
            "host": " ldap.example.com ",
            "port": "636",
            "use_ssl": "yes",
            "insecure_skip_verify": "true",
            "server_name": "ldap.example.com",
            "base": "dc=example,dc=com",
            "bind_dn": "uid=readonly,dc=example,dc=com",
            "bind_password": "secret",
            "user_filter": "(&(objectClass=person)(uid=%s))",
            "attributes": "givenName, sn ,mail",
        }
    )
    assert cfg.host == "ldap.example.com"
    assert cfg.port == 636
    assert cfg.use_ssl is True
    assert cfg.insecure_skip_verify is True
    assert cfg.attributes == ("givenName", "sn", "mail")
    assert cfg.user_filter.render("bob") == "(&(objectClass=person)(uid=bob))"
    assert cfg.has_service_credentials is True


def test_attributes_list():
    cfg = DirectoryConfig.from_dict({"host": "h", "base": "", "attributes": ["uid", "mail"]})
    assert cfg.attributes == ("uid", "mail")


def test_service_credentials_need_both_parts():
    cfg = DirectoryConfig(host="h", base="", bind_dn="uid=readonly", bind_password=None)
    assert cfg.bind_password == ""
    assert cfg.has_service_credentials is False


@pytest.mark.parametrize(
    "data",
    [
        {"base": "dc=example,dc=com"},
        {"host": "", "base": "dc=example,dc=com"},
        {"host": "h"},
        {"host": "h", "base": "", "port": 0},
        {"host": "h", "base": "", "user_filter": "(uid=alice)"},
        {"host": "h", "base": "", "group_filter": "(memberUid=%s"},
        {"host": "h", "base": "", "attributes": 5},
        {"host": "h", "base": "", "unknown": 1},
    ],
)
def test_invalid_config(data):
    with pytest.raises(ConfigurationError):
        DirectoryConfig.from_dict(data)


def test_config_is_immutable():
    cfg = DirectoryConfig(host="h", base="dc=example,dc=com")
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.host = "other"


def test_password_not_in_repr():
    cfg = DirectoryConfig(host="h", base="", bind_dn="cn=admin", bind_password="topsecret")
    assert "topsecret" not in repr(cfg)


def test_invalid_filter_on_direct_construction():
    with pytest.raises(ValueError):
        DirectoryConfig(host="h", base="", user_filter="(uid=*)")


def test_load_config(tmp_path):
    path = tmp_path / "ldap.yaml"
    path.write_text(
        "ldap_client:\n"
        "  host: ldap.example.com\n"
        "  port: 389\n"
        "  base: dc=example,dc=com\n"
        "  bind_dn: uid=readonly,ou=People,dc=example,dc=com\n"
        "  bind_password: readonlypassword\n"
        "  user_filter: (uid=%s)\n"
        "  attributes: [givenName, sn, mail, uid]\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.host == "ldap.example.com"
    assert cfg.bind_password == "readonlypassword"
    assert cfg.attributes == ("givenName", "sn", "mail", "uid")


def test_load_config_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_config(tmp_path / "missing.yaml")


def test_load_config_missing_section(tmp_path):
    path = tmp_path / "ldap.yaml"
    path.write_text("other:\n  host: x\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="ldap_client"):
        load_config(path)


def test_load_config_bad_yaml(tmp_path):
    path = tmp_path / "ldap.yaml"
    path.write_text("ldap_client: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_load_config_invalid_values(tmp_path):
    path = tmp_path / "ldap.yaml"
    path.write_text("ldap_client:\n  host: ldap.example.com\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="base"):
        load_config(path)
