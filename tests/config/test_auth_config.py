import logging
import sys

import pytest

from azdo.config import (
    ErrorKind,
    KeyNotFoundError,
    NoDefaultOrganizationError,
    OrganizationNotFoundError,
    TokenNotFoundError,
)
from azdo.config.secret_store import keyring_service_name


TWO_ORGANIZATIONS = """\
alpha:
  url: https://dev.azure.com/alpha
beta:
  url: https://dev.azure.com/beta
  git_protocol: ssh
"""


def test_fabrikam_login_scenario(make_config):
    cfg = make_config()
    auth = cfg.authentication()

    auth.login("fabrikam", "https://dev.azure.com/fabrikam", "tok123", "https", False)

    assert cfg.get(["organizations", "fabrikam", "pat"]) == "tok123"
    assert auth.get_url("fabrikam") == "https://dev.azure.com/fabrikam"
    assert auth.get_default_organization() == "fabrikam"

    reloaded = make_config().authentication()
    assert reloaded.get_token("fabrikam") == "tok123"
    assert reloaded.get_git_protocol("fabrikam") == "https"


def test_login_normalizes_case(make_config):
    auth = make_config().authentication()

    auth.login("MyOrg", "https://dev.azure.com/MyOrg", "tok", "", False)

    assert auth.get_token("myorg") == "tok"
    assert auth.get_token("MYORG") == "tok"
    assert auth.get_organizations() == ["myorg"]


def test_login_secure_storage_keeps_token_out_of_file(make_config, secret_store, config_dir):
    cfg = make_config()
    auth = cfg.authentication()

    auth.login("myorg", "https://dev.azure.com/myorg", "secret-token", "ssh", True)

    assert secret_store.secrets[(keyring_service_name("myorg"), "")] == "secret-token"
    with pytest.raises(KeyNotFoundError):
        cfg.get(["organizations", "myorg", "pat"])
    assert "secret-token" not in (config_dir / "organizations.yml").read_text()
    assert auth.get_git_protocol("myorg") == "ssh"
    assert auth.get_token("myorg") == "secret-token"


def test_login_secure_removes_stale_plaintext_token(write_config, make_config, secret_store):
    write_config(organizations="myorg:\n  url: https://dev.azure.com/myorg\n  pat: old\n")
    cfg = make_config()

    cfg.authentication().login("myorg", "https://dev.azure.com/myorg", "new", "", True)

    with pytest.raises(KeyNotFoundError):
        cfg.get(["organizations", "myorg", "pat"])
    assert cfg.authentication().get_token("myorg") == "new"


def test_login_falls_back_to_plaintext_when_store_fails(make_config, failing_secret_store):
    cfg = make_config(failing_secret_store)

    cfg.authentication().login("myorg", "https://dev.azure.com/myorg", "tok", "", True)

    assert cfg.get(["organizations", "myorg", "pat"]) == "tok"


def test_login_without_secret_store_uses_plaintext(make_config):
    cfg = make_config(None)

    cfg.authentication().login("myorg", "https://dev.azure.com/myorg", "tok", "", True)

    assert cfg.get(["organizations", "myorg", "pat"]) == "tok"


def test_login_empty_protocol_keeps_existing_value(write_config, make_config):
    write_config(organizations="myorg:\n  url: https://dev.azure.com/myorg\n  git_protocol: ssh\n")
    cfg = make_config()

    cfg.authentication().login("myorg", "https://dev.azure.com/myorg", "tok", "", False)

    assert cfg.authentication().get_git_protocol("myorg") == "ssh"


def test_login_requires_organization(make_config):
    with pytest.raises(ValueError):
        make_config().authentication().login("", "https://dev.azure.com/x", "tok")


def test_login_logs_authentication_event(mocker, make_config):
    spy = mocker.spy(logging.getLogger("azdo.auth"), "info")

    make_config().authentication().login("myorg", "https://dev.azure.com/myorg", "tok", "", True)

    spy.assert_called_once()
    _, kwargs = spy.call_args
    assert kwargs["extra"]["auth_operation"] == "login"
    assert kwargs["extra"]["auth_organization"] == "myorg"


def test_token_precedence(monkeypatch, write_config, make_config, secret_store):
    write_config(organizations="x:\n  url: https://dev.azure.com/x\n  pat: plain\n")
    secret_store.secrets[(keyring_service_name("x"), "")] = "stored"
    monkeypatch.setenv("AZDO_TOKEN", "from-env")
    cfg = make_config()
    auth = cfg.authentication()

    assert auth.get_token("x") == "from-env"

    monkeypatch.delenv("AZDO_TOKEN")
    assert auth.get_token("x") == "plain"

    cfg.remove(["organizations", "x", "pat"])
    assert auth.get_token("x") == "stored"


def test_empty_env_token_still_takes_precedence(monkeypatch, write_config, make_config):
    write_config(organizations="x:\n  pat: plain\n")
    monkeypatch.setenv("AZDO_TOKEN", "")

    assert make_config().authentication().get_token("x") == ""


def test_env_token_applies_to_unknown_organization(monkeypatch, make_config):
    monkeypatch.setenv("AZDO_TOKEN", "from-env")

    assert make_config().authentication().get_token("nowhere") == "from-env"


def test_get_token_not_found(make_config):
    with pytest.raises(TokenNotFoundError) as exc:
        make_config().authentication().get_token("nowhere")

    assert exc.value.kind is ErrorKind.NOT_FOUND
    assert exc.value.organization == "nowhere"


def test_get_token_secret_store_failure_is_not_found(make_config, failing_secret_store):
    with pytest.raises(TokenNotFoundError):
        make_config(failing_secret_store).authentication().get_token("x")


def test_get_token_from_env_or_config_missing(write_config, make_config):
    write_config(organizations="x:\n  url: https://dev.azure.com/x\n")

    with pytest.raises(KeyNotFoundError) as exc:
        make_config().authentication().get_token_from_env_or_config("x")

    assert exc.value.key == "pat"


def test_get_token_decodes_windows_secret(mocker, make_config, secret_store):
    mocker.patch("azdo.config.auth_config.is_windows", return_value=True)
    raw = "tok".encode("utf-16-le" if sys.byteorder == "little" else "utf-16-be")
    secret_store.secrets[(keyring_service_name("x"), "")] = raw.decode("latin-1")

    assert make_config().authentication().get_token("x") == "tok"


def test_get_token_no_decode_off_windows(mocker, make_config, secret_store):
    mocker.patch("azdo.config.auth_config.is_windows", return_value=False)
    secret_store.secrets[(keyring_service_name("x"), "")] = "t\x00o\x00k\x00"

    assert make_config().authentication().get_token("x") == "t\x00o\x00k\x00"


def test_get_url_missing(make_config):
    with pytest.raises(KeyNotFoundError):
        make_config().authentication().get_url("nowhere")


def test_get_git_protocol_default(make_config):
    assert make_config().authentication().get_git_protocol("nowhere") == "https"


def test_default_organization_none_configured(make_config):
    with pytest.raises(NoDefaultOrganizationError) as exc:
        make_config().authentication().get_default_organization()

    assert exc.value.kind is ErrorKind.NO_DEFAULT_ORGANIZATION


def test_default_organization_single_auto_selected(write_config, make_config):
    write_config(organizations="Solo:\n  url: https://dev.azure.com/solo\n")

    assert make_config().authentication().get_default_organization() == "solo"


def test_default_organization_two_without_default(write_config, make_config):
    write_config(organizations=TWO_ORGANIZATIONS)

    with pytest.raises(NoDefaultOrganizationError):
        make_config().authentication().get_default_organization()


def test_default_organization_explicit(write_config, make_config):
    write_config(general="default_organization: Beta\n", organizations=TWO_ORGANIZATIONS)

    assert make_config().authentication().get_default_organization() == "beta"


def test_default_organization_env_always_wins(monkeypatch, write_config, make_config):
    write_config(general="default_organization: beta\n", organizations=TWO_ORGANIZATIONS)
    monkeypatch.setenv("AZDO_ORGANIZATION", " Other ")

    assert make_config().authentication().get_default_organization() == "other"


def test_default_organization_empty_env(monkeypatch, write_config, make_config):
    write_config(organizations="solo:\n  url: https://dev.azure.com/solo\n")
    monkeypatch.setenv("AZDO_ORGANIZATION", "")

    with pytest.raises(NoDefaultOrganizationError):
        make_config().authentication().get_default_organization()


def test_set_default_organization(write_config, make_config):
    write_config(organizations=TWO_ORGANIZATIONS)
    cfg = make_config()

    cfg.authentication().set_default_organization("ALPHA")

    assert cfg.get(["default_organization"]) == "alpha"
    assert cfg.authentication().get_default_organization() == "alpha"


def test_set_default_organization_unknown(write_config, make_config):
    write_config(organizations=TWO_ORGANIZATIONS)
    cfg = make_config()

    with pytest.raises(OrganizationNotFoundError) as exc:
        cfg.authentication().set_default_organization("gamma")

    assert exc.value.kind is ErrorKind.ORGANIZATION_NOT_FOUND
    assert "gamma" in str(exc.value)
    with pytest.raises(KeyNotFoundError):
        cfg.get(["default_organization"])


def test_clear_default_organization(write_config, make_config):
    write_config(general="default_organization: alpha\n", organizations=TWO_ORGANIZATIONS)
    cfg = make_config()
    auth = cfg.authentication()

    auth.set_default_organization("")
    auth.set_default_organization("")

    with pytest.raises(KeyNotFoundError):
        cfg.get(["default_organization"])


def test_get_organizations(write_config, make_config):
    write_config(organizations=TWO_ORGANIZATIONS)

    assert make_config().authentication().get_organizations() == ["alpha", "beta"]


def test_get_organizations_empty(make_config):
    assert make_config().authentication().get_organizations() == []


def test_logout_is_idempotent(write_config, make_config, secret_store):
    write_config(organizations=TWO_ORGANIZATIONS)
    secret_store.secrets[(keyring_service_name("alpha"), "")] = "tok"
    cfg = make_config()
    auth = cfg.authentication()

    auth.logout("alpha")
    auth.logout("alpha")

    assert auth.get_organizations() == ["beta"]
    assert (keyring_service_name("alpha"), "") not in secret_store.secrets
    assert make_config().authentication().get_organizations() == ["beta"]


def test_logout_empty_name_is_noop(mocker, write_config, make_config):
    write_config(organizations=TWO_ORGANIZATIONS)
    cfg = make_config()
    write = mocker.spy(cfg, "write")

    cfg.authentication().logout("")

    write.assert_not_called()
    assert cfg.authentication().get_organizations() == ["alpha", "beta"]


def test_logout_ignores_secret_store_failure(write_config, make_config, failing_secret_store):
    write_config(organizations=TWO_ORGANIZATIONS)
    auth = make_config(failing_secret_store).authentication()

    auth.logout("Beta")

    assert auth.get_organizations() == ["alpha"]


MIXED_CASE_ORGANIZATION = """\
MyOrg:
  url: https://dev.azure.com/MyOrg
  git_protocol: ssh
  pat: tok
"""


def test_mixed_case_stored_organization_resolves(write_config, make_config):
    write_config(organizations=MIXED_CASE_ORGANIZATION)
    auth = make_config().authentication()

    assert auth.get_organizations() == ["myorg"]
    assert auth.organization_key("myorg") == "MyOrg"
    assert auth.get_url("myorg") == "https://dev.azure.com/MyOrg"
    assert auth.get_token("MYORG") == "tok"
    assert auth.get_git_protocol("myorg") == "ssh"


def test_login_updates_mixed_case_stored_organization(write_config, make_config):
    write_config(organizations=MIXED_CASE_ORGANIZATION)
    cfg = make_config()

    cfg.authentication().login("myorg", "https://dev.azure.com/myorg", "new", "", False)

    assert cfg.keys(["organizations"]) == ["MyOrg"]
    assert make_config().authentication().get_token("myorg") == "new"


def test_logout_removes_mixed_case_stored_organization(write_config, make_config, config_dir):
    write_config(organizations=MIXED_CASE_ORGANIZATION + "other:\n  url: https://dev.azure.com/other\n")
    auth = make_config().authentication()

    auth.logout("myorg")

    assert auth.get_organizations() == ["other"]
    assert "MyOrg" not in (config_dir / "organizations.yml").read_text()
    assert make_config().authentication().get_organizations() == ["other"]


def test_logout_removes_every_case_variant(write_config, make_config):
    write_config(organizations="MyOrg:\n  pat: a\nmyorg:\n  pat: b\n")
    auth = make_config().authentication()

    auth.logout("MYORG")

    assert auth.get_organizations() == []
