import pytest

from auth import (
    ClientCredentialsGrant,
    CustomGrant,
    ExchangeCodeGrant,
    GrantType,
    InvalidParameters,
    PasswordGrant,
    RefreshTokenGrant,
    build_grant,
    validate_grant,
)


def test_client_credentials_needs_no_params():
    grant = build_grant("client_credentials")
    assert isinstance(grant, ClientCredentialsGrant)
    assert grant.form_fields() == {}


def test_build_grant_accepts_enum_members():
    grant = build_grant(GrantType.EXCHANGE_CODE, {"exchange_code": "abc"})
    assert grant == ExchangeCodeGrant(exchange_code="abc")
    assert grant.grant_type == "exchange_code"


@pytest.mark.parametrize(
    "grant_type, params, missing",
    [
        ("password", {}, ["username", "password"]),
        ("password", {"username": "player"}, ["password"]),
        ("password", {"username": "", "password": "pw"}, ["username"]),
        ("refresh_token", {}, ["refresh_token"]),
        ("refresh_token", {"refresh_token": ""}, ["refresh_token"]),
        ("exchange_code", {"exchange_code": None}, ["exchange_code"]),
    ],
)
def test_missing_required_fields(grant_type, params, missing):
    with pytest.raises(InvalidParameters) as exc_info:
        build_grant(grant_type, params)

    assert exc_info.value.missing == missing
    assert exc_info.value.grant_type == grant_type
    for field in missing:
        assert field in str(exc_info.value)


def test_password_grant_form_fields_and_repr():
    grant = build_grant("password", {"username": "player", "password": "hunter2", "extra": "ignored"})
    assert isinstance(grant, PasswordGrant)
    assert grant.form_fields() == {"username": "player", "password": "hunter2"}
    assert "hunter2" not in repr(grant)


def test_refresh_token_grant_fields():
    grant = build_grant("refresh_token", {"refresh_token": "r-1"})
    assert isinstance(grant, RefreshTokenGrant)
    assert grant.form_fields() == {"refresh_token": "r-1"}


def test_custom_grant_forwards_everything_unvalidated():
    grant = build_grant("device_auth", {"account_id": "abc", "secret": 42, "remember": True})
    assert isinstance(grant, CustomGrant)
    assert grant.missing_fields() == []
    assert grant.form_fields() == {"account_id": "abc", "secret": "42", "remember": "true"}


def test_validate_grant_checks_prebuilt_records():
    with pytest.raises(InvalidParameters):
        validate_grant(PasswordGrant(username="player", password=""))
    grant = ExchangeCodeGrant(exchange_code="code")
    assert validate_grant(grant) is grant
