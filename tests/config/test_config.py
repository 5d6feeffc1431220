from __future__ import annotations

import os
from datetime import timedelta

import pytest

from designrelay.config import (
    ConfigurationError,
    MissingConfigurationError,
    get_mail_config,
    get_order_source_config,
    get_polling_config,
    require_env_var,
    require_env_vars,
)
from designrelay.config.env import env_bool, env_float, env_int

_ORDER_ENV = {
    "ORDERS_API_URL": "https://orders.example.com/1.0/commerce/orders",
    "ORDERS_API_KEY": "secret-key-123456",
    "ORDERS_USER_AGENT": "designrelay-tests",
}
_MAIL_ENV = {
    "MAIL_HOST": "smtp.example.com",
    "MAIL_USER": "relay",
    "MAIL_PASSWORD": "hunter2",
    "MAIL_FROM": "relay@example.com",
    "MAIL_TO": "printshop@example.com",
}


def _set_env(monkeypatch: pytest.MonkeyPatch, values: dict[str, str]) -> None:
    for name, value in values.items():
        monkeypatch.setenv(name, value)


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_raises_when_any_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRESENT_VAR", "value")
    monkeypatch.delenv("MISSING_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["PRESENT_VAR", "MISSING_VAR"])

    assert "MISSING_VAR" in str(exc.value)
    assert "PRESENT_VAR" not in str(exc.value)
    assert exc.value.names == ("MISSING_VAR",)
    assert exc.value.name == "MISSING_VAR"


def test_missing_configuration_lists_every_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FIRST_VAR", raising=False)
    monkeypatch.delenv("SECOND_VAR", raising=False)

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["SECOND_VAR", "FIRST_VAR"])

    assert exc.value.names == ("FIRST_VAR", "SECOND_VAR")
    assert exc.value.name is None
    assert str(exc.value) == "Missing configuration for: FIRST_VAR, SECOND_VAR"


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    with pytest.raises(MissingConfigurationError):
        require_env_var("EXAMPLE_VAR")


def test_require_env_vars_restores_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEMP_VAR", "123")

    assert os.getenv("TEMP_VAR") == "123"
    assert require_env_var("TEMP_VAR") == "123"


def test_numeric_env_helpers_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SOME_NUMBER", raising=False)

    assert env_float("SOME_NUMBER", 1.5) == 1.5
    assert env_int("SOME_NUMBER", 7) == 7
    assert env_bool("SOME_NUMBER", False) is False  # noqa: FBT003


@pytest.mark.parametrize("raw", ["abc", "0", "-5"])
def test_env_int_rejects_invalid_values(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("SOME_NUMBER", raw)

    with pytest.raises(ConfigurationError, match="SOME_NUMBER"):
        env_int("SOME_NUMBER", 1)


def test_env_bool_parses_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLAG", "off")
    assert env_bool("FLAG", True) is False  # noqa: FBT003

    monkeypatch.setenv("FLAG", "Yes")
    assert env_bool("FLAG", False) is True  # noqa: FBT003

    monkeypatch.setenv("FLAG", "maybe")
    with pytest.raises(ConfigurationError) as exc:
        env_bool("FLAG", False)  # noqa: FBT003
    assert exc.value.name == "FLAG"


def test_order_source_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, _ORDER_ENV)
    monkeypatch.setenv("ORDERS_TIMEOUT_SECONDS", "12.5")
    monkeypatch.delenv("ORDERS_MAX_PAGES", raising=False)

    config = get_order_source_config()

    assert config.url == _ORDER_ENV["ORDERS_API_URL"]
    assert config.user_agent == "designrelay-tests"
    assert config.key_preview == "secret-k..."
    assert config.max_pages == 10
    assert config.resilience.timeout_seconds == 12.5
    assert config.resilience.name == "orders"


def test_order_source_config_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, _ORDER_ENV)
    monkeypatch.delenv("ORDERS_API_KEY")

    with pytest.raises(MissingConfigurationError, match="ORDERS_API_KEY"):
        get_order_source_config()


def test_mail_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, _MAIL_ENV)
    for name in ("MAIL_PORT", "MAIL_STARTTLS", "MAIL_VERIFY_TLS", "MAIL_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    config = get_mail_config()

    assert config.host == "smtp.example.com"
    assert config.sender == "relay@example.com"
    assert config.recipient == "printshop@example.com"
    assert config.port == 587
    assert config.starttls is True
    assert config.verify_tls is True
    assert config.timeout_seconds == 30.0


def test_mail_config_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, _MAIL_ENV)
    monkeypatch.setenv("MAIL_PORT", "2525")
    monkeypatch.setenv("MAIL_VERIFY_TLS", "false")

    config = get_mail_config()

    assert config.port == 2525
    assert config.verify_tls is False


def test_polling_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "POLL_LOOKBACK_SECONDS",
        "POLL_INTERVAL_SECONDS",
        "POLL_BACKOFF_BASE_SECONDS",
        "POLL_BACKOFF_MAX_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = get_polling_config()

    assert config.lookback == timedelta(minutes=10)
    assert config.interval == timedelta(minutes=5)
    assert config.backoff_base == timedelta(seconds=60)
    assert config.backoff_max == timedelta(seconds=1800)


def test_polling_config_rejects_inverted_backoff(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POLL_BACKOFF_BASE_SECONDS", "600")
    monkeypatch.setenv("POLL_BACKOFF_MAX_SECONDS", "60")

    with pytest.raises(ConfigurationError, match="POLL_BACKOFF_MAX_SECONDS") as exc:
        get_polling_config()

    assert exc.value.name == "POLL_BACKOFF_MAX_SECONDS"
