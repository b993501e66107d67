from __future__ import annotations

from datetime import timezone

import pytest

from budgetwise import create_app
from budgetwise import config as cfg
from budgetwise.config import BaseConfig


@pytest.fixture(autouse=True)
def _data_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("BUDGETWISE_DATABASE_URL", raising=False)
    monkeypatch.delenv("BUDGETWISE_WEEK_START", raising=False)
    monkeypatch.delenv("BUDGETWISE_TIMEZONE", raising=False)


def test_defaults_use_sqlite_inside_data_dir(tmp_path):
    config = BaseConfig()

    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'budgetwise.db'}"
    assert config.WEEK_START == 0
    assert config.TIMEZONE is None
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_week_start_is_read_by_name(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_WEEK_START", "Sunday")

    assert BaseConfig().WEEK_START == 6


def test_invalid_week_start_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_WEEK_START", "someday")

    with pytest.raises(ValueError, match="BUDGETWISE_WEEK_START"):
        BaseConfig()


def test_timezone_is_read_by_name(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_TIMEZONE", "utc")

    assert BaseConfig().TIMEZONE is timezone.utc


def test_unknown_timezone_is_rejected(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_TIMEZONE", "Mars/Olympus_Mons")

    with pytest.raises(ValueError, match="BUDGETWISE_TIMEZONE"):
        BaseConfig()


def test_non_dev_mode_requires_secret_key(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_DEV_MODE", "false")
    monkeypatch.delenv("BUDGETWISE_SECRET_KEY", raising=False)

    with pytest.raises(ValueError, match="SECRET_KEY"):
        BaseConfig()

    monkeypatch.setenv("BUDGETWISE_SECRET_KEY", "s3cret")
    assert BaseConfig().SECRET_KEY == "s3cret"


def test_server_database_gets_pool_pre_ping(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("BUDGETWISE_DATABASE_URL", "postgresql://localhost/budgetwise")

    assert BaseConfig().sqlalchemy_engine_options() == {"pool_pre_ping": True}


@pytest.mark.parametrize(
    "name, expected",
    [("testing", cfg.TestConfig), ("development", cfg.DevConfig), (None, BaseConfig), ("bogus", BaseConfig)],
)
def test_create_app_selects_config(name, expected):
    app = create_app(name)

    assert type(app.config["BUDGETWISE_CONFIG"]) is expected
    assert app.config["TESTING"] is (expected is cfg.TestConfig)
    assert {"accounts", "transactions", "budgets", "categories", "recurring"} <= set(app.blueprints)


def test_unknown_route_uses_error_envelope():
    client = create_app("testing").test_client()

    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.get_json()["success"] is False
    assert response.get_json()["statusCode"] == 404
