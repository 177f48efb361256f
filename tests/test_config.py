import logging

import pytest
from flask import Flask

import jsonapi_update
from jsonapi_update import DB, JsonApiUpdate
from jsonapi_update.config import get_config, is_debug


@pytest.fixture(autouse=True)
def _clear_config_cache():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_defaults() -> None:
    assert get_config("NESTED_ATTRIBUTES_SUFFIX") == "_attributes"
    assert get_config("DESTROY_FLAG") == "_destroy"
    assert get_config("IDS_LOOKUP_SUFFIX") == "_ids"


def test_environment_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JSONAPI_UPDATE_TEST_OPTION", "from-env")

    assert get_config("JSONAPI_UPDATE_TEST_OPTION") == "from-env"


def test_app_config_takes_precedence() -> None:
    app = Flask(__name__)
    app.config["IDS_LOOKUP_SUFFIX"] = "_keys"

    with app.app_context():
        assert get_config("IDS_LOOKUP_SUFFIX") == "_keys"


def test_init_app_binds_db_and_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    for option in ("NESTED_ATTRIBUTES_SUFFIX", "DESTROY_FLAG", "IDS_LOOKUP_SUFFIX"):
        monkeypatch.setattr(JsonApiUpdate, option, getattr(JsonApiUpdate, option))
    monkeypatch.setattr(jsonapi_update, "DB", jsonapi_update.DB)
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
    DB.init_app(app)

    JsonApiUpdate(app, DESTROY_FLAG="_remove")

    assert jsonapi_update.DB is DB
    assert get_config("DESTROY_FLAG") == "_remove"


def test_debug_follows_loglevel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(jsonapi_update.log, "level", logging.DEBUG)
    assert is_debug() is True

    monkeypatch.setattr(jsonapi_update.log, "level", logging.WARNING)
    assert is_debug() is False
