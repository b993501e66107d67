"""BudgetWise application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths for the JSON API."""

    yield "budgetwise.blueprints.accounts"
    yield "budgetwise.blueprints.transactions"
    yield "budgetwise.blueprints.categories"
    yield "budgetwise.blueprints.budgets"
    yield "budgetwise.blueprints.recurring"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["BUDGETWISE_CONFIG"] = config_obj
    app.json.sort_keys = False

    from .logging_config import setup_logging

    setup_logging(config_obj)

    # Import init_db lazily so importing the package does not register
    # SQLModel tables before a config exists.
    from .errors import register_error_handlers
    from .extensions import init_db

    init_db(app)
    register_error_handlers(app)
    _register_blueprints(app)
    _cli.init_app(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["create_app"]
