import logging
import os
import sys
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
import jsonapi_update
from .config import get_config
import flask.app


class JsonApiUpdate:
    """This class configures a Flask application to use the jsonapi_update model extensions
    :param app: a Flask application.
    :param app_db: the Flask-SQLAlchemy extension used by the models, defaults to the app's "sqlalchemy" extension
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    """

    # Configuration settings are stored as class variables
    NESTED_ATTRIBUTES_SUFFIX = "_attributes"
    DESTROY_FLAG = "_destroy"
    IDS_LOOKUP_SUFFIX = "_ids"
    LOGLEVEL = logging.WARNING

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(self, app: flask.app.Flask, app_db: SQLAlchemy = None, **kwargs) -> None:
        """
        Bind the models to the app database and load the configuration
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]

        jsonapi_update.DB = self.db = app_db

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        for conf_name, conf_val in kwargs.items():
            setattr(JsonApiUpdate, conf_name, conf_val)

        for conf_name, conf_val in app.config.items():
            setattr(JsonApiUpdate, conf_name, conf_val)

        # settings may have changed, drop the cached values
        get_config.cache_clear()

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. https://flask.palletsprojects.com/en/latest/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stderr so we redirect eveything to sys.stderr
        """
        log = logging.getLogger(__name__.split(".")[0])
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = JsonApiUpdate.init_logging(LOGLEVEL)
