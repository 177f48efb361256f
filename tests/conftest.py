import pytest
from flask import Flask

from jsonapi_update import DB, JsonApiUpdate
from jsonapi_update.config import get_config

from .models import Article, Tag


@pytest.fixture
def app():
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
    DB.init_app(app)
    JsonApiUpdate(app)
    with app.app_context():
        DB.create_all()
        yield app
        DB.session.remove()
        DB.drop_all()
    get_config.cache_clear()


@pytest.fixture
def article(app):
    article = Article(id=1, title="Hello", tags=[Tag(id=2, name="two"), Tag(id=3, name="three")])
    DB.session.add(article)
    DB.session.commit()
    return article
