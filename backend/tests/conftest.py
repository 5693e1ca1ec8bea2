import os
import sys
import pytest

# Ensure the backend root (containing the `wager` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wager import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_TRANSACTION_ATTEMPTS = 3
    CORS_ORIGINS = ['http://localhost:5173']
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wager.models  # noqa: F401
        from wager.services.sync import hub
        db.create_all()
        hub.reset()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def make_category(flask_app):
    """Create a category with ``terms`` given as (term, correct_answer) pairs."""
    from wager.models import Category, Question

    def _make(name, option1, option2, terms=()):
        category = Category(name=name, option1=option1, option2=option2)
        db.session.add(category)
        db.session.flush()
        for term, answer in terms:
            db.session.add(Question(term=term, correct_answer=answer,
                                    category_id=category.id, category_name=name))
        db.session.commit()
        return category
    return _make


@pytest.fixture()
def make_players(flask_app):
    from wager.models import Player

    def _make(*names):
        created = []
        for name in names:
            player = Player(id=f"uid-{name.lower()}", name=name, score=0)
            db.session.add(player)
            created.append(player)
        db.session.commit()
        return [p.id for p in created]
    return _make


def playlist_entry(qid, category_id, answer='Yes', term=None):
    return {
        'id': qid,
        'term': term or f"term {qid}",
        'correct_answer': answer,
        'category_id': category_id,
        'category_name': f"Category {category_id}",
        'option1': 'Yes',
        'option2': 'No',
    }
