import os
import sys
import pytest

# Ensure the backend root (containing the `duel` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from duel import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JOIN_CODE_LENGTH = 6
    CORS_ORIGINS = ['http://localhost:4321']
    # Keep bcrypt fast in tests
    BCRYPT_LOG_ROUNDS = 4


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # Only hold the app context for setup/teardown; each test-client request
    # must get its own context so signed-in users are not shared.
    with application.app_context():
        # Ensure models are imported so tables are created
        import duel.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _register(test_client, username, password='password'):
    res = test_client.post('/register', json={'username': username, 'password': password})
    assert res.status_code == 201
    return res.get_json()['user']


@pytest.fixture()
def alice(flask_app):
    """A signed-in client for user 'alice'."""
    test_client = flask_app.test_client()
    test_client.user = _register(test_client, 'alice')
    return test_client


@pytest.fixture()
def bob(flask_app):
    """A signed-in client for user 'bob'."""
    test_client = flask_app.test_client()
    test_client.user = _register(test_client, 'bob')
    return test_client


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
