import os
import sys
# ensure backend package is on path for tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import pytest
from fastapi.testclient import TestClient
from fundboard.config import Settings
from fundboard.main import create_app

ADMIN_KEY = 'test-admin-key'


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL='sqlite://',
        ADMIN_PASSWORD=ADMIN_KEY,
        FORWARD_TO_APPSCRIPT_URL=None,
        LOG_JSON=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings, configure_logs=False)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_headers():
    return {'x-admin-key': ADMIN_KEY}


def donation(numbers, amount=None, method='venmo', **overrides):
    body = {
        'amount': sum(numbers) if amount is None else amount,
        'numbers': numbers,
        'method': method,
        'donorName': 'A',
        'donorPhone': '1',
        'donorAddress': 'X',
    }
    body.update(overrides)
    return body
