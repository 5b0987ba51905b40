import pytest
import os

# Settings are read at import time, so the environment has to be in place first
os.environ.setdefault('SECRET_KEY', 'test-secret-key')
os.environ.setdefault('FLASK_ENV', 'testing')


@pytest.fixture
def storage_root(tmp_path):
    """A fresh, not yet created storage directory."""
    return str(tmp_path / "storage")


@pytest.fixture
def app(storage_root):
    """Create and configure a new app instance for each test."""
    from app import create_app
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "STORAGE_ROOT": storage_root,
    })
    yield app


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def repository(app):
    """The repository the app reads and writes through."""
    return app.extensions['quiz_repository']


@pytest.fixture
def math_quiz():
    return {
        "title": "Math",
        "questions": [
            {"id": "1", "type": "number", "question": "2+2?", "options": [], "answer": "4"},
        ],
    }


@pytest.fixture
def mixed_quiz():
    return {
        "title": "Geography",
        "questions": [
            {"id": "1", "type": "multiple", "question": "Capital of France?",
             "options": ["Berlin", "Paris", "Rome"], "answer": "Paris"},
            {"id": "2", "type": "text", "question": "Largest ocean?", "options": [], "answer": "Pacific"},
            {"id": "3", "type": "number", "question": "How many continents?", "options": [], "answer": "7"},
        ],
    }
