import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')

from shelfwise import create_app  # noqa: E402
from shelfwise.config import TestingConfig  # noqa: E402
from shelfwise.models import db  # noqa: E402


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture(scope='session')
def clock():
    return FakeClock()


@pytest.fixture(scope='session')
def app_instance(clock):
    return create_app(TestingConfig, clock=clock)


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        app_instance.config['STRICT_STATUS_TRANSITIONS'] = False
        app_instance.extensions['dashboard_cache'].invalidate()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()
