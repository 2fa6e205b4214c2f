import os
import sys
import pytest

# Ensure the backend root (containing the `shellgame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from shellgame import create_app, socketio
from shellgame.models import GameSettings
from shellgame.services.game.controller import GameController
from shellgame.services.game.scheduler import ManualScheduler
from shellgame.views import (
    MemoryHandsView, MemoryHealthView, MemoryMessageView, MemoryRingView, MemoryScoreView,
)


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    TIMER_MODE = 'manual'
    MAX_LEVEL = 10
    START_HEALTH = 3
    HIDE_DELAY_MS = 2000
    MESSAGE_DELAY_MS = 1000
    WIN_REVEAL_DELAY_MS = 1000
    WIN_HOLD_MS = 3000
    GAME_OVER_DELAY_MS = 3000
    GIVE_UP_DELAY_MS = 1000
    STOP_DELAY_MS = 1000
    RESET_HEALTH_ON_START = False


class ByteFeed:
    """Deterministic byte source: even bytes hide the ring right, odd left."""

    def __init__(self, values=None):
        self.values = list(values or [])
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return 0


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def byte_feed():
    return ByteFeed()


@pytest.fixture()
def make_controller(scheduler, byte_feed):
    def _make(**settings_overrides):
        return GameController(
            hands=MemoryHandsView(),
            ring=MemoryRingView(),
            health=MemoryHealthView(),
            message=MemoryMessageView(),
            score=MemoryScoreView(),
            scheduler=scheduler,
            settings=GameSettings(**settings_overrides),
            byte_source=byte_feed,
            session_id='test',
        )
    return _make


@pytest.fixture()
def controller(make_controller):
    return make_controller()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    from shellgame import socketio_events
    socketio_events._controllers.clear()
    with application.app_context():
        yield application
    socketio_events._controllers.clear()


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
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
