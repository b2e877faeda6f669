import os
import sys
import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom import create_app, db, socketio, get_quiz_session
from quizroom.services.quiz import QuizSession, QuizSettings, TimerHandle
from quizroom.services.quiz.catalog import catalog_from_dicts


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    QUESTION_DURATION_MS = 15000
    POST_ROUND_PAUSE_MS = 1500
    CORRECT_ANSWER_POINTS = 10
    NICKNAME_MAX_LENGTH = 20
    QUIZ_NAMESPACE = '/ws'
    QUIZ_ROOM = 'default'
    QUESTION_SOURCE = 'sample'
    HOST_ONLY_CONTROLS = False


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.scheduled = []

    def call_later(self, delay_ms, callback, *args):
        handle = TimerHandle(delay_ms)
        self.scheduled.append((handle, callback, args))
        return handle

    @property
    def live(self):
        return [h for h, _, _ in self.scheduled if not h.cancelled]

    def fire(self, handle):
        # Runs the callback even if the handle was cancelled, like a late timer would
        for h, callback, args in self.scheduled:
            if h is handle:
                self.scheduled.remove((h, callback, args))
                callback(*args)
                return
        raise AssertionError('handle was never scheduled')

    def run_next(self):
        live = self.live
        assert live, 'no live timer to run'
        handle = live[0]
        self.fire(handle)
        return handle.delay_ms


class RecordingBroadcaster:
    def __init__(self):
        self.sent = []

    def to_room(self, event, payload):
        self.sent.append(('room', event, payload))

    def to_client(self, connection_id, event, payload):
        self.sent.append((connection_id, event, payload))

    def payloads(self, event, audience=None):
        return [p for a, e, p in self.sent if e == event and (audience is None or a == audience)]

    def last(self, event, audience=None):
        found = self.payloads(event, audience)
        return found[-1] if found else None

    def clear(self):
        self.sent = []


TWO_QUESTIONS = [
    {'id': 'q1', 'text': 'Two plus two?', 'options': ['3', '4', '5'], 'correctOptionIndex': 1},
    {'id': 'q2', 'text': 'Capital of France?', 'options': ['Paris', 'Rome'], 'correctOptionIndex': 0},
]


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def make_session(scheduler, broadcaster):
    def _make(questions=None, **settings):
        catalog = catalog_from_dicts(TWO_QUESTIONS if questions is None else questions)
        return QuizSession(catalog, broadcaster, scheduler, settings=QuizSettings(**settings))
    return _make


@pytest.fixture()
def session(make_session):
    return make_session()


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
        # Ensure models are imported so tables are created
        import quizroom.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def quiz_session(flask_app):
    return get_quiz_session(flask_app)


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected('/ws'):
            test_client.disconnect(namespace='/ws')
