"""Quiz domain services: catalog, players, scoring and the session state machine.

Socket handlers and HTTP routes import from here; nothing in this package
knows about Flask request contexts.
"""
from .catalog import Question, QuestionCatalog, load_catalog
from .errors import CatalogError, QuizError, ValidationError
from .leaderboard import project_leaderboard
from .registry import JoinResult, Player, PlayerRegistry, RoundTracker
from .scheduler import BackgroundScheduler, TimerHandle
from .session import FINISHED, LOBBY, RUNNING, QuizSession, QuizSettings
from .transport import SocketIOBroadcaster

__all__ = [
    'Question', 'QuestionCatalog', 'load_catalog',
    'CatalogError', 'QuizError', 'ValidationError',
    'project_leaderboard',
    'JoinResult', 'Player', 'PlayerRegistry', 'RoundTracker',
    'BackgroundScheduler', 'TimerHandle',
    'FINISHED', 'LOBBY', 'RUNNING', 'QuizSession', 'QuizSettings',
    'SocketIOBroadcaster',
]
