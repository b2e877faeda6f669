import os

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def _allowed_origins():
    if os.environ.get('FLASK_ENV') == 'production':
        return [o for o in [os.environ.get('CLIENT_ORIGIN')] if o]
    return list(DEV_ORIGINS)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///quiz.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = _allowed_origins()
    # Round timing (milliseconds)
    QUESTION_DURATION_MS = int(os.environ.get('QUESTION_DURATION_MS', '15000'))
    POST_ROUND_PAUSE_MS = int(os.environ.get('POST_ROUND_PAUSE_MS', '1500'))
    # Scoring
    CORRECT_ANSWER_POINTS = int(os.environ.get('CORRECT_ANSWER_POINTS', '10'))
    NICKNAME_MAX_LENGTH = int(os.environ.get('NICKNAME_MAX_LENGTH', '20'))
    # Single shared room on one Socket.IO namespace
    QUIZ_NAMESPACE = os.environ.get('QUIZ_NAMESPACE', '/ws')
    QUIZ_ROOM = os.environ.get('QUIZ_ROOM', 'default')
    # sample | file | database
    QUESTION_SOURCE = os.environ.get('QUESTION_SOURCE', 'sample')
    QUESTION_SET_PATH = os.environ.get('QUESTION_SET_PATH')
    # Restrict start/restart/advance to the host connection
    HOST_ONLY_CONTROLS = os.environ.get('HOST_ONLY_CONTROLS', '0').lower() in ('1', 'true', 'yes')
