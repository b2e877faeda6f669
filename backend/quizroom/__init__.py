from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from quizroom.main import main
    flask_app.register_blueprint(main)

    from quizroom.api.quiz import quiz
    flask_app.register_blueprint(quiz, url_prefix='/api/quiz')

    # Build the single room session and bind the socket handlers to it
    from quizroom.services.quiz import (
        BackgroundScheduler, QuizSession, QuizSettings, SocketIOBroadcaster, load_catalog,
    )
    from quizroom.socketio_events import register_socketio_handlers

    namespace = flask_app.config.get('QUIZ_NAMESPACE', '/ws')
    room = flask_app.config.get('QUIZ_ROOM', 'default')
    with flask_app.app_context():
        catalog = load_catalog(flask_app.config)
    if not len(catalog):
        flask_app.logger.warning('Question catalog is empty; a started session finishes immediately')
    session = QuizSession(
        catalog,
        SocketIOBroadcaster(socketio, namespace=namespace, room=room),
        scheduler or BackgroundScheduler(socketio),
        settings=QuizSettings.from_config(flask_app.config),
        logger=flask_app.logger,
    )
    flask_app.extensions['quiz_session'] = session
    register_socketio_handlers(session, namespace=namespace, room=room)

    @click.command('seed-questions')
    def seed_questions_command():
        """Drops, recreates, and seeds the question table with the sample set."""
        from quizroom.models import QuestionRecord
        from quizroom.services.quiz.catalog import load_sample_catalog
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            for position, question in enumerate(load_sample_catalog()):
                db.session.add(QuestionRecord.from_question(question, position=position))
            db.session.commit()
            print('Question table has been reset and seeded!')

    @click.command('import-questions')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def import_questions_command(path):
        """Replaces the stored questions with those in a JSON file."""
        from quizroom.models import QuestionRecord
        from quizroom.services.quiz.catalog import load_file_catalog
        imported = load_file_catalog(path)
        with flask_app.app_context():
            db.create_all()
            QuestionRecord.query.delete()
            for position, question in enumerate(imported):
                db.session.add(QuestionRecord.from_question(question, position=position))
            db.session.commit()
            print(f'Imported {len(imported)} questions; restart the server to play them.')

    flask_app.cli.add_command(seed_questions_command)
    flask_app.cli.add_command(import_questions_command)

    return flask_app


def get_quiz_session(flask_app):
    return flask_app.extensions['quiz_session']
