from flask import Blueprint, jsonify, current_app
from quizroom import get_quiz_session

quiz = Blueprint('quiz', __name__)


@quiz.route('/state', methods=['GET'])
def get_state():
    """
    Returns a read-only snapshot of the room: status, question pointer and leaderboard.
    """
    return jsonify(get_quiz_session(current_app).snapshot()), 200


@quiz.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    return jsonify(get_quiz_session(current_app).leaderboard()), 200


@quiz.route('/questions', methods=['GET'])
def get_questions():
    """
    Lists the catalog without correct answers.
    """
    catalog = get_quiz_session(current_app).catalog
    return jsonify({'total': len(catalog), 'questions': catalog.to_public_list()}), 200
