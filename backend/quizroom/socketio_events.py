from flask import request
from flask_socketio import join_room, leave_room
from typing import Any, Dict
import logging

from quizroom import socketio
from quizroom.services.quiz import QuizSession


log = logging.getLogger(__name__)


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def register_socketio_handlers(session: QuizSession, namespace: str = '/ws', room: str = 'default') -> None:
    """Register Socket.IO event handlers bound to ``session``.

    Each connection's socket id is its player connection id. Every handler
    forwards to the session, which does its own broadcasting.
    """

    def handle_connect(auth=None):
        log.info(f"[connect] sid={_get_sid()}")

    def handle_disconnect(reason=None):
        session.disconnect(_get_sid())

    def handle_join(data=None):
        sid = _get_sid()
        # Join the room first so the joiner sees the leaderboard broadcast
        join_room(room)
        result = session.join(sid, _payload(data).get('nickname'))
        if result is None and sid not in session.players:
            leave_room(room)

    def handle_start_session(data=None):
        session.start(_get_sid())

    def handle_restart_session(data=None):
        reset_scores = _payload(data).get('resetScores', True)
        if not isinstance(reset_scores, bool):
            reset_scores = True
        session.restart(reset_scores=reset_scores, connection_id=_get_sid())

    def handle_submit_answer(data=None):
        payload = _payload(data)
        session.submit_answer(_get_sid(), payload.get('questionId'), payload.get('optionIndex'))

    def handle_advance_by_host(data=None):
        session.advance_by_host(_get_sid())

    def handle_leave(data=None):
        leave_room(room)
        session.leave(_get_sid())

    def handle_request_leaderboard(data=None):
        session.publish_leaderboard()

    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join', handle_join, namespace=namespace)
    socketio.on_event('startSession', handle_start_session, namespace=namespace)
    socketio.on_event('restartSession', handle_restart_session, namespace=namespace)
    socketio.on_event('submitAnswer', handle_submit_answer, namespace=namespace)
    socketio.on_event('advanceByHost', handle_advance_by_host, namespace=namespace)
    socketio.on_event('leave', handle_leave, namespace=namespace)
    socketio.on_event('requestLeaderboard', handle_request_leaderboard, namespace=namespace)
