"""The quiz session state machine.

One ``QuizSession`` owns the room: player registry, the answered-set of the
active question, the current question pointer, the accepting-answers flag and
the single pending timer. Every public method takes the session lock, so
socket handlers and timer callbacks are processed one at a time.

Lifecycle::

    lobby --start--> running --(past last question)--> finished
    running/finished --restart--> running

Outbound events go through a broadcaster with ``to_room(event, payload)`` and
``to_client(connection_id, event, payload)``.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .catalog import QuestionCatalog
from .errors import ValidationError
from .leaderboard import project_leaderboard
from .registry import JoinResult, PlayerRegistry, RoundTracker


LOBBY = 'lobby'
RUNNING = 'running'
FINISHED = 'finished'

REASON_ALL_ANSWERED = 'All players answered'
REASON_ALL_REMAINING_ANSWERED = 'All remaining players answered'
REASON_ADVANCED_BY_HOST = 'Advanced by host'
REASON_TIME_UP = 'Time up!'

# Outbound event names
EVENT_STATUS = 'sessionStatus'
EVENT_LEADERBOARD = 'leaderboard'
EVENT_QUESTION = 'question'
EVENT_ANSWER_OUTCOME = 'answerOutcome'
EVENT_ERROR = 'errorNotice'


@dataclass(frozen=True)
class QuizSettings:
    question_duration_ms: int = 15000
    post_round_pause_ms: int = 1500
    correct_answer_points: int = 10
    nickname_max_length: int = 20
    host_only_controls: bool = False

    @classmethod
    def from_config(cls, config) -> 'QuizSettings':
        return cls(
            question_duration_ms=int(config.get('QUESTION_DURATION_MS', 15000)),
            post_round_pause_ms=int(config.get('POST_ROUND_PAUSE_MS', 1500)),
            correct_answer_points=int(config.get('CORRECT_ANSWER_POINTS', 10)),
            nickname_max_length=int(config.get('NICKNAME_MAX_LENGTH', 20)),
            host_only_controls=bool(config.get('HOST_ONLY_CONTROLS', False)),
        )


def normalize_nickname(nickname, max_length: int) -> str:
    if not isinstance(nickname, str) or not nickname.strip():
        raise ValidationError('Nickname is required')
    return nickname.strip()[:max_length]


def coerce_option_index(value) -> int:
    """Accept an int, an integral float, or a string of digits; never truncate."""
    if isinstance(value, bool):
        raise ValidationError('optionIndex must be an integer')
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError('optionIndex must be an integer')
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith('-') else text
        if digits.isdecimal():
            return int(text)
    raise ValidationError('optionIndex must be an integer')


class QuizSession:

    def __init__(self, catalog: QuestionCatalog, broadcaster, scheduler,
                 settings: Optional[QuizSettings] = None, logger=None):
        self.catalog = catalog
        self.settings = settings or QuizSettings()
        self._broadcaster = broadcaster
        self._scheduler = scheduler
        self._log = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

        self.players = PlayerRegistry()
        self.round = RoundTracker()
        self.status = LOBBY
        self.current_index = -1
        self.accepting_answers = False
        self._timer = None
        # Bumped whenever a timer is armed or cancelled; a firing timer whose
        # generation is no longer current is stale and does nothing.
        self._generation = 0

    # ---- inbound operations ----

    def join(self, connection_id: str, nickname) -> Optional[JoinResult]:
        with self._lock:
            try:
                name = normalize_nickname(nickname, self.settings.nickname_max_length)
            except ValidationError as exc:
                self._notify_error(connection_id, str(exc))
                return None
            result = self.players.upsert(connection_id, name)
            self._log.info(
                f"[join] sid={connection_id} nickname={name!r} host={result.is_host} rejoined={result.rejoined}"
            )
            self._broadcaster.to_client(connection_id, EVENT_STATUS, {
                'status': RUNNING if self.catalog.in_bounds(self.current_index) else LOBBY,
                'isHost': result.is_host,
            })
            self.publish_leaderboard()
            return result

    def start(self, connection_id: Optional[str] = None) -> bool:
        with self._lock:
            if not self._may_control(connection_id):
                return False
            if self.current_index != -1:
                return False
            self._log.info(f"[start] by={connection_id} questions={len(self.catalog)}")
            self._set_status(RUNNING)
            self._advance()
            return True

    def restart(self, reset_scores: bool = True, connection_id: Optional[str] = None) -> bool:
        with self._lock:
            if not self._may_control(connection_id):
                return False
            self._log.info(f"[restart] by={connection_id} reset_scores={reset_scores}")
            self._cancel_timer()
            self.round.clear()
            self.current_index = -1
            self.accepting_answers = False
            if reset_scores:
                self.players.reset_scores()
                self.publish_leaderboard()
            self._set_status(RUNNING)
            self._advance()
            return True

    def submit_answer(self, connection_id: str, question_id, option_index) -> bool:
        with self._lock:
            if not self.accepting_answers:
                return False
            question = self.catalog[self.current_index]
            if question.id != question_id:
                return False
            if connection_id not in self.players or self.round.has_answered(connection_id):
                return False
            try:
                chosen = coerce_option_index(option_index)
            except ValidationError as exc:
                self._notify_error(connection_id, str(exc))
                return False

            self.round.record(connection_id)
            correct = chosen == question.correct_option_index
            if correct:
                self.players.award(connection_id, self.settings.correct_answer_points)

            self._broadcaster.to_client(connection_id, EVENT_ANSWER_OUTCOME, {
                'questionId': question.id,
                'correctOptionIndex': question.correct_option_index,
                'wasCorrect': correct,
                'saved': True,
            })
            self.publish_leaderboard()

            if self._everyone_answered():
                self._end_round(REASON_ALL_ANSWERED)
            return True

    def advance_by_host(self, connection_id: Optional[str] = None) -> bool:
        with self._lock:
            if not self._may_control(connection_id):
                return False
            if self.current_index == -1:
                return False
            return self._end_round(REASON_ADVANCED_BY_HOST)

    def leave(self, connection_id: str) -> bool:
        with self._lock:
            was_host = self.players.is_host(connection_id)
            player = self.players.remove(connection_id)
            if player is None:
                return False
            self._log.info(f"[leave] sid={connection_id} nickname={player.nickname!r}")
            self._announce_new_host(was_host)
            self.publish_leaderboard()
            return True

    def disconnect(self, connection_id: str) -> bool:
        with self._lock:
            was_host = self.players.is_host(connection_id)
            player = self.players.remove(connection_id)
            if player is None:
                return False
            self._log.info(
                f"[disconnect] sid={connection_id} nickname={player.nickname!r} remaining={len(self.players)}"
            )
            self._announce_new_host(was_host)
            if self.accepting_answers and self._everyone_answered():
                self._end_round(REASON_ALL_REMAINING_ANSWERED)
            else:
                self.publish_leaderboard()
            return True

    # ---- read side ----

    def leaderboard(self) -> List[Dict[str, Any]]:
        with self._lock:
            return project_leaderboard(self.players)

    def publish_leaderboard(self) -> None:
        with self._lock:
            self._broadcaster.to_room(EVENT_LEADERBOARD, project_leaderboard(self.players))

    def current_question(self):
        with self._lock:
            if self.catalog.in_bounds(self.current_index):
                return self.catalog[self.current_index]
            return None

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            host = self.players.host
            return {
                'status': self.status,
                'currentQuestionIndex': self.current_index,
                'acceptingAnswers': self.accepting_answers,
                'totalQuestions': len(self.catalog),
                'playerCount': len(self.players),
                'answeredCount': self.round.answered_among(self.players),
                'host': host.nickname if host else None,
                'leaderboard': project_leaderboard(self.players),
            }

    # ---- internal transitions ----

    def _advance(self) -> None:
        self.current_index += 1
        self.round.clear()

        if self.current_index >= len(self.catalog):
            self._cancel_timer()
            self.accepting_answers = False
            self._log.info(f"[finish] after={len(self.catalog)} questions")
            self._set_status(FINISHED)
            self.publish_leaderboard()
            return

        question = self.catalog[self.current_index]
        self._log.info(f"[advance] index={self.current_index} question={question.id!r}")
        payload = question.to_public_dict()
        payload.update({
            'position': self.current_index + 1,
            'totalCount': len(self.catalog),
            'durationMs': self.settings.question_duration_ms,
        })
        self._broadcaster.to_room(EVENT_QUESTION, payload)
        self.accepting_answers = True
        self._arm_timer(self.settings.question_duration_ms, self._on_question_timeout)

    def _end_round(self, reason: str) -> bool:
        if not self.accepting_answers:
            return False
        self._cancel_timer()
        self.accepting_answers = False
        question = self.catalog[self.current_index]
        self._log.info(f"[round-end] index={self.current_index} question={question.id!r} reason={reason!r}")
        self._broadcaster.to_room(EVENT_ANSWER_OUTCOME, {
            'questionId': question.id,
            'correctOptionIndex': question.correct_option_index,
            'reasonSummary': reason,
        })
        self.publish_leaderboard()
        self._arm_timer(self.settings.post_round_pause_ms, self._advance)
        return True

    def _on_question_timeout(self) -> None:
        if self.accepting_answers:
            self._end_round(REASON_TIME_UP)

    def _everyone_answered(self) -> bool:
        total = len(self.players)
        return total > 0 and self.round.answered_among(self.players) >= total

    def _set_status(self, status: str) -> None:
        self.status = status
        self._broadcaster.to_room(EVENT_STATUS, {'status': status})

    def _may_control(self, connection_id: Optional[str]) -> bool:
        if not self.settings.host_only_controls or connection_id is None:
            return True
        if self.players.is_host(connection_id):
            return True
        self._notify_error(connection_id, 'Only the host can do that')
        return False

    def _announce_new_host(self, was_host: bool) -> None:
        new_host = self.players.host_id
        if was_host and new_host is not None:
            self._log.info(f"[host] promoted sid={new_host}")
            self._broadcaster.to_client(new_host, EVENT_STATUS, {'status': self.status, 'isHost': True})

    def _notify_error(self, connection_id: str, message: str) -> None:
        self._broadcaster.to_client(connection_id, EVENT_ERROR, {'message': message})

    # ---- timer ----

    def _arm_timer(self, delay_ms: int, action) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._timer = self._scheduler.call_later(delay_ms, self._fire_timer, generation, action)
        self._log.info(
            f"[timer-set] generation={generation} action={action.__name__} delay={delay_ms}ms index={self.current_index}"
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _fire_timer(self, generation: int, action) -> None:
        with self._lock:
            if generation != self._generation:
                self._log.info(f"[timer-abort] generation={generation} current={self._generation}")
                return
            self._log.info(f"[timer-fire] generation={generation} action={action.__name__}")
            self._timer = None
            action()
