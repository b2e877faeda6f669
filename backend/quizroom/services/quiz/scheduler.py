import logging
import threading


log = logging.getLogger(__name__)


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(self, delay_ms: int):
        self.delay_ms = delay_ms
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


class BackgroundScheduler:
    """Runs callbacks after a delay on Socket.IO background tasks.

    Uses ``socketio.sleep`` / ``socketio.start_background_task`` so the timer
    cooperates with whichever async mode the server runs under.
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def call_later(self, delay_ms: int, callback, *args) -> TimerHandle:
        handle = TimerHandle(delay_ms)

        def _worker():
            self._socketio.sleep(max(0, delay_ms) / 1000.0)
            if handle.cancelled:
                log.debug(f"[timer-cancelled] delay={delay_ms}ms")
                return
            callback(*args)

        self._socketio.start_background_task(_worker)
        return handle
