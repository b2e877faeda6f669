from quizroom.services.quiz import BackgroundScheduler


class DeferredSocketIO:
    """Holds background tasks until the test runs them; records sleeps."""

    def __init__(self):
        self.slept = []
        self.tasks = []

    def sleep(self, seconds):
        self.slept.append(seconds)

    def start_background_task(self, target, *args, **kwargs):
        self.tasks.append((target, args, kwargs))

    def run_tasks(self):
        tasks, self.tasks = self.tasks, []
        for target, args, kwargs in tasks:
            target(*args, **kwargs)


def test_callback_runs_after_delay():
    fake = DeferredSocketIO()
    calls = []
    handle = BackgroundScheduler(fake).call_later(1500, calls.append, 'fired')
    assert calls == []
    fake.run_tasks()
    assert fake.slept == [1.5]
    assert calls == ['fired']
    assert handle.delay_ms == 1500
    assert not handle.cancelled


def test_cancelled_timer_does_not_fire():
    fake = DeferredSocketIO()
    calls = []
    handle = BackgroundScheduler(fake).call_later(100, calls.append, 'fired')
    handle.cancel()
    fake.run_tasks()
    assert handle.cancelled
    assert calls == []
