import time

from librarydesk.worker import run_in_background


class FakeScheduler:
    """Stands in for widget.after: queues callbacks and runs them on demand."""

    def __init__(self):
        self.pending = []

    def __call__(self, ms, callback):
        self.pending.append(callback)

    def drain(self, timeout=5.0):
        deadline = time.monotonic() + timeout
        while self.pending:
            assert time.monotonic() < deadline, "background task never finished"
            callback = self.pending.pop(0)
            callback()
            time.sleep(0.001)


def test_result_delivered_through_scheduler():
    schedule = FakeScheduler()
    results, errors = [], []

    thread = run_in_background(schedule, lambda: 21 * 2, results.append, errors.append, name="answer")
    thread.join(timeout=5)
    assert results == []  # nothing delivered until the UI side polls
    schedule.drain()

    assert results == [42]
    assert errors == []
    assert thread.daemon


def test_exception_goes_to_on_error():
    schedule = FakeScheduler()
    results, errors = [], []

    def boom():
        raise RuntimeError("disk on fire")

    run_in_background(schedule, boom, results.append, errors.append).join(timeout=5)
    schedule.drain()

    assert results == []
    assert len(errors) == 1
    assert isinstance(errors[0], RuntimeError)


def test_slow_task_keeps_polling():
    schedule = FakeScheduler()
    results = []

    def slow():
        time.sleep(0.05)
        return "done"

    run_in_background(schedule, slow, results.append)
    schedule.drain()
    assert results == ["done"]
