# worker.py
"""
Run one blocking call off the Tk main loop and deliver its outcome back on
the UI thread.

Tk widgets must only be touched from the thread running mainloop(), so the
worker thread never calls back directly: it parks the outcome in a queue and
the UI thread polls that queue through `schedule` (normally `widget.after`).
"""

import logging
import queue
import threading

logger = logging.getLogger(__name__)

POLL_MS = 50


def run_in_background(schedule, fn, on_done, on_error=None, poll_ms=POLL_MS, name=None):
    outcome = queue.Queue(maxsize=1)

    def _work():
        try:
            outcome.put((True, fn()))
        except Exception as e:
            logger.exception("Background task %s failed", name or getattr(fn, "__name__", "task"))
            outcome.put((False, e))

    def _poll():
        try:
            ok, value = outcome.get_nowait()
        except queue.Empty:
            schedule(poll_ms, _poll)
            return
        if ok:
            on_done(value)
        elif on_error is not None:
            on_error(value)

    thread = threading.Thread(target=_work, name=name, daemon=True)
    thread.start()
    schedule(poll_ms, _poll)
    return thread
