"""Background thread with an idempotent start/stop lifecycle.

Both pipelines (the sentence producer and the sentence consumer) run as a
single dedicated thread owned by one object. ``Worker`` holds the pieces
they share:

* a running flag (``threading.Event``) whose transitions happen under a
  lock, so ``start()``/``stop()`` are a test-and-set: a second ``start()``
  never spawns a second thread and a second ``stop()`` returns at once;
* a stop event the thread sleeps on, so ``stop()`` interrupts a pending
  wait instead of waiting out a whole tick;
* join-on-stop: ``stop()`` returns only after the thread has exited;
* a thread that returns or raises on its own clears the running flag, so
  ``running`` reports the truth and a later ``start()`` spawns a new one.

Subclasses implement ``_run`` and poll ``running`` (or ``_sleep``) to
notice cancellation. The thread is never killed.
"""

import threading
from types import TracebackType

__all__ = ["Worker"]


class Worker:
    """Base class for a component that owns one background thread.

    Usable directly or as a context manager, which starts the thread on
    enter and stops it on exit::

        with SentenceProducer(link, -22.9559, -43.1659) as producer:
            time.sleep(10)

    Args:
        name: Thread name, shown in logs and debuggers.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._lifecycle_lock = threading.Lock()
        self._running = threading.Event()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """True between ``start()`` and ``stop()``."""
        return self._running.is_set()

    @property
    def alive(self) -> bool:
        """True while the background thread is executing."""
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Spawn the background thread. No-op if already started."""
        with self._lifecycle_lock:
            if self._running.is_set():
                return
            self._running.set()
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._main, name=self._name, daemon=True
            )
            self._thread.start()

    def stop(self) -> None:
        """Request the thread to exit and wait for it.

        Safe to call before ``start()``, more than once, and after the
        thread has already exited on its own.
        """
        with self._lifecycle_lock:
            if not self._running.is_set():
                return
            self._running.clear()
            self._stop_event.set()
            thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _sleep(self, seconds: float) -> bool:
        """Wait up to *seconds*; return False if ``stop()`` interrupted it."""
        return not self._stop_event.wait(seconds)

    def _main(self) -> None:
        try:
            self._run()
        finally:
            # A thread that ends on its own leaves the worker stopped
            with self._lifecycle_lock:
                if self._thread is threading.current_thread():
                    self._running.clear()

    def _run(self) -> None:
        raise NotImplementedError

    def __enter__(self) -> "Worker":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()
