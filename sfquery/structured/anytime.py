"""
sfquery/structured/anytime.py

Anytime variant: keeps re-solving in a background thread until killed.

Every completed solve swaps in a fresh target cache, so queries made
while the loop runs are answered from the latest finished solve.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from sfquery.config import QueryConfig
from sfquery.model.element import Element
from sfquery.model.structure import FactorModel
from sfquery.structured.algorithm import StructuredProbQueryAlgorithm

logger = logging.getLogger(__name__)


class AnytimeStructuredProbQuery(StructuredProbQueryAlgorithm):
    """
    Repeats solve + materialize until stopped or killed.

    start() launches the loop, stop() pauses it between solves, resume()
    continues it and kill() ends it and deactivates the algorithm. A failed
    solve also ends the loop and deactivates it; wait_for_solution() re-raises
    the failure.
    """

    def __init__(
        self,
        model: FactorModel,
        *query_targets: Element,
        config: Optional[QueryConfig] = None,
        semiring: Any = None,
    ):
        super().__init__(model, *query_targets, config=config, semiring=semiring)
        self.iterations = 0
        self._thread: Optional[threading.Thread] = None
        self._running = threading.Event()
        self._shutdown = threading.Event()
        self._solved_once = threading.Event()
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                raise RuntimeError("algorithm already started")
            self._running.set()
            self._thread = threading.Thread(
                target=self._loop,
                name=f"anytime-query-{id(self):x}",
                daemon=True,
            )
            self._thread.start()
        logger.info("Anytime query started for %d targets", len(self.query_targets))

    def stop(self) -> None:
        """Pause after the solve in progress; answers stay available."""
        self._running.clear()
        logger.info("Anytime query paused after %d solves", self.iterations)

    def resume(self) -> None:
        self._running.set()
        logger.info("Anytime query resumed")

    def kill(self) -> None:
        self._shutdown.set()
        self._running.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        super().kill()
        logger.info("Anytime query killed after %d solves", self.iterations)

    def wait_for_solution(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the first solve completes.

        Returns:
            False if the timeout expired first

        Raises:
            The exception that ended the loop, if solving failed
        """
        done = self._solved_once.wait(timeout)
        if self._error is not None:
            raise self._error
        return done

    def _loop(self) -> None:
        while not self._shutdown.is_set():
            if not self._running.wait(timeout=0.1):
                continue
            if self._shutdown.is_set():
                break
            try:
                self.solve()
            except Exception as exc:
                logger.exception("Anytime solve failed: %s", exc)
                self._error = exc
                self.active = False
                self._solved_once.set()
                break
            self.iterations += 1
            if not self._shutdown.is_set():
                self.active = True
            self._solved_once.set()
            interval = self.config.anytime_interval
            if interval > 0:
                self._shutdown.wait(interval)
