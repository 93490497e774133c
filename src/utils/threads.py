"""Thread management utilities for the display thread and producer workers"""

import threading
import logging
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class ThreadManager:
    """Starts named threads and joins them on shutdown.

    The feedback display thread is non-daemon so the terminal is always
    restored before the interpreter exits. Producer workers may be daemons.

    Usage:
        manager = ThreadManager()
        manager.start_thread("feedback-display", run_display)

        # On shutdown
        manager.shutdown(timeout=5)
    """

    def __init__(self):
        self._threads: List[threading.Thread] = []
        self._stop_events: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def start_thread(
        self,
        name: str,
        target: Callable,
        args: tuple = (),
        kwargs: dict = None,
        stop_event: threading.Event = None,
        daemon: bool = False,
    ) -> threading.Thread:
        """Start a managed thread.

        Args:
            name: Thread name for identification
            target: Function to run in thread
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            stop_event: Optional event that shutdown() sets
            daemon: Run as a daemon thread

        Returns:
            The started thread
        """
        if kwargs is None:
            kwargs = {}

        thread = threading.Thread(target=target, args=args, kwargs=kwargs,
                                  name=name, daemon=daemon)

        with self._lock:
            self._threads.append(thread)
            if stop_event:
                self._stop_events[name] = stop_event

        thread.start()
        logger.debug(f"Started managed thread: {name}")
        return thread

    def join_all(self, timeout: Optional[float] = None) -> int:
        """Wait for every managed thread without signalling them.

        Returns:
            Number of threads still alive afterwards
        """
        with self._lock:
            threads = list(self._threads)

        for thread in threads:
            thread.join(timeout=timeout)

        return self._prune()

    def shutdown(self, timeout: float = 5.0) -> int:
        """Signal every stop event, then join all threads.

        Args:
            timeout: Seconds to wait for each thread

        Returns:
            Number of threads that didn't stop in time
        """
        with self._lock:
            for name, event in self._stop_events.items():
                event.set()
                logger.debug(f"Signaled stop for: {name}")

        still_running = self.join_all(timeout)
        if still_running:
            logger.warning(f"{still_running} threads still running after shutdown")
        else:
            logger.debug("All managed threads stopped")
        return still_running

    def _prune(self) -> int:
        with self._lock:
            alive = [t for t in self._threads if t.is_alive()]
            for thread in self._threads:
                if not thread.is_alive():
                    self._stop_events.pop(thread.name, None)
            self._threads = alive
            return len(alive)

    @property
    def running_threads(self) -> List[str]:
        """Get names of currently running threads."""
        with self._lock:
            return [t.name for t in self._threads if t.is_alive()]


# Global instance for app-wide thread management
_global_manager: Optional[ThreadManager] = None
_global_lock = threading.Lock()


def get_thread_manager() -> ThreadManager:
    """Get the global thread manager instance."""
    global _global_manager
    with _global_lock:
        if _global_manager is None:
            _global_manager = ThreadManager()
        return _global_manager


def shutdown_all_threads(timeout: float = 5.0) -> int:
    """Convenience function to shutdown all globally managed threads."""
    if _global_manager is not None:
        return _global_manager.shutdown(timeout)
    return 0
