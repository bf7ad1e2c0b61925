from __future__ import annotations

"""Debounced autosave for the editing session.

The editor calls :meth:`AutosaveService.schedule` after every change. The save
callable runs once the session has been quiet for ``delay`` seconds; a newer
call supersedes the pending one. The callable is invoked at fire time so it
can read the live design instead of a stale capture.
"""

import logging
import threading
from typing import Callable, Literal, Optional

from label_editor.config import ConfigManager

__all__ = ["AutosaveService", "AutosaveStatus"]

logger = logging.getLogger(__name__)

AutosaveStatus = Literal["saved", "unsaved", "saving", "error"]


class AutosaveService:
    """Debounce save requests with a :class:`threading.Timer`.

    Parameters
    ----------
    delay : float, optional
        Quiet period in seconds before a scheduled save fires. Defaults to the
        configured ``autosave.delay_seconds``.
    timer_factory : callable, optional
        Builds the timer, ``timer_factory(delay, fn)``; defaults to
        :class:`threading.Timer`.
    """

    def __init__(
        self,
        delay: Optional[float] = None,
        timer_factory: Optional[Callable[[float, Callable[[], None]], threading.Timer]] = None,
    ) -> None:
        if delay is None:
            delay = ConfigManager().get_autosave_delay()
        self.delay: float = max(0.0, float(delay))
        self._timer_factory = timer_factory or threading.Timer
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Callable[[], None]] = None
        self.status: AutosaveStatus = "saved"
        self.last_error: Optional[BaseException] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, dirty: bool, save: Callable[[], None]) -> None:
        """Arm a debounced save if *dirty*; otherwise nothing happens."""
        if not dirty:
            return
        with self._lock:
            self._cancel_timer()
            self._pending = save
            self.status = "unsaved"
            timer = self._timer_factory(self.delay, self._fire)
            timer.daemon = True
            self._timer = timer
        timer.start()
        logger.debug("Autosave scheduled in %.1fs", self.delay)

    def flush(self) -> bool:
        """Run a pending save now. Return True if a save was attempted."""
        with self._lock:
            self._cancel_timer()
        return self._fire()

    def cancel(self) -> None:
        """Drop any pending save."""
        with self._lock:
            self._cancel_timer()
            self._pending = None

    def mark_saved(self) -> None:
        self.cancel()
        self.status = "saved"
        self.last_error = None

    # ------------------------------------------------------------------
    def _fire(self) -> bool:
        with self._lock:
            save = self._pending
            self._pending = None
            self._timer = None
            if save is None:
                return False
            self.status = "saving"
        try:
            save()
        except Exception as exc:
            self.status = "error"
            self.last_error = exc
            logger.error("Autosave failed", exc_info=True)
        else:
            self.status = "saved"
            self.last_error = None
            logger.info("Autosave completed")
        return True

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
