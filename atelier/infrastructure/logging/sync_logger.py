"""Colored sync logger — ANSI-colored console logging for remote reconciliation.

Color scheme:
    🔵 Blue    — Remote fetch
    🟣 Magenta — Merge into the local snapshot
    🟡 Yellow  — Fallback to local data
    🟢 Green   — Push (upsert) to the remote mirror
    🟠 Cyan    — Remote deletions
    ⚪ White   — Retry queue
    🔴 Red     — Errors
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


class SyncStage:
    """Sync stages with colors and icons."""

    FETCH = ("FETCH", _Colors.BLUE, "📥")
    MERGE = ("MERGE", _Colors.MAGENTA, "🔀")
    FALLBACK = ("FALLBACK", _Colors.YELLOW, "💾")
    PUSH = ("PUSH", _Colors.GREEN, "📤")
    DELETE = ("DELETE", _Colors.CYAN, "🗑️")
    RETRY = ("RETRY", _Colors.WHITE, "🔁")


class SyncLogger:
    """Color-coded logger for the sync engine.

    Usage:
        log = SyncLogger("SyncEngine")
        log.step_start(SyncStage.FETCH, "Fetching remote collections")
        log.step_complete(SyncStage.MERGE, "Merged remote snapshot", quotes=12)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def _format(self, message: str, kwargs: dict[str, Any]) -> str:
        if not kwargs:
            return message
        details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
        return f"{message} {_Colors.GRAY}({details}){_Colors.RESET}"

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.info(self._format(formatted, kwargs))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(self._format(formatted, kwargs))

    def step_warning(
        self, stage: tuple[str, str, str], message: str, error: BaseException | None = None
    ) -> None:
        """A swallowed failure: logged at WARNING, never raised."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.YELLOW}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.YELLOW}{message}{_Colors.RESET}"
        )
        if error is not None:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.warning(formatted)

    def step_error(
        self, stage: tuple[str, str, str], message: str, error: BaseException | None = None
    ) -> None:
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error is not None:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.debug(self._format(formatted, kwargs))

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Failures are logged at WARNING and re-raised for the caller to swallow.

        Usage:
            with log.timed_step(SyncStage.FETCH, "Fetching remote collections"):
                tables = await fetch()
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except BaseException as e:
            elapsed = time.perf_counter() - start
            self.step_warning(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)
