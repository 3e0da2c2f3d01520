"""
utils/debug.py
--------------
Debug/trace sink shared by the database layer and the services built on it.

Trace lines and variable dumps are only written when debug mode is on.
The ``fail*`` helpers are the single place where layered error messages
turn into exceptions; each failure is logged at ERROR before it is raised.
"""

import logging
from pprint import pformat
from typing import Any, NoReturn, Optional, Type

from exceptions import (
    AppException,
    DatabaseException,
    ExecutionException,
    ValidationException,
)
from utils.logger import get_logger


class Debug:
    """
    Channel-scoped debug output.

    Args:
        channel: Context label, e.g. ``db`` or ``database``. Output goes to
            the ``debug.<channel>`` logger.
        debug_mode: Emit trace lines and variable dumps.
    """

    def __init__(self, channel: str = "app", debug_mode: bool = False):
        self.channel = channel
        self.debug_mode = bool(debug_mode)
        self._logger = get_logger(f"debug.{channel}", logging.DEBUG if self.debug_mode else None)

    # ── Output ────────────────────────────────────────────

    def debug(self, message: str) -> None:
        """Write a trace line when debug mode is on."""
        if self.debug_mode:
            self._logger.debug("DEBUG: %s", message)

    def debug_variable(self, value: Any, label: str = "Debug Variable") -> None:
        """Dump a labelled value when debug mode is on."""
        if self.debug_mode:
            self._logger.debug("DEBUG (%s): %s", label, pformat(value))

    def log(self, message: str) -> None:
        """Record a message at INFO, whatever the debug mode."""
        self._logger.info(message)

    # ── Failures ──────────────────────────────────────────

    def fail(self, message: str, throw_msg: str = "", cause: Optional[BaseException] = None) -> NoReturn:
        """Log ``message`` and raise a generic AppException."""
        self._raise(AppException, message, throw_msg, cause)

    def fail_database(self, message: str, throw_msg: str = "", cause: Optional[BaseException] = None) -> NoReturn:
        self._raise(DatabaseException, message, throw_msg, cause)

    def fail_validation(self, message: str, throw_msg: str = "", cause: Optional[BaseException] = None) -> NoReturn:
        self._raise(ValidationException, message, throw_msg, cause)

    def fail_execution(self, message: str, throw_msg: str = "", cause: Optional[BaseException] = None) -> NoReturn:
        self._raise(ExecutionException, message, throw_msg, cause)

    def _handle_fail(self, message: str, throw_msg: str = "") -> str:
        self._logger.error(message)
        return throw_msg if throw_msg else message

    def _raise(
        self,
        exc_type: Type[AppException],
        message: str,
        throw_msg: str,
        cause: Optional[BaseException],
    ) -> NoReturn:
        exc = exc_type(self._handle_fail(message, throw_msg))
        if cause is not None:
            raise exc from cause
        raise exc
