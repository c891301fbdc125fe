"""Output routing for library messages.

Every helper forwards to the matching handler registered on the
:class:`~frodo.state.State`, if any, and always records the message on the
module logger so applications without handlers still see it.

Copyright (c) 2025 Frodo. All rights reserved.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frodo.state import State

logger = logging.getLogger("frodo")

_PASSWORD_HEADER = re.compile(r'"X-OpenAM-Password:.+?"')

_LEVELS = {
    "text": logging.INFO,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "data": logging.INFO,
}


def print_message(
    state: State, message: Any, message_type: str = "text", newline: bool = True
) -> None:
    """Print a message through the state's print handler.

    Args:
        state: Library state
        message: Text or object to print
        message_type: One of text, info, warn, error, data
        newline: Whether the handler should end the line

    """
    logger.log(_LEVELS.get(message_type, logging.INFO), "%s", message)
    if state.print_handler:
        state.print_handler(message, message_type, newline)


def print_error(state: State, error: Exception, message: str | None = None) -> None:
    """Report an error through the error handler, else as an error message."""
    if state.error_handler:
        logger.error("%s", message or error, exc_info=error)
        state.error_handler(error, message)
        return
    print_message(state, message or error, "error")


def verbose_message(state: State, message: Any) -> None:
    logger.info("%s", message)
    if state.verbose and state.verbose_handler:
        state.verbose_handler(message)


def debug_message(state: State, message: Any) -> None:
    logger.debug("%s", message)
    if state.debug_handler:
        state.debug_handler(message)


def mask_password_header(command: str) -> str:
    """Replace the password header value in a curl command."""
    return _PASSWORD_HEADER.sub('"X-OpenAM-Password:<suppressed>"', command)


def curlirize_message(state: State, message: str) -> None:
    masked = mask_password_header(message)
    logger.debug("%s", masked)
    if state.curlirize_handler:
        state.curlirize_handler(masked)


def create_progress_indicator(
    state: State,
    total: int | None = None,
    message: str | None = None,
    indicator_type: str = "determinate",
) -> str:
    """Ask the client to create a progress indicator.

    Args:
        state: Library state
        total: Number of steps for determinate indicators
        message: Optional label
        indicator_type: ``determinate`` or ``indeterminate``

    Returns:
        Identifier to pass to the update and stop helpers.

    """
    indicator_id = f"progress-{uuid.uuid4()}"
    if message:
        logger.debug("%s", message)
    if state.create_progress_handler:
        state.create_progress_handler(indicator_id, indicator_type, total, message)
    return indicator_id


def update_progress_indicator(
    state: State, indicator_id: str, message: str | None = None
) -> None:
    if message:
        logger.debug("%s", message)
    if state.update_progress_handler:
        state.update_progress_handler(indicator_id, message)


def stop_progress_indicator(
    state: State,
    indicator_id: str,
    message: str | None = None,
    status: str = "none",
) -> None:
    if message:
        logger.debug("%s", message)
    if state.stop_progress_handler:
        state.stop_progress_handler(indicator_id, message, status)
