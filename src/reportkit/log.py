"""
Defines the function used to report status messages.

A message is printed to stderr and written to the registry's log sink.
Messages with a level of 'log_only' are only written to the sink unless
debug mode is enabled.

Usage:

    from reportkit.log import log

    log('Connected to the warehouse', status='info')
    log('Bad row skipped', status='warn', level='log_only')

Copyright (c) 2025 Zachary Young.
All rights reserved.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional


SCREEN = 'screen'
LOG_ONLY = 'log_only'

STATUS_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'error': logging.ERROR,
    'fatal': logging.CRITICAL,
}


@dataclass(frozen=True)
class Issue:
    """
    A problem found while validating configuration.

    Reporting and raising are separate: pass the issue to report() to
    log it, and raise issue.error when the caller should fail.
    """

    message: str
    status: str = 'warn'
    level: str = SCREEN
    error: Optional[BaseException] = None


def _levelno(status):
    try:
        return STATUS_LEVELS[status]
    except KeyError:
        raise ValueError(
            f"Unknown status {status!r}, expected one of "
            f"{', '.join(STATUS_LEVELS)}"
        ) from None


def log(message, status='warn', level=SCREEN, raises=None, *,
        config=None, output=None):
    """
    Report a message.

    Args:
        message (str): The message to report
        status (str): One of 'debug', 'info', 'warn', 'error', 'fatal'
        level (str): 'screen' to also print the message, 'log_only'
            to print it only in debug mode
        raises (exception class or instance, optional): raised after
            the message has been reported
        config (Config, optional): registry to read the sink and debug
            flag from. Defaults to the shared registry.
        output (file-like, optional): where printed messages go.
            Defaults to sys.stderr.
    """
    levelno = _levelno(status)
    if config is None:
        from reportkit.config import get_registry
        config = get_registry()

    if level != LOG_ONLY or config.debug_mode:
        print(f'[!!] {message}', file=output or sys.stderr)

    sink = config.logger
    if sink is not None:
        sink.log(levelno, message)

    if raises is not None:
        if isinstance(raises, BaseException):
            raise raises
        raise raises(message)


def report(issue, *, config=None, output=None):
    """
    Log an Issue without raising its error.
    """
    log(
        issue.message,
        status=issue.status,
        level=issue.level,
        config=config,
        output=output,
    )
