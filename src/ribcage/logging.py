# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
from logging import Formatter, Handler, Logger, StreamHandler, getLogger
from typing import Any, Final, final

from ribcage.utils.env import (
    Environment,
    StandardEnvironment,
    get_log_level,
    is_rich_disabled,
)


@final
class LogWriter:
    """Writes log messages using ``format()`` strings."""

    _NO_HIGHLIGHT: Final = {"highlighter": None}

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, args, kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, message, args, kwargs)

    def _log(
        self, level: int, message: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return

        # Messages without arguments are taken verbatim.
        if args or kwargs:
            message = message.format(*args, **kwargs)

        self._logger.log(level, message, extra=self._NO_HIGHLIGHT)


def get_log_writer(name: str | None = None) -> LogWriter:
    """Returns the :class:`LogWriter` for the specified name."""
    return LogWriter(getLogger(name))


log = get_log_writer("ribcage")


def configure_logging(
    no_rich: bool | None = None, *, env: Environment | None = None
) -> None:
    """
    If ``no_rich`` is ``None``, the ``RIBCAGE_NO_RICH`` environment variable is
    checked instead and a plain stream handler is used if it exists. The log
    level is read from ``RIBCAGE_LOG_LEVEL`` and defaults to ``INFO``.

    :raises EnvironmentVariableError:
    """
    if env is None:
        env = StandardEnvironment()

    level = get_log_level(env)

    if no_rich is None:
        no_rich = is_rich_disabled(env)

    logger = getLogger()

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

        handler.close()

    datefmt = "%Y-%m-%d %H:%M:%S"

    new_handler: Handler

    if no_rich:
        new_handler = StreamHandler()

        console_formatter = Formatter(
            "%(asctime)s %(levelname)s: %(name)s - %(message)s", datefmt
        )
    else:
        from rich.logging import RichHandler

        from ribcage.utils.rich import get_error_console

        console = get_error_console()

        new_handler = RichHandler(console=console, show_path=False, keywords=[])

        console_formatter = Formatter("%(name)s - %(message)s", datefmt)

    new_handler.setFormatter(console_formatter)

    logger.addHandler(new_handler)

    logger.setLevel(level)

    logger.propagate = False
