# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Final, final

from typing_extensions import override


class Environment(ABC):
    @abstractmethod
    def maybe_get(self, name: str) -> str | None: ...

    @abstractmethod
    def has(self, name: str) -> bool: ...


class EnvironmentVariableError(Exception):
    def __init__(self, var_name: str, message: str) -> None:
        super().__init__(message)

        self.var_name = var_name


@final
class StandardEnvironment(Environment):
    @override
    def maybe_get(self, name: str) -> str | None:
        return os.environ.get(name)

    @override
    def has(self, name: str) -> bool:
        return name in os.environ


LOG_LEVEL_VAR: Final = "RIBCAGE_LOG_LEVEL"

NO_RICH_VAR: Final = "RIBCAGE_NO_RICH"

_LOG_LEVELS: Final = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(env: Environment, default: int = logging.INFO) -> int:
    """
    :raises EnvironmentVariableError:
    """
    s = env.maybe_get(LOG_LEVEL_VAR)
    if s is None:
        return default

    try:
        return _LOG_LEVELS[s.strip().upper()]
    except KeyError:
        names = ", ".join(_LOG_LEVELS)

        raise EnvironmentVariableError(
            LOG_LEVEL_VAR, f"`{LOG_LEVEL_VAR}` is expected to be one of {names}, but is '{s}' instead."  # fmt: skip
        ) from None


def is_rich_disabled(env: Environment) -> bool:
    return env.has(NO_RICH_VAR)
