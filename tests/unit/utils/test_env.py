# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

import logging

import pytest

from ribcage.utils.env import (
    EnvironmentVariableError,
    StandardEnvironment,
    get_log_level,
    is_rich_disabled,
)


class TestStandardEnvironment:
    def test_maybe_get_works(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RIBCAGE_TEST_VAR", "foo")

        env = StandardEnvironment()

        assert env.maybe_get("RIBCAGE_TEST_VAR") == "foo"

        assert env.has("RIBCAGE_TEST_VAR")

    def test_maybe_get_works_when_var_is_not_set(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("RIBCAGE_TEST_VAR", raising=False)

        env = StandardEnvironment()

        assert env.maybe_get("RIBCAGE_TEST_VAR") is None

        assert not env.has("RIBCAGE_TEST_VAR")


class TestGetLogLevel:
    def test_works(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RIBCAGE_LOG_LEVEL", " debug")

        assert get_log_level(StandardEnvironment()) == logging.DEBUG

    def test_returns_default_when_var_is_not_set(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("RIBCAGE_LOG_LEVEL", raising=False)

        env = StandardEnvironment()

        assert get_log_level(env) == logging.INFO
        assert get_log_level(env, default=logging.WARNING) == logging.WARNING

    def test_raises_error_when_var_is_invalid(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("RIBCAGE_LOG_LEVEL", "LOUD")

        with pytest.raises(
            EnvironmentVariableError, match=r"^`RIBCAGE_LOG_LEVEL` is expected to be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, but is 'LOUD' instead\.$"  # fmt: skip
        ) as ex_info:
            get_log_level(StandardEnvironment())

        assert ex_info.value.var_name == "RIBCAGE_LOG_LEVEL"


class TestIsRichDisabled:
    def test_works(self, monkeypatch: pytest.MonkeyPatch) -> None:
        env = StandardEnvironment()

        monkeypatch.delenv("RIBCAGE_NO_RICH", raising=False)

        assert not is_rich_disabled(env)

        monkeypatch.setenv("RIBCAGE_NO_RICH", "1")

        assert is_rich_disabled(env)
