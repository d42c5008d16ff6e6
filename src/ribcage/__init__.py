# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from ribcage.error import InternalError as InternalError
from ribcage.logging import configure_logging as configure_logging
from ribcage.runtime.component import Component as Component
from ribcage.runtime.component import Dependency as Dependency
from ribcage.runtime.component import EmptyComponent as EmptyComponent
from ribcage.runtime.component import EmptyDependency as EmptyDependency
from ribcage.runtime.component import SharedInstance as SharedInstance
from ribcage.runtime.component import (
    SharedTypeMismatchError as SharedTypeMismatchError,
)
from ribcage.runtime.component import shared_instance as shared_instance

__version__ = "0.1.0.dev0"
