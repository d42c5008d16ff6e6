# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from functools import partial
from threading import RLock
from types import CodeType, UnionType
from typing import (
    Any,
    Final,
    Generic,
    NoReturn,
    TypeVar,
    Union,
    cast,
    final,
    get_origin,
    get_type_hints,
    overload,
)
from weakref import WeakKeyDictionary

from typing_extensions import Self

from ribcage.error import InternalError
from ribcage.logging import log

T = TypeVar("T")

DependencyT = TypeVar("DependencyT")


class Dependency:
    """
    The base of all dependencies. A component is itself a dependency so that it
    can be handed to its child components.
    """


class EmptyDependency(Dependency):
    """Represents a dependency that carries no information."""


class SharedTypeMismatchError(InternalError):
    def __init__(self, key: Hashable, kls: type, actual_kls: type) -> None:
        super().__init__(
            f"Shared instance {key!r} is expected to be of type `{kls}`, but is of type `{actual_kls}` instead. Two shared instances might be using the same key."
        )

        self.key = key
        self.kls = kls
        self.actual_kls = actual_kls


_NOT_SET: Final = object()

_factory_kls_cache: WeakKeyDictionary[CodeType, type | None] = WeakKeyDictionary()


class Component(Dependency, Generic[DependencyT]):
    """
    The base class of all components. A component defines the objects a unit
    provides to its internal consumers as well as the ones it provides to its
    child units. A subclass is expected to satisfy the dependencies of all of
    its immediate children.
    """

    def __init__(self, dependency: DependencyT) -> None:
        """
        :param dependency: The dependency of this component, usually provided by
            the parent component.
        """
        self._dependency = dependency
        self._lock = RLock()
        self._shared_instances: dict[Hashable, object] = {}

    @final
    def shared(
        self,
        key: Hashable,
        factory: Callable[[], T],
        *,
        kls: type[T] | None = None,
    ) -> T:
        """
        Returns the shared instance stored under ``key``, constructing it with
        ``factory`` on first use. Each caller asking for the same key receives
        the same instance while the component is alive.

        The instance is type-checked against ``kls``, or against the return
        annotation of ``factory`` if ``kls`` is ``None``.

        .. note::
            ``factory`` runs while holding the lock of the component. It can call
            :meth:`shared` for other keys, but must not wait on another thread
            that calls back into this component; that deadlocks.

        :raises SharedTypeMismatchError: The instance stored under ``key`` is not
            of the expected type.
        """
        if kls is None:
            requested_kls = _get_factory_kls(factory)
        else:
            requested_kls = _normalize_kls(kls)

        with self._lock:
            obj = self._shared_instances.get(key, _NOT_SET)
            if obj is _NOT_SET:
                log.debug("Constructing shared instance {!r} of `{}`.", key, type(self).__qualname__)  # fmt: skip

                obj = factory()

                _check_kls(key, obj, requested_kls)

                self._shared_instances[key] = obj
            else:
                _check_kls(key, obj, requested_kls)

        return cast(T, obj)

    def iter_shared_keys(self) -> Iterator[Hashable]:
        with self._lock:
            keys = list(self._shared_instances)

        return iter(keys)

    @property
    def dependency(self) -> DependencyT:
        return self._dependency

    @property
    def lock(self) -> RLock:
        """The lock guarding the shared instances of this component."""
        return self._lock


class EmptyComponent(EmptyDependency):
    """The special empty component."""


def shared_instance(method: Callable[[Any], T]) -> SharedInstance[T]:
    """
    Turns ``method`` of a :class:`Component` subclass into a read-only attribute
    whose value is constructed once per component via :meth:`Component.shared`.

    .. code-block:: python

        class AppComponent(Component[AppConfig]):
            @shared_instance
            def pool(self) -> ConnectionPool:
                return ConnectionPool(self.dependency.db_url)
    """
    return SharedInstance(method)


@final
class SharedInstance(Generic[T]):
    def __init__(self, method: Callable[[Any], T]) -> None:
        self._method = method
        self._key: str = f"{method.__module__}.{method.__qualname__}"
        self._kls: object = _NOT_SET

        self.__doc__ = method.__doc__

    def __set_name__(self, owner: type, name: str) -> None:
        self._key = f"{owner.__module__}.{owner.__qualname__}.{name}"

    @overload
    def __get__(self, obj: None, owner: type | None = None) -> Self: ...

    @overload
    def __get__(self, obj: object, owner: type | None = None) -> T: ...

    def __get__(self, obj: object | None, owner: type | None = None) -> T | Self:
        if obj is None:
            return self

        if not isinstance(obj, Component):
            raise TypeError(
                f"`shared_instance` can only be used within a `Component` subclass, but `{type(obj)}` is not a `Component`."
            )

        if self._kls is _NOT_SET:
            self._kls = _get_factory_kls(self._method)

        kls = cast("type[T] | None", self._kls)

        return obj.shared(self._key, partial(self._method, obj), kls=kls)

    def __set__(self, obj: object, value: object) -> NoReturn:
        raise AttributeError(f"Shared instance {self._key!r} is read-only.")

    @property
    def key(self) -> str:
        return self._key


def _get_factory_kls(factory: Callable[..., object]) -> type | None:
    if isinstance(factory, partial):
        factory = factory.func

    if isinstance(factory, type):
        return factory

    code = getattr(factory, "__code__", None)
    if code is not None:
        try:
            return _factory_kls_cache[code]
        except KeyError:
            pass

    try:
        type_hints = get_type_hints(factory)
    except (TypeError, ValueError, NameError):
        kls = None
    else:
        kls = _normalize_kls(type_hints.get("return"))

    if code is not None:
        _factory_kls_cache[code] = kls

    return kls


def _normalize_kls(kls: object) -> type | None:
    if kls is None:
        return None

    origin = get_origin(kls)

    # Unions are not checked.
    if origin is Union or origin is UnionType:
        return None

    # `list[int]` can only be checked against `list`.
    if origin is not None:
        kls = origin

    if not isinstance(kls, type) or kls is object:
        return None

    return kls


def _check_kls(key: Hashable, obj: object, kls: type | None) -> None:
    if kls is not None and not isinstance(obj, kls):
        raise SharedTypeMismatchError(key, kls, type(obj))
