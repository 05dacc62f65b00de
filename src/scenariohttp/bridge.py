# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Uniform call shapes over a script engine's callable values.

Host code that takes callbacks expects one of four shapes: produce a value,
map a value, consume a value, or just run. `AsyncBridge` wraps a single foreign
callable and exposes all four, so a script function can be handed to any of
them. The call site picks the shape explicitly.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

_NO_ARG = object()


class CallShape(str, Enum):
    SUPPLIER = "SUPPLIER"  # () -> value
    FUNCTION = "FUNCTION"  # (arg) -> value
    CONSUMER = "CONSUMER"  # (arg) -> None
    RUNNABLE = "RUNNABLE"  # () -> None


_TAKES_ARG = {CallShape.FUNCTION, CallShape.CONSUMER}


class AsyncBridge:
    """
    Wraps one foreign callable behind the four call shapes.

    Script engine values are invoked through their `execute` / `execute_void`
    methods when they have them; plain Python callables are called directly.
    The bridge holds nothing but the wrapped value, so any shape can be used any
    number of times.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any):
        if not callable(value) and not callable(getattr(value, "execute", None)):
            raise TypeError(f"not a callable value: {type(value).__name__}")
        self._value = value

    @classmethod
    def of(cls, value: Any) -> AsyncBridge:
        return cls(value)

    @property
    def value(self) -> Any:
        return self._value

    def _execute(self, *args: Any) -> Any:
        execute = getattr(self._value, "execute", None)
        if callable(execute):
            return execute(*args)
        return self._value(*args)

    def _execute_void(self, *args: Any) -> None:
        execute_void = getattr(self._value, "execute_void", None)
        if callable(execute_void):
            execute_void(*args)
        else:
            self._execute(*args)

    def get(self) -> Any:
        return self._execute()

    def apply(self, arg: Any) -> Any:
        return self._execute(arg)

    def accept(self, arg: Any) -> None:
        self._execute_void(arg)

    def run(self) -> None:
        self._execute_void()

    def invoke(self, shape: CallShape, arg: Any = _NO_ARG) -> Any:
        """Call the wrapped value in the given shape; argument presence must match the shape."""
        shape = CallShape(shape)
        if (arg is not _NO_ARG) != (shape in _TAKES_ARG):
            raise TypeError(f"{shape.value} call shape {'requires' if shape in _TAKES_ARG else 'takes no'} argument")
        if shape is CallShape.SUPPLIER:
            return self.get()
        if shape is CallShape.FUNCTION:
            return self.apply(arg)
        if shape is CallShape.CONSUMER:
            self.accept(arg)
            return None
        self.run()
        return None

    def as_callable(self, shape: CallShape) -> Callable[..., Any]:
        """Return a plain function with the given shape, for APIs that take bare callables."""
        shape = CallShape(shape)
        if shape is CallShape.SUPPLIER:
            return self.get
        if shape is CallShape.FUNCTION:
            return self.apply
        if shape is CallShape.CONSUMER:
            return self.accept
        return self.run

    def __repr__(self) -> str:
        return f"AsyncBridge({self._value!r})"


__all__ = ["AsyncBridge", "CallShape"]
