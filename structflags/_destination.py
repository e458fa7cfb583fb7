"""Bindings between an option and the place its value is written to.

A destination is one of:

- :class:`StoredValue`: an attribute of a dataclass instance,
- :class:`NullaryAction`: a callable invoked with no arguments,
- :class:`UnaryAction`: a callable invoked with zero or one argument.

Destinations are resolved once, when a group scans its structure.
"""

from __future__ import annotations

import dataclasses
import inspect
from typing import Any, Callable, Union

from typing_extensions import get_args, get_origin

from . import _resolver
from ._errors import UnsupportedInvocable
from ._typing_compat import is_typing_callable


@dataclasses.dataclass(frozen=True)
class StoredValue:
    """An attribute of a dataclass instance."""

    instance: Any
    name: str
    type: Any
    """Field annotation, with `Annotated` metadata stripped."""

    def get(self) -> Any:
        return getattr(self.instance, self.name)

    def set(self, value: Any) -> None:
        # `object.__setattr__` also works for frozen dataclasses.
        object.__setattr__(self.instance, self.name, value)

    def is_bool(self) -> bool:
        typ = _resolver.unwrap_optional(self.type)
        if typ is bool:
            return True
        return _resolver.sequence_element_type(typ) is bool


@dataclasses.dataclass(frozen=True)
class NullaryAction:
    """A callable that takes no arguments."""

    target: Callable[[], Any]

    def __call__(self) -> Any:
        return self.target()


@dataclasses.dataclass(frozen=True)
class UnaryAction:
    """A callable that takes a single argument. The argument may have a default,
    in which case the action can also be called without one."""

    target: Callable[..., Any]
    parameter_type: Any
    """Annotation of the parameter, or `str` when it isn't annotated."""
    parameter_required: bool

    def __call__(self, *args: Any) -> Any:
        assert len(args) <= 1
        return self.target(*args)


Destination = Union[StoredValue, NullaryAction, UnaryAction]


def is_callable_annotation(typ: Any) -> bool:
    typ = _resolver.unwrap_optional(_resolver.unwrap_annotated(typ))
    return is_typing_callable(typ) or is_typing_callable(get_origin(typ))


def make_destination(
    instance: Any, field: dataclasses.Field
) -> Union[Destination, UnsupportedInvocable]:
    """Resolve the destination for a dataclass field.

    Returns:
        The destination, or an `UnsupportedInvocable` error if the field is
        annotated as a callable but its value can't be called with at most one
        argument.
    """
    typ = _resolver.unwrap_annotated(field.type)
    if not is_callable_annotation(typ):
        return StoredValue(instance=instance, name=field.name, type=typ)

    target = getattr(instance, field.name)
    if not callable(target):
        return UnsupportedInvocable(
            field.name, f"value of type {type(target).__name__} is not callable"
        )

    try:
        signature = inspect.signature(target)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures. We assume one positional
        # argument.
        return UnaryAction(target, parameter_type=str, parameter_required=False)

    positional = [
        p
        for p in signature.parameters.values()
        if p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
    ]
    required = [
        p
        for p in signature.parameters.values()
        if p.default is inspect.Parameter.empty
        and p.kind
        not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if len(required) > 1:
        return UnsupportedInvocable(
            field.name,
            f"takes {len(required)} required arguments"
            f" ({', '.join(p.name for p in required)}), but at most one is supported",
        )
    if any(p.kind is inspect.Parameter.KEYWORD_ONLY for p in required):
        return UnsupportedInvocable(field.name, "requires a keyword-only argument")
    if len(positional) == 0:
        return NullaryAction(target)

    param = positional[0]
    parameter_type = _parameter_type(target, param, typ)
    return UnaryAction(
        target,
        parameter_type=parameter_type,
        parameter_required=len(required) == 1,
    )


def _parameter_type(
    target: Callable, param: inspect.Parameter, field_type: Any
) -> Any:
    """Get the type a string argument should be converted to before calling an
    action. The callable's own annotation wins over the field annotation."""
    hints = _resolver.get_callable_hints(target)
    if param.name in hints:
        return _resolver.unwrap_annotated(hints[param.name])

    # Fall back to `Callable[[T], ...]` on the field.
    field_type = _resolver.unwrap_optional(field_type)
    args = get_args(field_type)
    if len(args) == 2 and isinstance(args[0], (list, tuple)) and len(args[0]) == 1:
        return args[0][0]
    return str
