"""Utilities for resolving and unwrapping field type annotations."""

from __future__ import annotations

import collections
import collections.abc
import copy
import dataclasses
import functools
import inspect
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    overload,
)

from typing_extensions import get_args, get_origin, get_type_hints

from ._errors import UnresolvableAnnotation
from ._typing_compat import (
    is_typing_annotated,
    is_typing_classvar,
    is_typing_final,
    is_typing_union,
)

MetadataType = TypeVar("MetadataType")

SEQUENCE_ORIGINS = (
    list,
    tuple,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)
MAPPING_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


def is_annotated(typ: Any) -> bool:
    return is_typing_annotated(get_origin(typ))


@overload
def unwrap_annotated(
    typ: Any,
    search_type: Type[MetadataType],
) -> Tuple[Any, Tuple[MetadataType, ...]]: ...


@overload
def unwrap_annotated(
    typ: Any,
    search_type: Literal["all"],
) -> Tuple[Any, Tuple[Any, ...]]: ...


@overload
def unwrap_annotated(
    typ: Any,
    search_type: None = None,
) -> Any: ...


def unwrap_annotated(
    typ: Any,
    search_type: Union[Type[MetadataType], Literal["all"], None] = None,
) -> Union[Tuple[Any, Tuple[MetadataType, ...]], Any]:
    """Helper for parsing typing.Annotated types.

    Strips one layer of Annotated and extracts metadata.

    Examples:
    - int, Tag => (int, ())
    - Annotated[int, Tag(...)], Tag => (int, (Tag(...),))
    - Annotated[int, "1"], Tag => (int, ())
    """
    # `Final` wrappers are ignored.
    orig = get_origin(typ)
    while is_typing_final(orig):
        typ = get_args(typ)[0]
        orig = get_origin(typ)

    if not is_typing_annotated(orig):
        return typ if search_type is None else (typ, ())

    args = get_args(typ)
    assert len(args) >= 2
    if search_type is None:
        return args[0]

    targets = tuple(
        x
        for x in args[1:]
        if search_type == "all" or isinstance(x, search_type)  # type: ignore
    )
    return args[0], targets


def unwrap_optional(typ: Any) -> Any:
    """Optional[T] => T. Other unions are returned unchanged."""
    if not is_typing_union(get_origin(typ)):
        return typ
    options = tuple(unwrap_annotated(t) for t in get_args(typ) if t is not type(None))
    if len(options) == 1:
        return options[0]
    return typ


def sequence_element_type(typ: Any) -> Any:
    """For a sequence annotation, return the element type. `Any` is returned for
    bare containers, and `None` for anything that isn't a sequence."""
    typ = unwrap_optional(unwrap_annotated(typ))
    origin = get_origin(typ)
    if typ in SEQUENCE_ORIGINS:
        return Any
    if origin not in SEQUENCE_ORIGINS:
        return None

    args = get_args(typ)
    if origin is tuple:
        # Only variable-length tuples behave like sequences.
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return None
    return args[0] if len(args) == 1 else Any


def resolved_fields(
    cls: Any,
) -> List[Union[dataclasses.Field, UnresolvableAnnotation]]:
    """Similar to dataclasses.fields(), but resolves forward references and keeps
    `Annotated` metadata on each field's type.

    A field whose annotation can't be resolved is returned as an
    `UnresolvableAnnotation` error in its place; other fields are unaffected."""

    assert dataclasses.is_dataclass(cls)
    if not isinstance(cls, type):
        cls = type(cls)

    annotations: Optional[Dict[str, Any]]
    try:
        annotations = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        # One bad annotation fails the whole class. Fields are resolved one at
        # a time below instead.
        annotations = None

    fields: List[Union[dataclasses.Field, UnresolvableAnnotation]] = []
    for field in dataclasses.fields(cls):
        # Avoid mutating original field.
        field = copy.copy(field)
        if annotations is not None:
            field.type = annotations.get(field.name, field.type)
        else:
            try:
                field.type = _resolve_field_type(cls, field)
            except (NameError, TypeError) as e:
                fields.append(UnresolvableAnnotation(field.name, str(e)))
                continue

        # Skip ClassVars.
        if is_typing_classvar(get_origin(field.type)):
            continue
        fields.append(field)
    return fields


def _resolve_field_type(cls: type, field: dataclasses.Field) -> Any:
    # Names are looked up in the module and class namespace of the class that
    # declares the field.
    owner = next(
        (
            base
            for base in cls.__mro__
            if field.name in base.__dict__.get("__annotations__", {})
        ),
        cls,
    )
    holder = type(
        owner.__name__,
        (),
        {"__annotations__": {field.name: field.type}, "__module__": owner.__module__},
    )
    return get_type_hints(holder, localns=dict(vars(owner)), include_extras=True)[
        field.name
    ]


def is_dataclass_type(typ: Any) -> bool:
    return isinstance(typ, type) and dataclasses.is_dataclass(typ)


def get_callable_hints(f: Any) -> Dict[str, Any]:
    """Type hints for a callable, or an empty dict if they can't be resolved."""
    if isinstance(f, functools.partial):
        f = f.func
    if not (inspect.isfunction(f) or inspect.ismethod(f) or inspect.isclass(f)):
        # Callable instances.
        f = getattr(type(f), "__call__", f)
    try:
        return get_type_hints(f, include_extras=True)
    except (NameError, TypeError):
        return {}
