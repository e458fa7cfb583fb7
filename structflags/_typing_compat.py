import collections.abc
import types
import typing
from typing import Any

import typing_extensions

LiteralTypes = {typing.Literal, typing_extensions.Literal}
UnionTypes = {
    typing.Union,
    typing_extensions.Union,
    getattr(types, "UnionType", typing.Union),
}
AnnotatedTypes = {
    getattr(typing, "Annotated", typing_extensions.Annotated),
    typing_extensions.Annotated,
}
ClassVarTypes = {
    getattr(typing, "ClassVar", typing_extensions.ClassVar),
    typing_extensions.ClassVar,
}
FinalTypes = {typing.Final, typing_extensions.Final}
CallableTypes = {typing.Callable, collections.abc.Callable}


def is_typing_literal(obj: Any) -> bool:
    return obj in LiteralTypes


def is_typing_union(obj: Any) -> bool:
    return obj in UnionTypes


def is_typing_annotated(obj: Any) -> bool:
    return obj in AnnotatedTypes


def is_typing_classvar(obj: Any) -> bool:
    return obj in ClassVarTypes


def is_typing_final(obj: Any) -> bool:
    return obj in FinalTypes


def is_typing_callable(obj: Any) -> bool:
    return obj in CallableTypes
