"""Conversion of raw command-line strings into typed field values.

Conversion is driven by a list of rules. Each rule looks at a type annotation
and the field's :class:`~structflags.Tag`, and either returns a function
mapping a string to an instance of that type or `None` if the rule doesn't
apply. Rules registered later take precedence, so custom rules can override the
defaults:

.. code-block:: python

    @structflags.default_registry.rule
    def ip_rule(typ, tag):
        if typ is not ipaddress.IPv4Address:
            return None
        return ipaddress.IPv4Address
"""

from __future__ import annotations

import collections
import collections.abc
import datetime
import enum
import inspect
import os
import pathlib
from typing import Any, Callable, Dict, List, Optional, cast

from typing_extensions import get_args, get_origin

from . import _resolver, _tags
from ._destination import StoredValue
from ._errors import ConversionError
from ._tags import Tag
from ._typing_compat import is_typing_literal, is_typing_union

StrConverter = Callable[[str], Any]
ConversionRule = Callable[[Any, Tag], Optional[StrConverter]]

_TRUE_STRINGS = ("", "true", "t", "1", "yes", "y", "on")
_FALSE_STRINGS = ("false", "f", "0", "no", "n", "off")

_CONTAINER_FROM_ORIGIN: Dict[Any, Callable[[List[Any]], Any]] = {
    list: list,
    tuple: tuple,
    set: set,
    frozenset: frozenset,
    collections.deque: collections.deque,
    collections.abc.Sequence: list,
    collections.abc.MutableSequence: list,
    collections.abc.Set: frozenset,
    collections.abc.MutableSet: set,
}


class ConverterRegistry:
    """An ordered collection of conversion rules."""

    def __init__(self) -> None:
        self._rules: List[ConversionRule] = []

    def rule(self, rule: ConversionRule) -> ConversionRule:
        """Decorator for registering a conversion rule. Returns the rule unchanged."""
        self._rules.append(rule)
        return rule

    def get_converter(self, typ: Any, tag: Tag) -> Optional[StrConverter]:
        typ = _resolver.unwrap_annotated(typ)
        for rule in reversed(self._rules):
            converter = rule(typ, tag)
            if converter is not None:
                return converter
        return None

    def from_str(self, value: str, typ: Any, tag: Tag = Tag()) -> Any:
        """Convert a string into an instance of `typ`.

        Raises:
            ConversionError: If no rule applies or the conversion fails.
        """
        converter = self.get_converter(typ, tag)
        if converter is None:
            raise ConversionError(value, typ, "unsupported type")
        try:
            return converter(value)
        except ConversionError:
            raise
        except (ValueError, TypeError, KeyError, OverflowError) as e:
            raise ConversionError(value, typ, _describe_exception(e)) from e

    def convert(
        self, value: str, destination: StoredValue, tag: Tag
    ) -> Optional[ConversionError]:
        """Convert `value` and write it into `destination`. Sequence destinations
        get the converted elements appended and mapping destinations get the
        converted entries added; all other destinations are overwritten.

        Returns:
            `None` on success, or the error that prevented the conversion. The
            destination is left untouched on errors.
        """
        typ = _resolver.unwrap_optional(destination.type)
        try:
            parsed = self.from_str(value, typ, tag)
        except ConversionError as e:
            return e

        current = destination.get()
        if _resolver.sequence_element_type(typ) is not None and current is not None:
            container = (
                type(current)
                if isinstance(current, tuple(_CONTAINER_FROM_ORIGIN.values()))
                else _CONTAINER_FROM_ORIGIN.get(get_origin(typ) or typ, list)
            )
            parsed = container(list(current) + list(parsed))
        elif _is_mapping(typ) and current is not None:
            merged = dict(current)
            merged.update(parsed)
            parsed = merged

        destination.set(parsed)
        return None


def _describe_exception(e: Exception) -> str:
    if isinstance(e, KeyError) and len(e.args) == 1:
        return str(e.args[0])
    return str(e)


def _is_mapping(typ: Any) -> bool:
    return (
        typ in _resolver.MAPPING_ORIGINS
        or get_origin(typ) in _resolver.MAPPING_ORIGINS
    )


def apply_default_rules(registry: ConverterRegistry) -> None:
    """Apply default rules to the registry. Rules are listed from lowest to
    highest precedence."""

    @registry.rule
    def fallback_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        # Call the type on the string, eg for `decimal.Decimal` or `uuid.UUID`.
        if not inspect.isclass(typ) or inspect.isabstract(typ):
            return None

        def instance_from_str(value: str) -> Any:
            # Any exception from the constructor becomes a conversion error.
            try:
                return typ(value)
            except Exception as e:
                raise ValueError(str(e) or type(e).__name__) from e

        return instance_from_str

    @registry.rule
    def str_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ not in (str, Any, object):
            return None
        return lambda value: value

    @registry.rule
    def bool_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ is not bool:
            return None

        def instance_from_str(value: str) -> bool:
            # An empty string means the flag was given without a value.
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError("expected a boolean")

        return instance_from_str

    @registry.rule
    def int_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ is not int:
            return None
        base_str = tag.get(_tags.BASE)
        base: Optional[int]
        try:
            base = int(base_str) if base_str != "" else 10
        except ValueError:
            base = None

        def instance_from_str(value: str) -> int:
            if base is None:
                raise ValueError(f"`base` tag must be an integer, got {base_str!r}")
            return int(value, base)

        return instance_from_str

    @registry.rule
    def numeric_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ not in (float, complex):
            return None
        return typ

    @registry.rule
    def bytes_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ not in (bytes, bytearray):
            return None
        return lambda value: typ(value, encoding="utf-8")

    @registry.rule
    def path_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ is os.PathLike:
            return pathlib.Path
        if not (inspect.isclass(typ) and issubclass(typ, pathlib.PurePath)):
            return None
        return typ

    @registry.rule
    def enum_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if not (inspect.isclass(typ) and issubclass(typ, enum.Enum)):
            return None
        enum_type = cast(Any, typ)

        def instance_from_str(value: str) -> enum.Enum:
            if value in enum_type.__members__:
                return enum_type[value]
            for member in enum_type:
                if str(member.value) == value:
                    return member
            choices = ", ".join(enum_type.__members__.keys())
            raise ValueError(f"expected one of {{{choices}}}")

        return instance_from_str

    @registry.rule
    def datetime_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if typ not in (datetime.datetime, datetime.date, datetime.time):
            return None
        return typ.fromisoformat

    @registry.rule
    def literal_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if not is_typing_literal(get_origin(typ)):
            return None
        choices = get_args(typ)

        def instance_from_str(value: str) -> Any:
            for choice in choices:
                # Enum members and other non-string choices match on their
                # string form.
                label = choice.name if isinstance(choice, enum.Enum) else str(choice)
                if label == value:
                    return choice
            labels = ", ".join(
                c.name if isinstance(c, enum.Enum) else str(c) for c in choices
            )
            raise ValueError(f"expected one of {{{labels}}}")

        return instance_from_str

    @registry.rule
    def union_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if not is_typing_union(get_origin(typ)):
            return None
        options = [t for t in get_args(typ) if t is not type(None)]
        allows_none = len(options) != len(get_args(typ))

        def instance_from_str(value: str) -> Any:
            # First option that converts wins.
            errors = []
            for option in options:
                try:
                    return registry.from_str(value, option, tag)
                except ConversionError as e:
                    errors.append(e.cause)
            if allows_none and value == "None":
                return None
            raise ValueError("; ".join(errors))

        return instance_from_str

    @registry.rule
    def sequence_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        element_type = _resolver.sequence_element_type(typ)
        if element_type is None:
            return None
        container = _CONTAINER_FROM_ORIGIN.get(get_origin(typ) or typ, list)
        delimiter = tag.get(_tags.DELIMITER)

        def instance_from_str(value: str) -> Any:
            parts = value.split(delimiter) if delimiter != "" else [value]
            return container(
                [registry.from_str(part, element_type, tag) for part in parts]
            )

        return instance_from_str

    @registry.rule
    def mapping_rule(typ: Any, tag: Tag) -> Optional[StrConverter]:
        if not _is_mapping(typ):
            return None
        args = get_args(typ)
        key_type, value_type = args if len(args) == 2 else (str, str)
        key_value_delimiter = tag.get(_tags.KEY_VALUE_DELIMITER) or ":"
        delimiter = tag.get(_tags.DELIMITER)

        def instance_from_str(value: str) -> Dict[Any, Any]:
            out = {}
            for entry in value.split(delimiter) if delimiter != "" else [value]:
                k, sep, v = entry.partition(key_value_delimiter)
                if sep == "":
                    raise ValueError(
                        "expected a key and a value separated by"
                        f" {key_value_delimiter!r}"
                    )
                out[registry.from_str(k, key_type, tag)] = registry.from_str(
                    v, value_type, tag
                )
            return out

        return instance_from_str


default_registry = ConverterRegistry()
apply_default_rules(default_registry)


def from_str(value: str, typ: Any, tag: Tag = Tag()) -> Any:
    """Convert a string into an instance of `typ` using the default registry.

    Raises:
        ConversionError: If the conversion fails.
    """
    return default_registry.from_str(value, typ, tag)


def convert(
    value: str, destination: StoredValue, tag: Tag
) -> Optional[ConversionError]:
    """Convert `value` and write it into `destination` using the default
    registry. Returns the conversion error, if any."""
    return default_registry.convert(value, destination, tag)

