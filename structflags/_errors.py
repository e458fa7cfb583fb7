"""Error types. Scan errors are recorded on :class:`structflags.Group` instead of
being raised, and conversion errors are returned from
:meth:`structflags.Info.set`; all of them are still exceptions so callers can
choose to raise them."""

from __future__ import annotations

from typing import Any


class FlagsError(Exception):
    """Base class for all structflags errors."""


class NotAStructureReference(FlagsError):
    """The data passed to a group is not a dataclass instance."""

    def __init__(self, data: Any) -> None:
        self.data = data
        super().__init__(
            f"provided data is not a dataclass instance: {type(data).__name__}"
        )


class ShortNameTooLong(FlagsError):
    """A `short` tag is longer than a single character."""

    def __init__(self, field_name: str, short_name: str) -> None:
        self.field_name = field_name
        self.short_name = short_name
        super().__init__(
            f"short names can only be 1 character, got {short_name!r} for field"
            f" `{field_name}`"
        )


class UnsupportedInvocable(FlagsError):
    """A callable destination cannot be invoked with zero or one argument."""

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"field `{field_name}` is not a valid action: {reason}")


class MalformedTag(FlagsError):
    """A tag string attached to a field can't be parsed."""

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"malformed tag on field `{field_name}`: {reason}")


class UnresolvableAnnotation(FlagsError):
    """The annotation of a field can't be evaluated, so its tags can't be read.
    Usually a forward reference to a type that isn't visible from the module
    the dataclass is defined in."""

    def __init__(self, field_name: str, reason: str) -> None:
        self.field_name = field_name
        self.reason = reason
        super().__init__(
            f"could not resolve the annotation of field `{field_name}`: {reason}"
        )


class DuplicateName(FlagsError):
    """Two fields of one group register the same short or long name. Only
    recorded when strict name checking is enabled."""

    def __init__(self, name: str, first_field: str, second_field: str) -> None:
        self.name = name
        self.first_field = first_field
        self.second_field = second_field
        super().__init__(
            f"option name {name!r} is used by both `{first_field}` and"
            f" `{second_field}`"
        )


class ConversionError(FlagsError):
    """A raw string could not be converted into a destination's type."""

    def __init__(self, value: str, typ: Any, cause: str) -> None:
        self.value = value
        self.type = typ
        self.cause = cause
        super().__init__(f"invalid value {value!r} for {_type_name(typ)}: {cause}")


def _type_name(typ: Any) -> str:
    name = getattr(typ, "__name__", None)
    return name if isinstance(name, str) else str(typ)
