"""Structural annotations ("tags") attached to dataclass fields.

Tags can be attached in three ways:

1. Via :py:data:`typing.Annotated`: ``Annotated[bool, structflags.tag(short="v")]``
2. Via field metadata: ``dataclasses.field(metadata={"short": "v"})``
3. Via a tag string: ``Annotated[bool, 'short:"v" long:"verbose"']``

When more than one is present, field metadata is read first and ``Annotated``
tags are applied on top of it, in order.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from typing_extensions import get_args

from . import _resolver

LONG = "long"
SHORT = "short"
DESCRIPTION = "description"
DEFAULT = "default"
OPTIONAL = "optional"
NO_FLAG = "no-flag"
BASE = "base"
DELIMITER = "delimiter"
KEY_VALUE_DELIMITER = "key-value-delimiter"


@dataclasses.dataclass(frozen=True)
class Tag:
    """Raw key/value data attached to a field. Values are always strings; an
    absent key reads as the empty string."""

    entries: Tuple[Tuple[str, str], ...] = ()

    def get(self, key: str) -> str:
        value, _ = self.lookup(key)
        return value

    def lookup(self, key: str) -> Tuple[str, bool]:
        """Returns the value for `key` and whether the key was present at all."""
        for k, v in reversed(self.entries):
            if k == key:
                return v, True
        return "", False

    def __contains__(self, key: object) -> bool:
        return any(k == key for k, _ in self.entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.as_dict().items())

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def merge(self, other: Tag) -> Tag:
        return Tag(self.entries + other.entries)

    @staticmethod
    def from_mapping(mapping: Mapping[str, Any]) -> Tag:
        return Tag(tuple((str(k), _stringify(v)) for k, v in mapping.items()))

    @staticmethod
    def parse(text: str) -> Tag:
        """Parse a tag string made of space-separated ``key:"value"`` pairs.
        Values are double-quoted and may contain backslash escapes.

        Example::

            Tag.parse('short:"v" long:"verbose" description:"Show verbose output"')
        """
        entries = []
        i = 0
        while True:
            while i < len(text) and text[i] == " ":
                i += 1
            if i >= len(text):
                break

            # Keys are any run of non-control, non-space characters, excluding
            # quotes and colons.
            start = i
            while (
                i < len(text) and text[i] > " " and text[i] != ":" and text[i] != '"'
            ):
                i += 1
            if i == start or i + 1 >= len(text) or text[i : i + 2] != ':"':
                raise ValueError(f"Malformed tag near position {start}: {text!r}")
            key = text[start:i]

            # Scan to the closing quote, skipping escaped characters.
            i += 2
            value_start = i
            while i < len(text) and text[i] != '"':
                if text[i] == "\\":
                    i += 1
                i += 1
            if i >= len(text):
                raise ValueError(f"Unterminated value for tag key {key!r}: {text!r}")
            raw = text[value_start:i]
            i += 1

            try:
                value = json.loads('"' + raw + '"')
            except json.JSONDecodeError as e:
                raise ValueError(f"Bad escape in tag value for {key!r}: {e}") from e
            entries.append((key, value))
        return Tag(tuple(entries))


def _stringify(value: Any) -> str:
    # Booleans are markers: True means "present", False means absent.
    if value is True:
        return "true"
    if value is False or value is None:
        return ""
    return str(value)


def tag(
    *,
    long: Optional[str] = None,
    short: Optional[str] = None,
    description: Optional[str] = None,
    default: Any = None,
    optional: bool = False,
    no_flag: bool = False,
    base: Optional[int] = None,
    delimiter: Optional[str] = None,
    key_value_delimiter: Optional[str] = None,
    **extra: Any,
) -> Tag:
    """Build a :class:`Tag` from keyword arguments.

    Example::

        @dataclasses.dataclass
        class Options:
            verbose: Annotated[
                bool,
                structflags.tag(short="v", long="verbose", description="More output"),
            ] = False

    Args:
        long: Long name; the option is activated with ``--<long>``.
        short: Short name, a single character; activated with ``-<short>``.
        description: Help text. Defaults to the field's docstring.
        default: Value used when an optional argument is omitted.
        optional: Mark the option's argument as optional.
        no_flag: Exclude the field from the group.
        base: Integer base used when converting to `int`.
        delimiter: Split one argument into several elements of a sequence.
        key_value_delimiter: Separator between key and value for mappings.
        extra: Additional keys, read by custom conversion rules.

    Returns:
        A tag that should be attached to a type using `Annotated[]`.
    """
    entries = {
        LONG: long,
        SHORT: short,
        DESCRIPTION: description,
        DEFAULT: default,
        OPTIONAL: optional,
        NO_FLAG: no_flag,
        BASE: base,
        DELIMITER: delimiter,
        KEY_VALUE_DELIMITER: key_value_delimiter,
    }
    entries.update({k.replace("_", "-"): v for k, v in extra.items()})
    return Tag(
        tuple(
            (k, _stringify(v))
            for k, v in entries.items()
            if v is not None and v is not False
        )
    )


def tag_from_field(field: dataclasses.Field, typ: Any) -> Tag:
    """Gather every tag attached to a dataclass field.

    `typ` should be the resolved annotation of the field, with `Annotated`
    metadata kept."""
    out = Tag()

    metadata = {k: v for k, v in field.metadata.items() if isinstance(k, str)}
    if len(metadata) > 0:
        out = out.merge(Tag.from_mapping(metadata))

    _, tags = _resolver.unwrap_annotated(typ, search_type=Tag)
    for t in tags:
        out = out.merge(t)

    # Tag strings written directly in Annotated[] metadata.
    for x in get_args(typ)[1:] if _resolver.is_annotated(typ) else ():
        if isinstance(x, str) and ':"' in x:
            out = out.merge(Tag.parse(x))
    return out
