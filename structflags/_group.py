from __future__ import annotations

import dataclasses
import warnings
from typing import Any, Dict, Iterator, List, Optional

from . import _destination, _docstrings, _resolver, _settings, _tags
from ._errors import (
    DuplicateName,
    FlagsError,
    MalformedTag,
    NotAStructureReference,
    ShortNameTooLong,
    UnresolvableAnnotation,
    UnsupportedInvocable,
)
from ._info import Info
from ._warnings import DuplicateNameWarning


class Group:
    """An option group. The group has a name and a set of options, one for each
    tagged field of a dataclass instance.

    Creating a group never raises for problems with the dataclass; the first
    problem found is stored in :attr:`error` and scanning stops there. Callers
    should check :attr:`error` before using the options.

    Example::

        @dataclasses.dataclass
        class Options:
            verbose: Annotated[bool, structflags.tag(short="v", long="verbose")] = False
            name: Annotated[str, structflags.tag(long="name")] = ""

        options = Options()
        group = structflags.Group("Application Options", options)
        assert group.error is None
        group.short_names["v"].set()
        group.long_names["name"].set("world")

    Args:
        name: The name of the group, eg for help sections.
        data: A dataclass instance. Its fields represent the command line options
            and are written to when the corresponding options are set.
        strict_names: Treat duplicate short or long names as an error. Defaults to
            the `strict_names` global option; otherwise the last field registered
            for a name wins and a warning is emitted.
    """

    def __init__(
        self, name: str, data: Any, *, strict_names: Optional[bool] = None
    ) -> None:
        self.name = name
        """The name of the group."""
        self.long_names: Dict[str, Info] = {}
        """A map of long names to option info descriptions."""
        self.short_names: Dict[str, Info] = {}
        """A map of short names to option info descriptions."""
        self.options: List[Info] = []
        """All options in the group, in field declaration order."""
        self.data = data
        self._strict_names = (
            strict_names
            if strict_names is not None
            else _settings.options["strict_names"]
        )

        self.error: Optional[FlagsError] = self._scan()
        """The error which occurred when creating the group, if any."""

    def _scan(self) -> Optional[FlagsError]:
        # dataclasses.is_dataclass() is also true for dataclass _types_; we need
        # an instance to write to.
        if isinstance(self.data, type) or not dataclasses.is_dataclass(self.data):
            return NotAStructureReference(self.data)

        for field in _resolver.resolved_fields(self.data):
            if isinstance(field, UnresolvableAnnotation):
                # Private fields are skipped whatever their annotation.
                if field.field_name.startswith("_"):
                    continue
                return field

            # Skip private fields.
            if field.name.startswith("_"):
                continue

            # Skip embedded structures.
            if _resolver.is_dataclass_type(
                _resolver.unwrap_optional(_resolver.unwrap_annotated(field.type))
            ):
                continue

            try:
                tag = _tags.tag_from_field(field, field.type)
            except ValueError as e:
                return MalformedTag(field.name, str(e))

            # Skip fields with the no-flag tag.
            if tag.get(_tags.NO_FLAG) != "":
                continue

            long_name = tag.get(_tags.LONG)
            short = tag.get(_tags.SHORT)
            if long_name == "" and short == "":
                continue

            if len(short) > 1:
                return ShortNameTooLong(field.name, short)

            destination = _destination.make_destination(self.data, field)
            if isinstance(destination, UnsupportedInvocable):
                return destination

            description, has_description = tag.lookup(_tags.DESCRIPTION)
            if not has_description and _settings.options["docstrings"]:
                description = (
                    _docstrings.get_field_docstring(type(self.data), field.name) or ""
                )

            info = Info(
                short_name=short if short != "" else None,
                long_name=long_name,
                description=description,
                default=tag.get(_tags.DEFAULT),
                optional_argument=tag.get(_tags.OPTIONAL) != "",
                field_name=field.name,
                destination=destination,
                tag=tag,
            )
            self.options.append(info)

            for names, key, display in (
                (self.short_names, info.short_name, f"-{short}"),
                (self.long_names, long_name, f"--{long_name}"),
            ):
                if not key:
                    continue
                error = self._register(names, key, display, info)
                if error is not None:
                    return error

        return None

    def _register(
        self, names: Dict[str, Info], key: str, display: str, info: Info
    ) -> Optional[DuplicateName]:
        previous = names.get(key)
        if previous is not None:
            if self._strict_names:
                return DuplicateName(display, previous.field_name, info.field_name)
            warnings.warn(
                f"Option {display} of group {self.name!r} is defined by both"
                f" `{previous.field_name}` and `{info.field_name}`; using"
                f" `{info.field_name}`.",
                category=DuplicateNameWarning,
                stacklevel=4,
            )
        names[key] = info
        return None

    def lookup(self, name: str) -> Optional[Info]:
        """Find an option by name. Accepts ``v``, ``-v``, ``verbose`` and
        ``--verbose``; single characters are looked up as short names."""
        if name.startswith("--"):
            return self.long_names.get(name[2:])
        if name.startswith("-") and len(name) == 2:
            return self.short_names.get(name[1:])
        if len(name) == 1:
            return self.short_names.get(name, self.long_names.get(name))
        return self.long_names.get(name)

    def raise_for_error(self) -> None:
        """Raise the error recorded while scanning, if there is one."""
        if self.error is not None:
            raise self.error

    def __iter__(self) -> Iterator[Info]:
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def __repr__(self) -> str:
        return (
            f"Group(name={self.name!r}, options={len(self.options)},"
            f" error={self.error!r})"
        )
