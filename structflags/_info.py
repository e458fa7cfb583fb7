from __future__ import annotations

import dataclasses
from typing import Optional

from . import _convert
from ._destination import Destination, NullaryAction, StoredValue, UnaryAction
from ._errors import ConversionError
from ._tags import Tag


@dataclasses.dataclass(eq=False)
class Info:
    """Option flag information. Contains a description of the option, short and
    long name as well as a default value and whether an argument for this flag is
    optional.

    `Info` objects are created by :class:`structflags.Group`; each one is bound to
    a single field of the group's dataclass instance."""

    short_name: Optional[str]
    """The short name of the option (a single character). If not `None`, the
    option flag can be activated using ``-<short_name>``. Either `short_name` or
    `long_name` is always set."""
    long_name: str
    """The long name of the option. If not empty, the option flag can be activated
    using ``--<long_name>``."""
    description: str
    """The description of the option flag."""
    default: str
    """The value a caller should set when the flag is given without its optional
    argument. Only meaningful for non-boolean options."""
    optional_argument: bool
    """Whether the argument to the option flag may be omitted. Only meaningful for
    non-boolean options."""
    field_name: str
    """Name of the dataclass field this option was created from."""
    destination: Destination
    tag: Tag

    def can_argument(self) -> bool:
        """Whether the option accepts an argument. Boolean options and actions
        that take no parameters are presence-only."""
        if self.is_bool():
            return False
        if isinstance(self.destination, NullaryAction):
            return False
        return True

    def is_bool(self) -> bool:
        return isinstance(self.destination, StoredValue) and self.destination.is_bool()

    def is_invocable(self) -> bool:
        return isinstance(self.destination, (NullaryAction, UnaryAction))

    def invoke(self, value: Optional[str] = None) -> Optional[ConversionError]:
        """Call the option's action. When `value` is given, it's converted to the
        type of the action's parameter first and the action isn't called if the
        conversion fails."""
        destination = self.destination
        assert isinstance(destination, (NullaryAction, UnaryAction))

        if isinstance(destination, NullaryAction):
            destination()
            return None

        if value is None:
            if not destination.parameter_required:
                destination()
                return None
            # The parameter has no default; treat a missing value the same way
            # stored values do.
            value = ""

        try:
            argument = _convert.from_str(value, destination.parameter_type, self.tag)
        except ConversionError as e:
            return e
        destination(argument)
        return None

    def set(self, value: Optional[str] = None) -> Optional[ConversionError]:
        """Set the value of an option. An error is returned if the value could not
        be converted to the option's type.

        Passing no value is how boolean flags are turned on. For options with an
        optional argument, callers are expected to pass `default` themselves when
        the argument was omitted."""
        if self.is_invocable():
            return self.invoke(value)

        assert isinstance(self.destination, StoredValue)
        return _convert.convert(
            value if value is not None else "", self.destination, self.tag
        )

    def describe(self) -> str:
        """Human-friendly string describing the option, eg
        ``-v, --verbose (Show more output)``."""
        if self.short_name is not None and self.long_name != "":
            names = f"-{self.short_name}, --{self.long_name}"
        elif self.short_name is not None:
            names = f"-{self.short_name}"
        else:
            names = f"--{self.long_name}"

        if self.description != "":
            return f"{names} ({self.description})"
        return names

    def __str__(self) -> str:
        return self.describe()
