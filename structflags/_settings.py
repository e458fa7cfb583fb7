"""Global options for structflags.

Options are seeded from environment variables and can be changed at runtime by
mutating :data:`options`. Arguments passed directly to
:class:`structflags.Group` take precedence.
"""

from __future__ import annotations

import os

from typing_extensions import TypedDict

_TRUE_STRINGS = ("1", "true", "yes", "on")


class OptionsDict(TypedDict):
    """Options for structflags.

    Attributes:
        strict_names: Treat duplicate short or long names within a group as a
            scan error instead of letting the last registration win.
        docstrings: Fall back to field docstrings and comments when a field has
            no `description` tag.
    """

    strict_names: bool
    docstrings: bool


def read_option(str_name: str, default: bool) -> bool:
    if str_name not in os.environ:
        return default
    return os.environ[str_name].strip().lower() in _TRUE_STRINGS


# Global options dictionary.
options: OptionsDict = {
    "strict_names": read_option("PYTHON_STRUCTFLAGS_STRICT_NAMES", False),
    "docstrings": read_option("PYTHON_STRUCTFLAGS_DOCSTRINGS", True),
}
