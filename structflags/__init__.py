"""Bind command-line options to the fields of a dataclass.

Fields are turned into options using structural annotations ("tags"):

.. code-block:: python

    import dataclasses
    from typing import Annotated

    import structflags

    @dataclasses.dataclass
    class Options:
        verbose: Annotated[bool, structflags.tag(short="v", long="verbose")] = False

    options = Options()
    group = structflags.Group("Application Options", options)
    group.lookup("-v").set()
    assert options.verbose
"""

__version__ = "0.1.0"


from ._convert import ConverterRegistry as ConverterRegistry
from ._convert import convert as convert
from ._convert import default_registry as default_registry
from ._convert import from_str as from_str
from ._destination import NullaryAction as NullaryAction
from ._destination import StoredValue as StoredValue
from ._destination import UnaryAction as UnaryAction
from ._errors import ConversionError as ConversionError
from ._errors import DuplicateName as DuplicateName
from ._errors import FlagsError as FlagsError
from ._errors import MalformedTag as MalformedTag
from ._errors import NotAStructureReference as NotAStructureReference
from ._errors import ShortNameTooLong as ShortNameTooLong
from ._errors import UnresolvableAnnotation as UnresolvableAnnotation
from ._errors import UnsupportedInvocable as UnsupportedInvocable
from ._group import Group as Group
from ._info import Info as Info
from ._settings import options as options
from ._tags import Tag as Tag
from ._tags import tag as tag
from ._warnings import DuplicateNameWarning as DuplicateNameWarning
from ._warnings import StructFlagsWarning as StructFlagsWarning
