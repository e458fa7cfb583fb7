"""Warning categories. Problems that don't stop a group from being built are
reported through :mod:`warnings`, so they can be filtered or turned into errors
with the usual filters:

.. code-block:: python

    warnings.filterwarnings("error", category=structflags.DuplicateNameWarning)
"""


class StructFlagsWarning(UserWarning):
    """Base category for all structflags warnings."""


class DuplicateNameWarning(StructFlagsWarning):
    """Two fields of one group register the same short or long name. The field
    declared last owns the name. Use `strict_names=True` to record a
    :class:`structflags.DuplicateName` error instead."""
