import dataclasses

from typing_extensions import Annotated

import structflags
from structflags import tag


def _descriptions(options: object) -> dict:
    group = structflags.Group("g", options)
    assert group.error is None
    return {info.long_name: info.description for info in group.options}


def test_description_from_comments_and_docstrings() -> None:
    @dataclasses.dataclass
    class Options:
        a: Annotated[bool, tag(long="a")] = False  # Inline comment.

        # Comment above.
        b: Annotated[bool, tag(long="b")] = False

        c: Annotated[bool, tag(long="c")] = False
        """Attribute docstring."""

        #: Sphinx-style comment.
        d: Annotated[bool, tag(long="d")] = False

        e: Annotated[bool, tag(long="e")] = False

    assert _descriptions(Options()) == {
        "a": "Inline comment.",
        "b": "Comment above.",
        "c": "Attribute docstring.",
        "d": "Sphinx-style comment.",
        "e": "",
    }


def test_multiline_comment() -> None:
    @dataclasses.dataclass
    class Options:
        # Number of worker processes to
        # start for each input file.
        workers: Annotated[int, tag(long="workers", short="w")] = 1

    group = structflags.Group("g", Options())
    assert (
        group.short_names["w"].describe()
        == "-w, --workers (Number of worker processes to start for each input file.)"
    )


def test_grouped_comment_applies_to_following_fields() -> None:
    @dataclasses.dataclass
    class Options:
        # Output options.
        quiet: Annotated[bool, tag(long="quiet")] = False
        color: Annotated[bool, tag(long="color")] = False

    assert _descriptions(Options()) == {
        "quiet": "Output options.",
        "color": "Output options.",
    }


def test_attributes_section_in_class_docstring() -> None:
    @dataclasses.dataclass
    class Options:
        """Compression options.

        Attributes:
            level: Compression level, from 1 to 9.
        """

        level: Annotated[int, tag(long="level")] = 6

    assert _descriptions(Options()) == {"level": "Compression level, from 1 to 9."}


def test_description_tag_wins() -> None:
    @dataclasses.dataclass
    class Options:
        x: Annotated[bool, tag(long="x", description="From the tag.")] = False
        """From the docstring."""

        # From a comment.
        y: Annotated[bool, tag(long="y", description="")] = False

    assert _descriptions(Options()) == {"x": "From the tag.", "y": ""}


def test_docstrings_can_be_disabled() -> None:
    @dataclasses.dataclass
    class Options:
        x: Annotated[bool, tag(long="x")] = False
        """From the docstring."""

    structflags.options["docstrings"] = False
    assert _descriptions(Options()) == {"x": ""}


def test_dynamic_dataclass_has_no_docstrings() -> None:
    Options = dataclasses.make_dataclass(
        "Options",
        [("x", Annotated[bool, tag(long="x")], dataclasses.field(default=False))],
    )
    assert _descriptions(Options()) == {"x": ""}
