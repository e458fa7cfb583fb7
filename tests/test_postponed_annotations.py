"""Groups built from dataclasses whose annotations are stored as strings."""

from __future__ import annotations

import dataclasses
from typing import List

from typing_extensions import Annotated

import structflags
from structflags import tag


@dataclasses.dataclass
class ModuleLevelOptions:
    verbose: Annotated[bool, tag(short="v", long="verbose")] = False
    names: Annotated[List[str], tag(long="name")] = dataclasses.field(
        default_factory=list
    )


def test_string_annotations_keep_tags() -> None:
    options = ModuleLevelOptions()
    group = structflags.Group("g", options)
    assert group.error is None
    assert set(group.long_names.keys()) == {"verbose", "name"}
    assert group.short_names["v"].is_bool()
    assert group.lookup("--name").set("a") is None  # type: ignore
    assert group.lookup("--name").set("b") is None  # type: ignore
    assert options.names == ["a", "b"]


def test_unresolvable_annotation_is_recorded() -> None:
    class Local:
        pass

    @dataclasses.dataclass
    class Options:
        verbose: Annotated[bool, tag(short="v")] = False
        other: Annotated[Local, tag(long="other")] = dataclasses.field(
            default_factory=Local
        )
        after: Annotated[bool, tag(long="after")] = False

    group = structflags.Group("g", Options())
    assert isinstance(group.error, structflags.UnresolvableAnnotation)
    assert group.error.field_name == "other"
    assert "other" in str(group.error)

    # Fields before the unresolvable one keep their tags.
    assert list(group.short_names.keys()) == ["v"]
    assert group.long_names == {}


def test_unresolvable_private_field_is_skipped() -> None:
    class Local:
        pass

    @dataclasses.dataclass
    class Options:
        verbose: Annotated[bool, tag(short="v")] = False
        _cache: Local = dataclasses.field(default_factory=Local)

    group = structflags.Group("g", Options())
    assert group.error is None
    assert list(group.short_names.keys()) == ["v"]
