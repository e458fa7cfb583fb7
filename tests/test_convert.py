import collections
import dataclasses
import datetime
import decimal
import enum
import pathlib
from typing import Deque, Dict, FrozenSet, List, Optional, Set, Tuple, Union

import pytest
from typing_extensions import Annotated, Literal

import structflags
from structflags import tag
from structflags._convert import apply_default_rules


class Mode(enum.Enum):
    FAST = "fast"
    SAFE = 2


def _group(options: object) -> structflags.Group:
    group = structflags.Group("g", options)
    assert group.error is None
    return group


@pytest.mark.parametrize(
    "value,expected",
    [
        ("", True),
        ("true", True),
        ("True", True),
        ("1", True),
        ("yes", True),
        ("on", True),
        ("false", False),
        ("0", False),
        ("No", False),
        ("off", False),
    ],
)
def test_bool(value: str, expected: bool) -> None:
    assert structflags.from_str(value, bool) is expected


def test_bool_invalid() -> None:
    with pytest.raises(structflags.ConversionError):
        structflags.from_str("maybe", bool)


def test_scalars() -> None:
    assert structflags.from_str("12", int) == 12
    assert structflags.from_str("-3", int) == -3
    assert structflags.from_str("1.5", float) == 1.5
    assert structflags.from_str("1+2j", complex) == 1 + 2j
    assert structflags.from_str("abc", bytes) == b"abc"
    assert structflags.from_str("text", str) == "text"
    assert structflags.from_str("a/b", pathlib.Path) == pathlib.Path("a/b")
    assert structflags.from_str("1.10", decimal.Decimal) == decimal.Decimal("1.10")
    assert structflags.from_str("2024-01-02", datetime.date) == datetime.date(
        2024, 1, 2
    )


def test_int_base() -> None:
    assert structflags.from_str("ff", int, tag(base=16)) == 255
    assert structflags.from_str("0o17", int, tag(base=0)) == 15
    with pytest.raises(structflags.ConversionError):
        structflags.from_str("ff", int)

    # A bad base is reported against the tag, not the value.
    with pytest.raises(structflags.ConversionError) as e:
        structflags.from_str("10", int, structflags.Tag.parse('base:"x"'))
    assert "`base` tag" in e.value.cause
    assert "'x'" in e.value.cause


def test_enum_and_literal() -> None:
    assert structflags.from_str("FAST", Mode) is Mode.FAST
    assert structflags.from_str("fast", Mode) is Mode.FAST
    assert structflags.from_str("2", Mode) is Mode.SAFE
    assert structflags.from_str("b", Literal["a", "b"]) == "b"
    assert structflags.from_str("3", Literal[1, 3]) == 3

    with pytest.raises(structflags.ConversionError) as e:
        structflags.from_str("slow", Mode)
    assert "FAST, SAFE" in e.value.cause

    with pytest.raises(structflags.ConversionError):
        structflags.from_str("c", Literal["a", "b"])


def test_union() -> None:
    assert structflags.from_str("3", Union[int, str]) == 3
    assert structflags.from_str("x", Union[int, str]) == "x"
    assert structflags.from_str("3", Optional[int]) == 3
    assert structflags.from_str("None", Optional[int]) is None
    with pytest.raises(structflags.ConversionError):
        structflags.from_str("x", Union[int, float])


def test_unsupported_type() -> None:
    with pytest.raises(structflags.ConversionError) as e:
        structflags.from_str("x", Tuple[int, str])
    assert e.value.cause == "unsupported type"


def test_sequences_append() -> None:
    @dataclasses.dataclass
    class Options:
        ints: Annotated[List[int], tag(long="int")] = dataclasses.field(
            default_factory=lambda: [1]
        )
        words: Annotated[Tuple[str, ...], tag(long="word")] = ()
        tags: Annotated[Set[str], tag(long="tag")] = dataclasses.field(
            default_factory=set
        )
        frozen: Annotated[FrozenSet[int], tag(long="frozen")] = frozenset()
        queue: Annotated[Deque[str], tag(long="queue")] = dataclasses.field(
            default_factory=collections.deque
        )
        maybe: Annotated[Optional[List[float]], tag(long="maybe")] = None

    options = Options()
    group = _group(options)
    for name, value in [
        ("int", "2"),
        ("int", "3"),
        ("word", "a"),
        ("word", "b"),
        ("tag", "x"),
        ("tag", "x"),
        ("frozen", "4"),
        ("queue", "q"),
        ("maybe", "0.5"),
        ("maybe", "1.5"),
    ]:
        assert group.long_names[name].set(value) is None

    assert options.ints == [1, 2, 3]
    assert options.words == ("a", "b")
    assert options.tags == {"x"}
    assert options.frozen == frozenset({4})
    assert options.queue == collections.deque(["q"])
    assert options.maybe == [0.5, 1.5]


def test_sequence_delimiter() -> None:
    @dataclasses.dataclass
    class Options:
        ints: Annotated[List[int], tag(long="ints", delimiter=",")] = dataclasses.field(
            default_factory=list
        )

    options = Options()
    info = _group(options).long_names["ints"]
    assert info.set("1,2") is None
    assert info.set("3") is None
    assert options.ints == [1, 2, 3]

    # A bad element leaves the destination untouched.
    assert isinstance(info.set("4,x"), structflags.ConversionError)
    assert options.ints == [1, 2, 3]


def test_mappings() -> None:
    @dataclasses.dataclass
    class Options:
        env: Annotated[Dict[str, int], tag(long="env")] = dataclasses.field(
            default_factory=dict
        )
        labels: Annotated[
            Dict[str, str], tag(long="label", key_value_delimiter="=", delimiter=";")
        ] = dataclasses.field(default_factory=dict)

    options = Options()
    group = _group(options)
    assert group.long_names["env"].set("a:1") is None
    assert group.long_names["env"].set("b:2") is None
    assert group.long_names["label"].set("x=1;y=2") is None
    assert options.env == {"a": 1, "b": 2}
    assert options.labels == {"x": "1", "y": "2"}

    error = group.long_names["env"].set("c")
    assert isinstance(error, structflags.ConversionError)
    assert "':'" in error.cause
    assert options.env == {"a": 1, "b": 2}


def test_custom_rule() -> None:
    class Celsius(float):
        pass

    registry = structflags.ConverterRegistry()
    apply_default_rules(registry)

    @registry.rule
    def celsius_rule(typ, t):
        if typ is not Celsius:
            return None
        return lambda value: Celsius(value.rstrip("C"))

    assert registry.from_str("21.5C", Celsius) == 21.5
    # The default registry is unaffected.
    with pytest.raises(structflags.ConversionError):
        structflags.from_str("21.5C", Celsius)


def test_conversion_error_message() -> None:
    with pytest.raises(structflags.ConversionError) as e:
        structflags.from_str("abc", int)
    assert str(e.value).startswith("invalid value 'abc' for int:")


def test_fallback_constructor_errors_are_returned() -> None:
    class Port:
        def __init__(self, value: str) -> None:
            raise RuntimeError("ports are reserved")

    @dataclasses.dataclass
    class Options:
        port: Annotated[Port, tag(long="port")] = dataclasses.field(
            default_factory=lambda: object.__new__(Port)
        )

    options = Options()
    default = options.port
    group = structflags.Group("g", options)
    assert group.error is None

    error = group.long_names["port"].set("80")
    assert isinstance(error, structflags.ConversionError)
    assert error.cause == "ports are reserved"
    assert options.port is default
