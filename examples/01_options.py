"""Options

Fields tagged with `long` or `short` names become options. A parser looks
options up by name and sets them; this example uses a deliberately small
parser that only understands `--name value`, `--name=value` and `-x`.

Usage:

    python ./01_options.py -v --output out.txt --include src --include tests
    python ./01_options.py --level
    python ./01_options.py --level=9 --version
"""

import dataclasses
import sys
from pprint import pprint
from typing import Callable, List, Optional

from typing_extensions import Annotated

import structflags
from structflags import tag


def print_version() -> None:
    print("example 0.1.0")


@dataclasses.dataclass
class Args:
    verbose: Annotated[bool, tag(short="v", long="verbose")] = False
    """Show more output."""

    # Where to write results.
    output: Annotated[str, tag(short="o", long="output")] = "-"

    include: Annotated[List[str], tag(short="I", long="include")] = (
        dataclasses.field(default_factory=list)
    )

    level: Annotated[
        int,
        tag(long="level", optional=True, default=6, description="Compression level."),
    ] = 0

    version: Annotated[Callable[[], None], tag(long="version")] = print_version


def parse(group: structflags.Group, argv: List[str]) -> None:
    args = list(argv)
    while len(args) > 0:
        arg = args.pop(0)
        name, _, inline = arg.partition("=")
        info = group.lookup(name)
        if info is None:
            sys.exit(f"unknown option: {name}")

        value: Optional[str] = None
        if inline != "":
            value = inline
        elif info.can_argument():
            if info.optional_argument and (len(args) == 0 or args[0].startswith("-")):
                value = info.default
            elif len(args) > 0:
                value = args.pop(0)
            else:
                sys.exit(f"missing argument for {info}")

        error = info.set(value)
        if error is not None:
            sys.exit(f"{name}: {error}")


if __name__ == "__main__":
    args = Args()
    group = structflags.Group("Application Options", args)
    group.raise_for_error()

    for info in group.options:
        print(info.describe())
    parse(group, sys.argv[1:])
    pprint(args)
