"""Utilities for working with help text."""

from __future__ import annotations

import textwrap
from typing import List


def dedent(text: str) -> str:
    """Same as textwrap.dedent, but ignores the first line."""
    first_line, line_break, rest = text.partition("\n")
    if line_break == "":
        return textwrap.dedent(text)
    return f"{first_line.strip()}\n{textwrap.dedent(rest)}"


def remove_single_line_breaks(helptext: str) -> str:
    """Join wrapped lines into paragraphs. Blank lines and lines that don't start
    with a letter (eg list bullets) keep their line breaks."""
    lines = helptext.split("\n")
    output_parts: List[str] = []
    for line in lines:
        line = line.strip()

        # Empty line.
        if len(line) == 0:
            prev_is_break = len(output_parts) >= 1 and output_parts[-1] == "\n"
            if not prev_is_break:
                output_parts.append("\n")
            output_parts.append("\n")

        else:
            if not line[0].isalpha():
                output_parts.append("\n")
            prev_is_break = len(output_parts) >= 1 and output_parts[-1] == "\n"
            if len(output_parts) >= 1 and not prev_is_break:
                output_parts.append(" ")
            output_parts.append(line)

    return "".join(output_parts).strip()
