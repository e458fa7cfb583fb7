"""Helpers for reading field docstrings and comments. Used as a fallback for
option descriptions."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import io
import tokenize
from typing import Dict, List, Optional, Type

import docstring_parser

from . import _strings


@dataclasses.dataclass(frozen=True)
class _Token:
    token_type: int
    content: str
    logical_line: int
    actual_line: int


@dataclasses.dataclass(frozen=True)
class _FieldData:
    index: int
    logical_line: int
    actual_line: int


@dataclasses.dataclass(frozen=True)
class _ClassTokenization:
    tokens: List[_Token]
    tokens_from_logical_line: Dict[int, List[_Token]]
    tokens_from_actual_line: Dict[int, List[_Token]]
    field_data_from_name: Dict[str, _FieldData]

    @staticmethod
    @functools.lru_cache(maxsize=64)
    def make(clz: Type) -> _ClassTokenization:
        """Parse the source code of a class, and cache some tokenization information."""
        readline = io.BytesIO(inspect.getsource(clz).encode("utf-8")).readline

        tokens: List[_Token] = []
        tokens_from_logical_line: Dict[int, List[_Token]] = {1: []}
        tokens_from_actual_line: Dict[int, List[_Token]] = {1: []}
        field_data_from_name: Dict[str, _FieldData] = {}

        logical_line = 1
        actual_line = 1
        for toktype, tok, _, _, _ in tokenize.tokenize(readline):
            # Logical lines end at `tokenize.NEWLINE`; `tokenize.NL` only breaks
            # the physical line.
            if toktype == tokenize.NEWLINE:
                logical_line += 1
                actual_line += 1
                tokens_from_logical_line[logical_line] = []
                tokens_from_actual_line[actual_line] = []
            elif toktype == tokenize.NL:
                actual_line += 1
                tokens_from_actual_line[actual_line] = []
            elif toktype is not tokenize.INDENT:
                token = _Token(
                    token_type=toktype,
                    content=tok,
                    logical_line=logical_line,
                    actual_line=actual_line,
                )
                tokens.append(token)
                tokens_from_logical_line[logical_line].append(token)
                tokens_from_actual_line[actual_line].append(token)

        for i, token in enumerate(tokens[:-1]):
            if token.token_type != tokenize.NAME:
                continue

            # A field name is the first non-comment token of its logical line,
            # followed by a colon.
            first = next(
                t
                for t in tokens_from_logical_line[token.logical_line]
                if t.token_type != tokenize.COMMENT
            )
            if first != token:
                continue
            if (
                tokens[i + 1].content == ":"
                and token.content not in field_data_from_name
            ):
                field_data_from_name[token.content] = _FieldData(
                    index=i,
                    logical_line=token.logical_line,
                    actual_line=token.actual_line,
                )

        return _ClassTokenization(
            tokens=tokens,
            tokens_from_logical_line=tokens_from_logical_line,
            tokens_from_actual_line=tokens_from_actual_line,
            field_data_from_name=field_data_from_name,
        )


@functools.lru_cache(maxsize=1024)
def _get_class_tokenization_with_field(
    cls: Type, field_name: str
) -> Optional[_ClassTokenization]:
    # Search for the field in this class and all parents.
    for search_cls in cls.__mro__:
        if search_cls.__module__ == "builtins":
            continue
        try:
            tokenization = _ClassTokenization.make(search_cls)
        except (OSError, TypeError):
            # Source isn't available, eg for dynamically created dataclasses or
            # classes defined in a REPL. We assume there's no docstring.
            return None
        if field_name in tokenization.field_data_from_name:
            return tokenization
    return None


@functools.lru_cache(maxsize=1024)
def _parse_docstring_from_object(obj: object) -> Dict[str, str]:
    return {
        doc.arg_name: doc.description
        for doc in docstring_parser.parse_from_object(obj).params
        if doc.description is not None
    }


def _clean_comment(comment: str) -> str:
    assert comment.startswith("#")
    # Sphinx autodoc-style comments start with `#:`.
    return comment[2:].strip() if comment.startswith("#:") else comment[1:].strip()


@functools.lru_cache(maxsize=1024)
def get_field_docstring(cls: Type, field_name: str) -> Optional[str]:
    """Get the docstring for a field in a class.

    Sources, in order of precedence:

    - an attribute docstring below the field, or an `Attributes:` entry in the
      class docstring,
    - a comment on the same line as the field,
    - contiguous comments directly above the field.
    """

    # Try to parse using docstring_parser.
    for cls_search in cls.__mro__:
        if cls_search.__module__ == "builtins":
            continue
        try:
            docstring = _parse_docstring_from_object(cls_search).get(field_name)
        except (OSError, TypeError, SyntaxError):
            docstring = None
        if docstring is not None:
            return _strings.remove_single_line_breaks(_strings.dedent(docstring))

    # If docstring_parser failed, let's try looking for comments.
    tokenization = _get_class_tokenization_with_field(cls, field_name)
    if tokenization is None:
        return None

    field_data = tokenization.field_data_from_name[field_name]

    # Check for comment on the same line as the field.
    final_token_on_line = tokenization.tokens_from_logical_line[
        field_data.logical_line
    ][-1]
    if final_token_on_line.token_type == tokenize.COMMENT:
        return _strings.remove_single_line_breaks(
            _clean_comment(final_token_on_line.content)
        )

    # Check for comments directly above the field. Comments may cover a group
    # of fields:
    #
    #     # Output options.
    #     verbose: bool
    #     quiet: bool
    #
    # except for Sphinx-style `#:` comments, which only apply to the field that
    # directly follows them.
    classdef_logical_line = next(
        t.logical_line for t in tokenization.tokens if t.content == "class"
    )

    comments: List[str] = []
    current_actual_line = field_data.actual_line - 1
    directly_above_field = True
    is_sphinx_doc_comment = False
    while current_actual_line in tokenization.tokens_from_actual_line:
        actual_line_tokens = tokenization.tokens_from_actual_line[current_actual_line]

        # Stop at empty lines and at the class definition itself.
        if len(actual_line_tokens) == 0:
            break
        if actual_line_tokens[0].logical_line <= classdef_logical_line:
            break

        if (
            len(actual_line_tokens) == 1
            and actual_line_tokens[0].token_type is tokenize.COMMENT
        ):
            (comment_token,) = actual_line_tokens
            comments.append(_clean_comment(comment_token.content))
            is_sphinx_doc_comment = comment_token.content.startswith("#:")
        elif len(comments) > 0:
            # Comments should be contiguous.
            break
        else:
            directly_above_field = False

        current_actual_line -= 1

    if len(comments) > 0 and not (is_sphinx_doc_comment and not directly_above_field):
        return _strings.remove_single_line_breaks("\n".join(reversed(comments)))

    return None
