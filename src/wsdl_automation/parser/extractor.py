"""
Directive Extractor for PHP-style documentation comments.

A two-stage lexer over raw source text:

1. :func:`find_blocks` locates every ``/** ... */`` comment and the name of
   the function declared right after it (if any).
2. :func:`split_directives` splits one comment into ordered
   ``@keyword argument`` pairs.

:func:`extract_blocks` composes the two. Both stages are pure and perform
no semantic validation; the interpreter decides what a directive means.

Example:
    >>> source = '''
    ... /**
    ...  * Say hello
    ...  * @param string $name;
    ...  * @return string
    ...  */
    ... public function hello($name) {}
    ... '''
    >>> block = extract_blocks(source)[0]
    >>> block.method
    'hello'
    >>> [(d.keyword, d.argument) for d in block.directives]
    [('param', 'string $name;'), ('return', 'string')]
    >>> block.description
    'Say hello'

Tags:
    parser, lexer, docblock

Doc-Types:
    - API Reference
    - ARCHITECTURE (section: "Directive Extraction")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import NamedTuple

# 1: comment body, 2: name of a function declared right after the comment
BLOCK_PATTERN = re.compile(
    r"/\*\*([^*]*\*+(?:[^*/][^*]*\*+)*)/(?:\s*(?:public\s+)?function\s+([^\s|(]+)\s*\()?",
    re.IGNORECASE | re.DOTALL,
)

# 1: keyword, 2: argument text
KEYWORD_PATTERN = re.compile(r"^\s*\*\s*@([^\s|]+)([^\n]*)$", re.MULTILINE)


class Directive(NamedTuple):
    """One ``@keyword argument`` line."""

    keyword: str
    argument: str


@dataclass(frozen=True)
class DirectiveBlock:
    """One documentation comment and what follows it.

    Attributes:
        comment: Raw comment body (without the ``/**`` and ``/`` delimiters)
        method: Name of the function declared after the comment, or ``""``
        directives: Keyword lines in document order
        description: Free text preceding the first keyword line
        line: 1-based line of the comment start within its source
        origin: Name of the source the block came from
    """

    comment: str
    method: str = ""
    directives: tuple[Directive, ...] = ()
    description: str = ""
    line: int = 1
    origin: str = "<string>"

    @property
    def keywords(self) -> list[str]:
        return [d.keyword for d in self.directives]


def find_blocks(source: str) -> list[tuple[str, str, int]]:
    """Locate documentation comments.

    Returns:
        ``(comment, method, offset)`` triples; ``method`` is ``""`` when no
        function declaration follows the comment.
    """
    if not source:
        return []
    return [
        (match.group(1), match.group(2) or "", match.start())
        for match in BLOCK_PATTERN.finditer(source)
    ]


def split_directives(comment: str) -> list[Directive]:
    """Split a comment body into ordered ``(keyword, argument)`` pairs."""
    return [
        Directive(match.group(1), match.group(2).strip())
        for match in KEYWORD_PATTERN.finditer(comment)
    ]


def extract_description(comment: str) -> str:
    """Free-text lines of a comment, up to the first keyword line."""
    lines: list[str] = []
    for raw in comment.splitlines():
        text = raw.strip().lstrip("*").strip()
        if text.startswith("@"):
            break
        if text and not text.startswith("/"):
            lines.append(text)
    return "\n".join(lines)


def extract_blocks(source: str, origin: str = "<string>") -> list[DirectiveBlock]:
    """Extract every documentation block from source text.

    Args:
        source: Raw source text
        origin: Name used for diagnostics (usually a file path)

    Returns:
        Blocks in document order, including blocks without directives
    """
    blocks = []
    for comment, method, offset in find_blocks(source):
        blocks.append(
            DirectiveBlock(
                comment=comment,
                method=method,
                directives=tuple(split_directives(comment)),
                description=extract_description(comment),
                line=source.count("\n", 0, offset) + 1,
                origin=origin,
            )
        )
    return blocks
