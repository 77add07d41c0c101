import os
import re
from dataclasses import dataclass
from typing import Optional

from grazer.config import HASH_COMMENT_EXTENSIONS
from grazer.services.analysis_types import TextMetrics

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class CommentSyntax:
    line: str
    block_open: Optional[str] = None
    block_close: Optional[str] = None


C_STYLE_COMMENTS = CommentSyntax(line="//", block_open="/*", block_close="*/")
HASH_COMMENTS = CommentSyntax(line="#")


def comment_syntax_for_path(path: str) -> CommentSyntax:
    if os.path.splitext(path)[1].lower() in HASH_COMMENT_EXTENSIONS:
        return HASH_COMMENTS
    return C_STYLE_COMMENTS


def split_lines(content: str) -> list[str]:
    """
    Split on `\\n` or `\\r\\n`.

    A trailing newline ends the last line instead of starting an empty one,
    so empty content has no lines at all.
    """
    if not content:
        return []
    lines = _LINE_BREAK.split(content)
    if lines[-1] == "":
        lines.pop()
    return lines


def analyze_text(content: str, syntax: CommentSyntax = C_STYLE_COMMENTS) -> TextMetrics:
    lines = split_lines(content)
    loc = len(lines)

    comment_lines = 0
    blank_lines = 0
    in_block_comment = False

    for line in lines:
        trimmed = line.strip()
        if not trimmed:
            blank_lines += 1
            continue

        if in_block_comment:
            # Anything after the terminator on this line is still counted as
            # comment; this is a line heuristic, not a tokenizer.
            comment_lines += 1
            if syntax.block_close in trimmed:
                in_block_comment = False
            continue

        if syntax.block_open and trimmed.startswith(syntax.block_open):
            comment_lines += 1
            if syntax.block_close not in trimmed:
                in_block_comment = True
            continue

        if trimmed.startswith(syntax.line):
            comment_lines += 1

    return TextMetrics(
        loc=loc,
        sloc=max(0, loc - blank_lines - comment_lines),
        comment_lines=comment_lines,
        blank_lines=blank_lines,
        comment_density=comment_lines / loc if loc > 0 else 0.0,
    )
