"""Block parsing and classification for internal (.neadic) test documents.

An internal document is a header of affix rules followed by typed blocks::

    SET UTF-8
    NEA DIC {
        cat
        dog
    }
    NEA TESTGOODWORDS {
        cat
    }

This module splits such text into a header and blocks, classifies each block
by its opening line and strips the framing from its payload. It also renders
payload lines back into block syntax, which is the exact inverse of the
payload extraction.
"""

import re
from enum import Enum

from loguru import logger
from pydantic import BaseModel

BLOCK_MARKER = "NEA"
INDENT = "    "
CLOSING_DELIMITER = "}"
COMMENT_MARKER = "#"

MARKER_PATTERN = re.compile(rf"^{BLOCK_MARKER}\b")
KIND_PATTERN = re.compile(r"\b(DIC|TESTBADGRAM|TESTGOODWORDS|TESTBADWORDS)\b")
# A line of only "}" (optionally indented, optionally followed by a comment),
# or any line whose first non-blank character is the comment marker.
FRAMING_PATTERN = re.compile(r"^\s*(#|\}\s*(#.*)?$)")


class BlockKind(str, Enum):
    """Semantic type of a block, named after its keyword."""

    DIC = "DIC"
    TESTBADGRAM = "TESTBADGRAM"
    TESTGOODWORDS = "TESTGOODWORDS"
    TESTBADWORDS = "TESTBADWORDS"


class Block(BaseModel):
    """A classified block. ``kind`` is None for an unrecognized opening line."""

    kind: BlockKind | None
    body_lines: list[str]
    opening_line: str = ""

    @property
    def is_classified(self) -> bool:
        return self.kind is not None


class InternalDocument(BaseModel):
    """Header lines followed by blocks, in document order."""

    header_lines: list[str] = []
    blocks: list[Block] = []

    def render(self) -> str:
        """Return the document as .neadic text."""
        lines = list(self.header_lines)
        for block in self.blocks:
            if block.kind is None:
                logger.warning(f"Not rendering unclassified block: {block.opening_line!r}")
                continue
            lines.extend(render_block(block.kind, block.body_lines))
        return "".join(f"{line}\n" for line in lines)


def split_lines(text: str) -> list[str]:
    """Split text on line feeds only.

    Other characters that ``str.splitlines`` treats as breaks (form feed,
    vertical tab, U+2028 and friends) are content and stay inside their line.
    A trailing newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def is_block_marker(line: str) -> bool:
    """Return True if the line opens a new block."""
    return MARKER_PATTERN.match(line) is not None


def split_spans(text: str) -> tuple[list[str], list[list[str]]]:
    """Split document text into header lines and raw block spans.

    Each span starts with its marker line and runs up to the next marker
    line or the end of the document. Spans are contiguous and never overlap.

    Args:
        text: Raw text of an internal document

    Returns:
        Tuple of (header_lines, spans)
    """
    header: list[str] = []
    spans: list[list[str]] = []

    for line in split_lines(text):
        if is_block_marker(line):
            spans.append([line])
        elif spans:
            spans[-1].append(line)
        else:
            header.append(line)

    logger.debug(f"Split document into {len(header)} header line(s) and {len(spans)} block(s)")
    return header, spans


def classify_kind(opening_line: str) -> BlockKind | None:
    """Find the block keyword in an opening line, or None if there is none."""
    match = KIND_PATTERN.search(opening_line)
    if match is None:
        return None
    return BlockKind(match.group(1))


def is_framing(line: str) -> bool:
    """Return True for closing-delimiter and comment lines."""
    return FRAMING_PATTERN.match(line) is not None


def strip_indent(line: str) -> str:
    """Remove one fixed-width indentation level if present."""
    if line.startswith(INDENT):
        return line[len(INDENT):]
    return line


def classify_block(span: list[str]) -> Block:
    """Classify a raw span and extract its payload lines.

    The opening line is dropped, closing delimiters and comment lines are
    removed, and one indentation level is stripped from what remains.

    Args:
        span: Lines of one block, the first being its opening line

    Returns:
        Block with kind (or None) and payload lines

    Raises:
        ValueError: If the span is empty
    """
    if not span:
        msg = "block span cannot be empty"
        raise ValueError(msg)

    opening_line = span[0]
    body = [strip_indent(line) for line in span[1:] if not is_framing(line)]
    return Block(kind=classify_kind(opening_line), body_lines=body, opening_line=opening_line)


def render_block(kind: BlockKind, body_lines: list[str]) -> list[str]:
    """Wrap payload lines in block syntax: marker line, indented body, brace."""
    lines = [f"{BLOCK_MARKER} {kind.value} {{"]
    lines.extend(f"{INDENT}{line}" for line in body_lines)
    lines.append(CLOSING_DELIMITER)
    return lines


def parse_document(text: str) -> InternalDocument:
    """Parse internal document text into header and classified blocks.

    Unclassified blocks are kept in the result so callers can decide what
    to do with them.
    """
    header, spans = split_spans(text)
    blocks = [classify_block(span) for span in spans]
    return InternalDocument(header_lines=header, blocks=blocks)
