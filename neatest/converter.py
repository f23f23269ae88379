"""Conversion between internal (.neadic) and external (.aff/.dic/.good/.wrong) fixtures.

The split direction parses the internal document and projects its blocks onto
the four external artifacts, filling in defaults for absent optional blocks.
The merge direction wraps external word lists back into block syntax.

Merging never reconstructs a TESTBADGRAM block: once split out, its content
is indistinguishable from the rest of the affix rules. Likewise a DIC block
whose first entry is a number equal to the count of the entries after it
comes back without that entry.

No charset conversion happens anywhere. Files are read and written as UTF-8
with ``surrogateescape`` so bytes in any other encoding pass through intact.
"""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from neatest.blocks import Block, BlockKind, InternalDocument, parse_document, split_lines
from neatest.test_case import TestCase

# Not a word in any supported language
SENTINEL_ENTRY = "thssntwd"

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


class NeatestError(Exception):
    """Base class for conversion errors."""


class MissingArtifactError(NeatestError, FileNotFoundError):
    """A file required for the conversion does not exist."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Missing {self.path}")


class UnclassifiedBlockError(NeatestError, ValueError):
    """A block opening line carries no recognized keyword (strict mode only)."""

    def __init__(self, opening_line: str):
        self.opening_line = opening_line
        super().__init__(f"Unclassified block: {opening_line!r}")


class ExternalFixture(BaseModel):
    """The four external artifacts as file contents.

    ``wrong`` is None when no bad-word assertions exist, which is different
    from an empty bad-word list.
    """

    aff: str
    dic: str
    good: str
    wrong: str | None = None


def read_text(path: Path) -> str:
    with path.open("r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    with path.open("w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        f.write(content)


def join_lines(lines: list[str]) -> str:
    """Join lines with a newline after every line, including the last."""
    return "".join(f"{line}\n" for line in lines)


def dic_entries(body_lines: list[str]) -> list[str]:
    """Return the entries of a DIC block body.

    A body that starts with its own decimal count matching the number of
    following lines was pasted from a .dic file; the count is dropped so it
    is not written twice. A genuine numeric first entry that happens to
    match is indistinguishable from such a count and is dropped too.
    """
    if body_lines:
        first = body_lines[0].strip()
        if first.isdigit() and int(first) == len(body_lines) - 1:
            logger.warning(
                f"DIC block starts with {first!r}, taken as its own entry count and not written "
                "as an entry"
            )
            return body_lines[1:]
    return body_lines


def format_dic(entries: list[str]) -> str:
    """Format a .dic file: count line followed by exactly that many entries."""
    return join_lines([str(len(entries)), *entries])


def split_document(document: InternalDocument, strict: bool = False) -> ExternalFixture:
    """Project an internal document onto the external artifacts.

    Args:
        document: Parsed internal document
        strict: Raise on unclassified blocks instead of dropping them

    Returns:
        ExternalFixture with defaults applied for absent blocks

    Raises:
        UnclassifiedBlockError: If strict and a block has no recognized kind
    """
    aff_lines = list(document.header_lines)
    dic: str | None = None
    good: str | None = None
    wrong: str | None = None

    for block in document.blocks:
        if block.kind is None:
            if strict:
                raise UnclassifiedBlockError(block.opening_line)
            logger.warning(f"Dropping unclassified block: {block.opening_line!r}")
            continue

        if block.kind is BlockKind.TESTBADGRAM:
            aff_lines.extend(block.body_lines)
        elif block.kind is BlockKind.DIC:
            if dic is not None:
                logger.warning("Duplicate DIC block, the later one replaces the earlier")
            dic = format_dic(dic_entries(block.body_lines))
        elif block.kind is BlockKind.TESTGOODWORDS:
            if good is not None:
                logger.warning("Duplicate TESTGOODWORDS block, the later one replaces the earlier")
            good = join_lines(block.body_lines)
        elif block.kind is BlockKind.TESTBADWORDS:
            if wrong is not None:
                logger.warning("Duplicate TESTBADWORDS block, the later one replaces the earlier")
            wrong = join_lines(block.body_lines)

    if dic is None:
        logger.debug(f"No DIC block, using sentinel entry {SENTINEL_ENTRY!r}")
        dic = format_dic([SENTINEL_ENTRY])
    if good is None:
        logger.debug("No TESTGOODWORDS block, writing empty good list")
        good = "\n"

    return ExternalFixture(aff=join_lines(aff_lines), dic=dic, good=good, wrong=wrong)


def merge_fixture(
    aff: str, dic: str, good: str | None = None, wrong: str | None = None
) -> InternalDocument:
    """Compose an internal document from external file contents.

    The .aff content becomes the header, the .dic entries (without the count
    line) a DIC block, and the optional word lists TESTGOODWORDS and
    TESTBADWORDS blocks.
    """
    document = InternalDocument(header_lines=split_lines(aff))

    # The first .dic line is the entry count
    document.blocks.append(Block(kind=BlockKind.DIC, body_lines=split_lines(dic)[1:]))
    if good is not None:
        document.blocks.append(Block(kind=BlockKind.TESTGOODWORDS, body_lines=split_lines(good)))
    if wrong is not None:
        document.blocks.append(Block(kind=BlockKind.TESTBADWORDS, body_lines=split_lines(wrong)))

    return document


def write_fixture(fixture: ExternalFixture, test_case: TestCase) -> None:
    """Write external artifacts, removing stale word lists and dictionary first."""
    for stale in (test_case.dic_path, test_case.good_path, test_case.wrong_path):
        stale.unlink(missing_ok=True)

    test_case.external_dir.mkdir(parents=True, exist_ok=True)
    write_text(test_case.aff_path, fixture.aff)
    write_text(test_case.dic_path, fixture.dic)
    write_text(test_case.good_path, fixture.good)
    if fixture.wrong is not None:
        write_text(test_case.wrong_path, fixture.wrong)

    logger.info(f"Wrote external test case {test_case.external_dir / test_case.name}")


def convert_to_external(test_case: TestCase, strict: bool = False) -> ExternalFixture:
    """Split a test case's .neadic file into its external files.

    Raises:
        MissingArtifactError: If the internal file does not exist
        UnclassifiedBlockError: If strict and a block is unclassified
    """
    if not test_case.internal_path.is_file():
        logger.error(f"Internal test case not found: {test_case.internal_path}")
        raise MissingArtifactError(test_case.internal_path)

    logger.debug(f"Converting internal test case from {test_case.internal_path}")
    document = parse_document(read_text(test_case.internal_path))
    fixture = split_document(document, strict=strict)
    write_fixture(fixture, test_case)
    return fixture


def convert_to_internal(test_case: TestCase) -> InternalDocument:
    """Merge a test case's external files into its .neadic file.

    Both required files are checked before anything is written.

    Raises:
        MissingArtifactError: If the .aff or .dic file does not exist
    """
    for required in (test_case.aff_path, test_case.dic_path):
        if not required.is_file():
            logger.error(f"Required external file not found: {required}")
            raise MissingArtifactError(required)

    logger.debug(f"Converting external test case to {test_case.internal_path}")
    good = read_text(test_case.good_path) if test_case.good_path.is_file() else None
    wrong = read_text(test_case.wrong_path) if test_case.wrong_path.is_file() else None
    document = merge_fixture(
        read_text(test_case.aff_path), read_text(test_case.dic_path), good, wrong
    )

    test_case.internal_dir.mkdir(parents=True, exist_ok=True)
    write_text(test_case.internal_path, document.render())
    logger.info(f"Wrote internal test case {test_case.internal_path}")
    return document
