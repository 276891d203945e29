"""Parse study-note text into typed presentation blocks."""

import re

from study_notes.models import (
    ParsedBlock,
    TableContent,
    DialogueContent,
    HEADING,
    TABLE,
    DIALOGUE,
    PLAIN,
)
from study_notes.constants import CJK_PATTERN, HEADING_NUMBER_PATTERN, HEADING_MARKER_PATTERN

_CJK_RE = re.compile(CJK_PATTERN)
_HEADING_NUMBER_RE = re.compile(HEADING_NUMBER_PATTERN)
_HEADING_MARKER_RE = re.compile(HEADING_MARKER_PATTERN)


def has_cjk(text: str) -> bool:
    """True if text contains a CJK Unified Ideograph (U+4E00–U+9FA5)."""
    return _CJK_RE.search(text) is not None


def clean_heading(line: str) -> str:
    """Strip the ## marker and an optional enumeration token ("① ", "2.", ...)."""
    text = _HEADING_NUMBER_RE.sub("", line, count=1)
    text = _HEADING_MARKER_RE.sub("", text, count=1)
    return text.strip()


def _split_header(line: str) -> list[str]:
    """Header cells: every non-empty piece between pipes."""
    return [cell.strip() for cell in line.split("|") if cell.strip()]


def _split_row(line: str) -> list[str]:
    """Row cells: drop the first and last split positions, keep inner empties."""
    cells = [cell.strip() for cell in line.split("|")]
    return cells[1:-1]


def _parse_table(lines: list[str], i: int) -> tuple[ParsedBlock, int]:
    """Consume a run of pipe-prefixed lines starting at i.

    Returns the table block and the index of the first line after the run.
    """
    header_line = lines[i].strip()
    consumed = [header_line]
    headers = _split_header(header_line)
    rows = []
    i += 1

    while i < len(lines) and lines[i].strip().startswith("|"):
        row_line = lines[i].strip()
        consumed.append(row_line)
        i += 1
        # Separator line, e.g. |---|---|
        if "---" in row_line:
            continue
        rows.append(_split_row(row_line))

    block = ParsedBlock(
        kind=TABLE,
        payload=TableContent(headers=headers, rows=rows),
        source_text="\n".join(consumed),
    )
    return block, i


def parse_note(text: str) -> list[ParsedBlock]:
    """Parse note text into an ordered list of ParsedBlocks.

    Rules, tried in order for each non-blank line:
      1. "##" heading (numbering like "①" or "1." removed)
      2. "|" table: header line plus the following run of "|" lines
      3. dialogue: a line without CJK followed by a line with CJK
      4. plain text

    Blank lines produce no block. Never raises; anything unrecognised
    becomes a plain block.
    """
    lines = text.split("\n")
    blocks = []
    i = 0

    while i < len(lines):
        line = lines[i].strip()
        if not line:
            i += 1
            continue

        if line.startswith("##"):
            blocks.append(ParsedBlock(kind=HEADING, payload=clean_heading(line), source_text=line))
            i += 1
            continue

        if line.startswith("|"):
            block, i = _parse_table(lines, i)
            blocks.append(block)
            continue

        if not has_cjk(line) and i + 1 < len(lines) and has_cjk(lines[i + 1]):
            secondary = lines[i + 1].strip()
            blocks.append(ParsedBlock(
                kind=DIALOGUE,
                payload=DialogueContent(primary=line, secondary=secondary),
                source_text=f"{line}\n{secondary}",
            ))
            i += 2
            continue

        blocks.append(ParsedBlock(kind=PLAIN, payload=line, source_text=line))
        i += 1

    return blocks
