"""Practice-mode view: which text is speakable and how blocks print."""

from dataclasses import dataclass

from study_notes.models import ParsedBlock, HEADING, TABLE, DIALOGUE


@dataclass
class SpeakTarget:
    number: int        # 1-based, as shown to the user
    block_index: int
    text: str


def speak_targets(blocks: list[ParsedBlock]) -> list[SpeakTarget]:
    """Speakable items in display order.

    Headings, dialogue primary lines and the first cell of each table row
    can be spoken. Plain blocks and translations cannot.
    """
    targets = []

    def add(block_index, text):
        targets.append(SpeakTarget(number=len(targets) + 1, block_index=block_index, text=text))

    for i, block in enumerate(blocks):
        if block.kind == HEADING:
            add(i, block.payload)
        elif block.kind == DIALOGUE:
            add(i, block.payload.primary)
        elif block.kind == TABLE:
            for row in block.payload.rows:
                if row:
                    add(i, row[0])
    return targets


def render_blocks(blocks: list[ParsedBlock]) -> list[str]:
    """Render blocks as text lines, prefixing speakable items with [n]."""
    lines = []
    number = 0

    def tag():
        nonlocal number
        number += 1
        return f"[{number}]"

    for block in blocks:
        if block.kind == HEADING:
            lines.append(f"{tag()} == {block.payload} ==")
        elif block.kind == DIALOGUE:
            lines.append(f"{tag()} {block.payload.primary}")
            lines.append(f"      {block.payload.secondary}")
        elif block.kind == TABLE:
            lines.append("    | " + " | ".join(block.payload.headers) + " |")
            for row in block.payload.rows:
                prefix = tag() if row else "   "
                lines.append(f"{prefix} | " + " | ".join(row) + " |")
        else:
            lines.append(f"    {block.payload}")
        lines.append("")

    if lines:
        lines.pop()
    return lines
