"""Data models for parsed notes and speech synthesis."""

from dataclasses import dataclass, field, asdict
from typing import Callable

HEADING = "heading"
TABLE = "table"
DIALOGUE = "dialogue"
PLAIN = "plain"


@dataclass
class TableContent:
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)


@dataclass
class DialogueContent:
    primary: str       # source-language line
    secondary: str     # translation line


@dataclass(frozen=True)
class ParsedBlock:
    kind: str          # HEADING, TABLE, DIALOGUE or PLAIN
    payload: str | TableContent | DialogueContent
    source_text: str = ""

    def to_dict(self) -> dict:
        if isinstance(self.payload, str):
            payload = self.payload
        else:
            payload = asdict(self.payload)
        return {"kind": self.kind, "payload": payload, "source_text": self.source_text}


@dataclass
class Voice:
    uri: str
    display_name: str
    language_tag: str
    is_local_service: bool = False


@dataclass
class Utterance:
    text: str
    voice: Voice | None = None
    lang: str = ""     # only consulted when voice is None
    rate: float = 1.0
    on_start: Callable[[], None] | None = None
    on_end: Callable[[], None] | None = None
    on_error: Callable[[], None] | None = None
