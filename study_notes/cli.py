"""CLI interface: parse notes, pick a voice and practice out loud."""

import argparse
import json
import logging
import os
import sys

from study_notes.constants import PREFS_FILE, CLIPS_DIR, VERSION
from study_notes.engine import create_engine
from study_notes.models import HEADING, TABLE, DIALOGUE, PLAIN
from study_notes.parser import parse_note
from study_notes.practice import speak_targets, render_blocks
from study_notes.preferences import JsonPreferenceStore
from study_notes.voices import VoiceSelector

logger = logging.getLogger(__name__)


def _read_note(file_path: str) -> str:
    """Read a note file, exiting on missing or empty input."""
    if not os.path.exists(file_path):
        print(f"Error: File not found: {file_path}", file=sys.stderr)
        raise SystemExit(1)

    with open(file_path, encoding="utf-8") as f:
        text = f.read()

    if not text.strip():
        print(f"Error: File is empty: {file_path}", file=sys.stderr)
        raise SystemExit(1)
    return text


def _build_selector(args, require_voices: bool = False) -> VoiceSelector:
    """Create the engine and selector, then load the engine's voices."""
    engine = create_engine(clips_dir=args.clips_dir)
    selector = VoiceSelector(engine, JsonPreferenceStore(args.prefs))

    if engine is None:
        print("Warning: speech is unavailable (ffmpeg not found).", file=sys.stderr)
        if require_voices:
            raise SystemExit(1)
        return selector

    try:
        # Fires the selector's voice-list listener
        engine.refresh_voices()
    except Exception as e:
        logger.warning("Could not load voices: %s", e)
        if require_voices:
            print(f"Error: Could not load voices: {e}", file=sys.stderr)
            raise SystemExit(1)
    return selector


def cmd_parse(args):
    """Print the blocks parsed from a note file."""
    blocks = parse_note(_read_note(args.file))

    if args.json:
        print(json.dumps([b.to_dict() for b in blocks], ensure_ascii=False, indent=2))
        return

    counts = {kind: sum(1 for b in blocks if b.kind == kind) for kind in (HEADING, TABLE, DIALOGUE, PLAIN)}
    print(f"Parsed {len(blocks)} blocks "
          f"({counts[HEADING]} heading, {counts[TABLE]} table, "
          f"{counts[DIALOGUE]} dialogue, {counts[PLAIN]} plain)")
    for line in render_blocks(blocks):
        print(line)


def cmd_voices(args):
    """List available Spanish voices, marking the selected one."""
    selector = _build_selector(args, require_voices=True)
    filter_str = args.filter.lower() if args.filter else None

    matches = [
        (i, voice, label)
        for i, (voice, label) in enumerate(zip(selector.voices, selector.voice_labels()))
        if not filter_str or filter_str in label.lower() or filter_str in voice.uri.lower()
    ]
    if not matches:
        print("No matching voices found.")
        return

    print("Available voices:")
    for i, voice, label in matches:
        marker = "*" if i == selector.selected_index else " "
        print(f" {marker} {i:>3}  {label}  [{voice.uri}]")


def cmd_set_voice(args):
    """Persist the voice choice by index."""
    selector = _build_selector(args, require_voices=True)
    index = args.index

    if not 0 <= index < len(selector.voices):
        print(f"Error: Voice index out of range: {index}", file=sys.stderr)
        print(f"Run 'study-notes voices' to see the {len(selector.voices)} available voices.", file=sys.stderr)
        raise SystemExit(1)

    selector.set_selected_index(index)
    print(f"Updated: voice → {selector.voice_labels()[index]}")


def cmd_speak(args):
    """Speak a single line of text."""
    selector = _build_selector(args)
    selector.speak(args.text)


def cmd_practice(args):
    """Show a note and speak items chosen by number."""
    blocks = parse_note(_read_note(args.file))
    targets = speak_targets(blocks)

    for line in render_blocks(blocks):
        print(line)

    if not targets:
        print("\nNothing to practice in this note.")
        return

    selector = _build_selector(args)
    by_number = {t.number: t for t in targets}
    print(f"\nEnter 1-{len(targets)} to listen, 'q' to quit.")

    while True:
        try:
            response = input("> ").strip().lower()
        except EOFError:
            break
        if response in ("q", "quit"):
            break
        if not response:
            continue
        if not response.isdigit() or int(response) not in by_number:
            print(f"Error: Not a practice item: {response}", file=sys.stderr)
            continue
        target = by_number[int(response)]
        print(f"  ▶ {target.text}")
        selector.speak(target.text)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="study-notes",
        description="Study Notes — practice Spanish/Chinese notes out loud",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("--prefs", default=PREFS_FILE, help="Path to the preferences file")
    parser.add_argument("--clips-dir", default=CLIPS_DIR, help="Directory for cached speech clips")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse
    parse_parser = subparsers.add_parser("parse", help="Parse a note file into blocks")
    parse_parser.add_argument("file", help="Path to the note file")
    parse_parser.add_argument("--json", action="store_true", help="Print blocks as JSON")
    parse_parser.set_defaults(func=cmd_parse)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.set_defaults(func=cmd_voices)

    # set-voice
    set_parser = subparsers.add_parser("set-voice", help="Choose the voice used for speech")
    set_parser.add_argument("index", type=int, help="Voice number from 'voices'")
    set_parser.set_defaults(func=cmd_set_voice)

    # speak
    speak_parser = subparsers.add_parser("speak", help="Speak a line of text")
    speak_parser.add_argument("text", help="Text to speak")
    speak_parser.set_defaults(func=cmd_speak)

    # practice
    practice_parser = subparsers.add_parser("practice", help="Practice a note interactively")
    practice_parser.add_argument("file", help="Path to the note file")
    practice_parser.set_defaults(func=cmd_practice)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    args.func(args)
