"""Speech synthesis engines: the abstract interface and an edge-tts backend."""

import asyncio
import hashlib
import logging
import os
import shutil
import time

import edge_tts
from pydub import AudioSegment
from pydub.playback import play

from study_notes.constants import (
    CLIPS_DIR,
    FALLBACK_VOICE,
    TTS_RETRY_COUNT,
    TTS_RETRY_BASE_DELAY,
    TTS_RATE,
)
from study_notes.models import Voice, Utterance

logger = logging.getLogger(__name__)


class SynthesisEngine:
    """What the voice selector needs from a text-to-speech backend."""

    def list_voices(self) -> list[Voice]:
        """Return the voices currently known to the engine (may still be loading)."""
        raise NotImplementedError

    def speak(self, utterance: Utterance) -> None:
        """Start speaking; progress is reported through the utterance callbacks."""
        raise NotImplementedError

    def cancel(self) -> None:
        """Stop any utterance in flight."""
        raise NotImplementedError

    def on_voices_changed(self, callback) -> None:
        """Register a callback fired whenever the voice list changes."""
        raise NotImplementedError


def rate_to_edge(rate: float) -> str:
    """Convert a relative rate multiplier to edge-tts syntax: 0.9 → "-10%"."""
    return f"{round((rate - 1.0) * 100):+d}%"


def voice_from_edge(entry: dict) -> Voice:
    """Map an edge_tts.list_voices() entry to a Voice."""
    return Voice(
        uri=entry["ShortName"],
        display_name=entry.get("FriendlyName") or entry["ShortName"],
        language_tag=entry.get("Locale", ""),
        is_local_service=False,
    )


def synthesize_clip(text: str, voice: str, output_path: str, rate: str = rate_to_edge(TTS_RATE)) -> None:
    """Write a single TTS clip to output_path, retrying on failure.

    Retries on network errors or 0-byte output files with exponential
    backoff. Rate is a relative edge-tts string like "-10%". Re-raises the
    last error once retries are exhausted.
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            communicate = edge_tts.Communicate(text, voice, rate=rate)
            asyncio.run(communicate.save(output_path))

            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return

            last_error = Exception(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = e

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            time.sleep(delay)

    raise last_error


def _clip_filename(text: str, voice: str, rate: str) -> str:
    digest = hashlib.sha256(f"{voice}|{rate}|{text}".encode()).hexdigest()[:16]
    return f"{voice}_{digest}.mp3"


def _fire(callback) -> None:
    if callback is not None:
        callback()


class EdgeTTSEngine(SynthesisEngine):
    """Synthesis through Microsoft Edge's online TTS service.

    The voice list is empty until refresh_voices() is called, mirroring
    engines that load voices lazily. Clips are cached under clips_dir and
    played with pydub unless playback is disabled.
    """

    def __init__(self, clips_dir: str = CLIPS_DIR, playback: bool = True):
        self.clips_dir = clips_dir
        self.playback = playback
        self._voices = []
        self._listeners = []
        self._current = None

    @staticmethod
    def is_available() -> bool:
        """Clips are MP3, so decoding them needs ffmpeg on PATH."""
        return shutil.which("ffmpeg") is not None

    def list_voices(self) -> list[Voice]:
        return list(self._voices)

    def refresh_voices(self) -> list[Voice]:
        """Fetch the voice catalogue and notify listeners."""
        entries = asyncio.run(edge_tts.list_voices())
        self._voices = [voice_from_edge(e) for e in entries]
        logger.info("Loaded %d voices from edge-tts", len(self._voices))
        for callback in list(self._listeners):
            callback()
        return self.list_voices()

    def on_voices_changed(self, callback) -> None:
        self._listeners.append(callback)

    def cancel(self) -> None:
        self._current = None

    def speak(self, utterance: Utterance) -> None:
        self._current = utterance
        voice = utterance.voice.uri if utterance.voice else FALLBACK_VOICE
        rate = rate_to_edge(utterance.rate)

        try:
            os.makedirs(self.clips_dir, exist_ok=True)
            path = os.path.join(self.clips_dir, _clip_filename(utterance.text, voice, rate))
            if not (os.path.exists(path) and os.path.getsize(path) > 0):
                synthesize_clip(utterance.text, voice, path, rate)
            if self._current is not utterance:
                logger.debug("Utterance cancelled before playback: %s", utterance.text[:50])
                return
            _fire(utterance.on_start)
            if self.playback:
                play(AudioSegment.from_mp3(path))
        except Exception as e:
            logger.warning("Speech failed for %r: %s", utterance.text[:50], e)
            _fire(utterance.on_error)
            return
        finally:
            if self._current is utterance:
                self._current = None

        _fire(utterance.on_end)


def create_engine(clips_dir: str = CLIPS_DIR, playback: bool = True) -> EdgeTTSEngine | None:
    """Return an engine, or None when the host cannot play speech."""
    if not EdgeTTSEngine.is_available():
        logger.warning("ffmpeg not found — speech is unavailable")
        return None
    return EdgeTTSEngine(clips_dir=clips_dir, playback=playback)
