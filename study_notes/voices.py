"""Voice discovery, preferred-voice resolution and playback."""

import logging

from study_notes.constants import (
    TARGET_LANG_PREFIX,
    PREFERRED_LOCALE,
    FALLBACK_LANG,
    VOICE_NAME_HINTS,
    TTS_VOICE_STORAGE_KEY,
    TTS_RATE,
    NO_VOICES_LABEL,
)
from study_notes.engine import SynthesisEngine
from study_notes.models import Voice, Utterance
from study_notes.preferences import PreferenceStore

logger = logging.getLogger(__name__)


def filter_voices(voices: list[Voice], prefix: str = TARGET_LANG_PREFIX) -> list[Voice]:
    """Voices whose language tag starts with prefix, in engine order."""
    return [v for v in voices if v.language_tag.startswith(prefix)]


def find_voice_index(voices: list[Voice], uri: str | None) -> int:
    """Index of the voice with this uri, or -1."""
    if not uri:
        return -1
    for i, voice in enumerate(voices):
        if voice.uri == uri:
            return i
    return -1


def best_voice_index(voices: list[Voice]) -> int:
    """First voice matching a name hint or the preferred locale, or -1."""
    for i, voice in enumerate(voices):
        if any(hint in voice.display_name for hint in VOICE_NAME_HINTS):
            return i
        if voice.language_tag == PREFERRED_LOCALE:
            return i
    return -1


class VoiceSelector:
    """Tracks the available voices and the user's choice among them.

    Resolution order when voices load: stored preference → name/locale
    heuristic → whatever index was already selected (0 initially).
    Only explicit set_selected_index() calls write the preference.

    With no engine the selector is unsupported: voices stay empty and
    speak() does nothing.
    """

    def __init__(self, engine: SynthesisEngine | None, store: PreferenceStore):
        self.engine = engine
        self.store = store
        self.voices: list[Voice] = []
        self.selected_index = 0
        self.is_speaking = False
        self.supported = engine is not None

        if not self.supported:
            logger.info("No synthesis engine, speech disabled")
            return

        self.load_voices()
        # Some engines only populate their voice list after a delay
        engine.on_voices_changed(self.load_voices)

    def _stored_uri(self) -> str | None:
        try:
            return self.store.get(TTS_VOICE_STORAGE_KEY)
        except Exception as e:
            logger.warning("Could not read stored voice: %s", e)
            return None

    def load_voices(self) -> None:
        """Re-read the engine's voice list and re-resolve the selection."""
        self.voices = filter_voices(self.engine.list_voices())

        stored_index = find_voice_index(self.voices, self._stored_uri())
        if stored_index != -1:
            self.selected_index = stored_index
            return

        best = best_voice_index(self.voices)
        if best != -1:
            self.selected_index = best

    @property
    def selected_voice(self) -> Voice | None:
        if 0 <= self.selected_index < len(self.voices):
            return self.voices[self.selected_index]
        return None

    def set_selected_index(self, index: int) -> None:
        """Select a voice and remember it for next time."""
        self.selected_index = index
        if not self.voices or not 0 <= index < len(self.voices):
            return
        try:
            self.store.set(TTS_VOICE_STORAGE_KEY, self.voices[index].uri)
        except Exception as e:
            logger.warning("Could not save selected voice: %s", e)

    def voice_labels(self) -> list[str]:
        """Display labels for a voice picker, "<name> (<lang>)"."""
        if not self.voices:
            return [NO_VOICES_LABEL]
        return [f"{v.display_name} ({v.language_tag})" for v in self.voices]

    def _on_start(self) -> None:
        self.is_speaking = True

    def _on_finish(self) -> None:
        self.is_speaking = False

    def speak(self, text: str) -> None:
        """Cancel anything in flight and speak text with the selected voice.

        The engine's live voice list is re-filtered here instead of trusting
        self.voices, since it may have changed since the last load.
        """
        if not self.supported:
            return

        self.engine.cancel()

        utterance = Utterance(
            text=text,
            rate=TTS_RATE,
            on_start=self._on_start,
            on_end=self._on_finish,
            on_error=self._on_finish,
        )
        live = filter_voices(self.engine.list_voices())
        if live:
            if 0 <= self.selected_index < len(live):
                utterance.voice = live[self.selected_index]
            else:
                utterance.voice = live[0]
        else:
            utterance.lang = FALLBACK_LANG

        self.engine.speak(utterance)

    def cancel(self) -> None:
        if self.supported:
            self.engine.cancel()
            self.is_speaking = False
