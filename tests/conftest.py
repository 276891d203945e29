"""Shared fixtures for study notes tests."""

import pytest

from study_notes.engine import SynthesisEngine
from study_notes.models import Voice
from study_notes.preferences import MemoryPreferenceStore


class FakeEngine(SynthesisEngine):
    """Records every call; utterances finish only when told to."""

    def __init__(self, voices=None):
        self.voices = list(voices or [])
        self.calls = []
        self.spoken = []
        self.active = []
        self.max_active = 0
        self.listeners = []

    def list_voices(self):
        return list(self.voices)

    def speak(self, utterance):
        self.calls.append("speak")
        self.spoken.append(utterance)
        self.active.append(utterance)
        self.max_active = max(self.max_active, len(self.active))

    def cancel(self):
        self.calls.append("cancel")
        self.active.clear()

    def on_voices_changed(self, callback):
        self.listeners.append(callback)

    def set_voices(self, voices):
        self.voices = list(voices)
        for callback in self.listeners:
            callback()


@pytest.fixture
def spanish_voices():
    """Two Spanish voices in engine order."""
    return [
        Voice(uri="voice-a", display_name="Voice A", language_tag="es-ES", is_local_service=True),
        Voice(uri="voice-b", display_name="Google TTS", language_tag="es-MX", is_local_service=True),
    ]


@pytest.fixture
def mixed_voices(spanish_voices):
    """Spanish voices interleaved with voices in other languages."""
    return [
        Voice(uri="voice-en", display_name="Google US English", language_tag="en-US"),
        spanish_voices[0],
        Voice(uri="voice-zh", display_name="Tingting", language_tag="zh-CN"),
        spanish_voices[1],
    ]


@pytest.fixture
def fake_engine(spanish_voices):
    return FakeEngine(spanish_voices)


@pytest.fixture
def store():
    return MemoryPreferenceStore()


@pytest.fixture
def sample_note():
    """A note using every block kind."""
    return (
        "## ① Saludos\n"
        "\n"
        "Hola, ¿cómo estás?\n"
        "你好，你好吗？\n"
        "\n"
        "| Español | 中文 |\n"
        "|---|---|\n"
        "| gracias | 谢谢 |\n"
        "| adiós | 再见 |\n"
        "\n"
        "Remember the accents.\n"
    )
