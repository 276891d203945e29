"""All magic numbers and configuration constants."""

import os

TARGET_LANG_PREFIX = "es"                  # only voices whose tag starts with this are offered
PREFERRED_LOCALE = "es-MX"                 # locale favoured by the default-voice heuristic
FALLBACK_LANG = "es-ES"                    # utterance language when no voice is available
VOICE_NAME_HINTS = ("Monica", "Google")    # display-name substrings favoured by the heuristic
TTS_VOICE_STORAGE_KEY = "ttsVoiceURI"      # preference key holding the chosen voice uri
TTS_RATE = 0.9                             # 10% slower than normal speaking rate
TTS_RETRY_COUNT = 3                        # max retries per synthesized clip
TTS_RETRY_BASE_DELAY = 1.0                 # seconds, doubled on each retry
FALLBACK_VOICE = "es-ES-ElviraNeural"      # edge-tts voice used for language-only utterances
NO_VOICES_LABEL = "Default Spanish"        # shown in place of an empty voice list
CJK_PATTERN = r"[\u4e00-\u9fa5]"            # CJK Unified Ideographs used for dialogue pairing
HEADING_NUMBER_PATTERN = r"^##\s*[①-⑩0-9.]+\s*"
HEADING_MARKER_PATTERN = r"^##\s*"
CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".study_notes")
PREFS_FILE = os.path.join(CONFIG_DIR, "preferences.json")
CLIPS_DIR = os.path.join(CONFIG_DIR, "clips")
VERSION = "0.1.0"
