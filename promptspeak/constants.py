"""All magic numbers and configuration constants."""

RATE_MAX = 5                        # Rate(0..5): 0 = not set, 1 fastest, 5 slowest
EMPHASIS_MAX = 4                    # Emphasis(0..4): 0 = not set, 1 strongest
VOICE_VOLUME_MAX = 7                # VoiceVolume(0..7): 0 = not set, 7 = engine default
OUTPUT_VOLUME_MAX = 100             # OutputVolume(0..100), percent of device volume
DEFAULT_OUTPUT_VOLUME = 100         # volume of a segment nobody has turned down

TEMPLATE_START = "SENTENCES"        # working string a JSON template expands from
MAX_TEMPLATE_SUBSTITUTIONS = 10000  # guard against self-referencing templates

SSML_LANG = "en-US"                 # xml:lang of rendered <speak> documents
SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"

# SSML attribute values per instruction level (0 = attribute omitted)
SSML_RATES = {1: "x-fast", 2: "fast", 3: "medium", 4: "slow", 5: "x-slow"}
SSML_EMPHASIS = {1: "strong", 2: "moderate", 3: "none", 4: "reduced"}
SSML_VOLUMES = {
    1: "silent", 2: "x-soft", 3: "soft", 4: "medium",
    5: "loud", 6: "x-loud", 7: "default",
}

# edge-tts prosody strings per instruction level
EDGE_RATES = {0: "+0%", 1: "+50%", 2: "+25%", 3: "+0%", 4: "-25%", 5: "-50%"}
EDGE_VOLUMES = {
    0: "+0%", 1: "-100%", 2: "-75%", 3: "-50%", 4: "-25%",
    5: "+25%", 6: "+50%", 7: "+0%",
}
EDGE_PITCHES = {0: "+0Hz", 1: "+15Hz", 2: "+8Hz", 3: "+0Hz", 4: "-8Hz"}  # emphasis approximation

PAUSE_SAME_RUN_MS = 150             # ms pause between runs with a style change only
PAUSE_VOICE_CHANGE_MS = 375         # ms pause at voice changes
PAUSE_SENTENCE_MS = 375             # ms pause at sentence boundaries
PAUSE_PARAGRAPH_MS = 700            # ms pause at paragraph boundaries
PAUSE_SEGMENT_MS = 525              # ms pause between delivered segments in an export

TTS_RETRY_COUNT = 3                 # max retries per synthesized run
TTS_RETRY_BASE_DELAY = 1.0          # seconds — base delay for exponential backoff
DEFAULT_VOICE = "en-US-AriaNeural"  # used whenever no Voice scope is open
OUTPUT_BITRATE = "192k"             # MP3 export bitrate
VERSION = "0.1.0"
