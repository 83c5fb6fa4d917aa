"""Voice catalog: resolve voice names to engine voice references."""

import asyncio
import logging
from dataclasses import dataclass

import edge_tts

from promptspeak.models import VoiceRef

logger = logging.getLogger(__name__)

# Hardcoded English voice pool (avoids network call at startup)
VOICE_POOL = [
    "en-US-AriaNeural",
    "en-US-DavisNeural",
    "en-US-GuyNeural",
    "en-US-JennyNeural",
    "en-US-RogerNeural",
    "en-US-TonyNeural",
    "en-US-SaraNeural",
    "en-GB-RyanNeural",
    "en-GB-SoniaNeural",
    "en-GB-ThomasNeural",
    "en-AU-NatashaNeural",
    "en-AU-WilliamNeural",
    "en-CA-ClaraNeural",
    "en-CA-LiamNeural",
    "en-IN-NeerjaNeural",
    "en-IN-PrabhatNeural",
    "en-IE-EmilyNeural",
]


@dataclass(frozen=True)
class VoiceInfo:
    id: str
    name: str
    locale: str = ""
    gender: str = ""
    enabled: bool = True

    @property
    def ref(self) -> VoiceRef:
        return VoiceRef(id=self.id, name=self.name)


def _info_from_short_name(short_name: str) -> VoiceInfo:
    """Split a short name: en-US-AriaNeural → name "Aria", locale "en-US"."""
    locale, _, name = short_name.rpartition("-")
    if name.endswith("Neural"):
        name = name[: -len("Neural")]
    return VoiceInfo(id=short_name, name=name, locale=locale)


def _info_from_listing(entry: dict) -> VoiceInfo:
    info = _info_from_short_name(entry["ShortName"])
    return VoiceInfo(
        id=info.id,
        name=info.name,
        locale=entry.get("Locale", info.locale),
        gender=entry.get("Gender", ""),
        enabled=entry.get("Status", "GA") != "Deprecated",
    )


class VoiceCatalog:
    """Installed voices, searchable by id or display name."""

    def __init__(self, voices: list[VoiceInfo]):
        self.voices = list(voices)

    @classmethod
    def default(cls) -> "VoiceCatalog":
        return cls([_info_from_short_name(v) for v in VOICE_POOL])

    @classmethod
    def online(cls) -> "VoiceCatalog":
        """Every voice the edge-tts service currently offers."""
        listing = asyncio.run(edge_tts.list_voices())
        logger.info("Loaded %d voices from edge-tts", len(listing))
        return cls([_info_from_listing(entry) for entry in listing])

    def find(self, query: str) -> VoiceInfo | None:
        """Exact id match, else first voice whose name contains query (case-insensitive)."""
        needle = query.lower()
        for info in self.voices:
            if info.id == query or needle in info.name.lower():
                return info
        return None

    def resolve(self, query: str) -> VoiceRef | None:
        info = self.find(query)
        return info.ref if info else None

    def is_enabled(self, ref: VoiceRef) -> bool:
        return any(info.id == ref.id and info.enabled for info in self.voices)

    def describe(self) -> list[str]:
        """Human-readable listing, one block per voice."""
        lines = []
        for info in self.voices:
            lines.append(info.id if info.enabled else f"{info.id} (disabled)")
            lines.append(f" Name: {info.name}")
            lines.append(f" Locale: {info.locale}")
            if info.gender:
                lines.append(f" Gender: {info.gender}")
        return lines
