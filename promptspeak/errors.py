"""Error types raised while building and delivering prompts.

    PromptError (base)
    ├── ConfigurationError  bad instruction parameters, caught before compiling
    ├── DisabledVoiceError  a voice the catalog lists as unavailable
    ├── OrderingError       unmatched end-of-sentence / end-of-paragraph
    ├── TemplateError       JSON template data that cannot be rendered
    └── SynthesisError      speech engine still failing after retries
"""


class PromptError(Exception):
    """Base error for everything promptspeak raises on purpose."""


class ConfigurationError(PromptError, ValueError):
    """An instruction parameter is out of range or malformed."""


class DisabledVoiceError(PromptError):
    """The requested voice exists but cannot be used."""


class OrderingError(PromptError):
    """A closing marker has no matching open scope in the current segment."""


class TemplateError(PromptError):
    """A JSON template value cannot be rendered to text."""


class SynthesisError(PromptError):
    """Text-to-speech generation failed."""
