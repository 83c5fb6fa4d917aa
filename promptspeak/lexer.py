"""Command-line arguments to an ordered instruction list.

Every instruction option appends to the same namespace.instructions list,
so the order of the command line is preserved exactly. Words that are not
options are read as text.
"""

import argparse
import logging

from promptspeak.constants import (
    DEFAULT_VOICE,
    EMPHASIS_MAX,
    OUTPUT_VOLUME_MAX,
    RATE_MAX,
    VERSION,
    VOICE_VOLUME_MAX,
)
from promptspeak.errors import ConfigurationError, DisabledVoiceError, TemplateError
from promptspeak.models import (
    BeginParagraph,
    BeginSentence,
    Emphasis,
    EndParagraph,
    EndSentence,
    FadeMode,
    Interactive,
    JsonTemplate,
    Loop,
    OutputVolume,
    Rate,
    Reset,
    Text,
    Voice,
    VoiceVolume,
)
from promptspeak.sources import fetch
from promptspeak.templates import load_template
from promptspeak.voices import VoiceCatalog

logger = logging.getLogger(__name__)


class InstructionAction(argparse.Action):
    """Append the instruction built from this option to namespace.instructions."""

    def __init__(self, option_strings, dest, build=None, **kwargs):
        self.build = build
        super().__init__(option_strings, dest, default=argparse.SUPPRESS, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        try:
            instruction = self.build(namespace, values)
        except (ConfigurationError, OSError) as e:
            raise argparse.ArgumentError(self, str(e))

        instructions = getattr(namespace, "instructions", None)
        if instructions is None:
            instructions = []
            namespace.instructions = instructions
        instructions.append(instruction)


def _number(value: str, upper: int | None = None) -> int:
    try:
        return int(value)
    except ValueError:
        if upper is None:
            raise ConfigurationError(f"expected a whole number, got {value!r}")
        raise ConfigurationError(f"must be followed by a number from 0 to {upper}")


def _voice(namespace, name: str) -> Voice:
    catalog = getattr(namespace, "catalog", None) or VoiceCatalog.default()
    ref = catalog.resolve(name)
    if ref is None:
        logger.warning("No voice with the name '%s' was found.", name)
        return Voice(None)
    if not catalog.is_enabled(ref):
        raise DisabledVoiceError(f"The selected voice, {ref.name}, is disabled")
    return Voice(ref)


def _template(namespace, location: str) -> JsonTemplate:
    raw = fetch(location)
    try:
        load_template(raw)
    except TemplateError as e:
        raise ConfigurationError(f"{location}: {e}") from e
    return JsonTemplate(raw)


def _loop(fade: FadeMode):
    def build(namespace, value):
        return Loop(_number(value), fade)
    return build


# (flags, builder, metavar or None for switches, help)
INSTRUCTION_OPTIONS = [
    (("-t", "--text"), lambda ns, v: Text(v), "TEXT",
     "Read the given text. Words that do not start with '-' are read as text too."),
    (("-f", "--text-file"), lambda ns, v: Text(fetch(v)), "PATH_OR_URL",
     "Read the contents of a file or URL."),
    (("--voice",), _voice, "NAME",
     "Switch to the first voice whose id or name matches NAME."),
    (("--rate",), lambda ns, v: Rate(_number(v, RATE_MAX)), "RATE",
     f"Speech rate from 0 to {RATE_MAX}. 0 is the default, 1 the fastest, {RATE_MAX} the slowest."),
    (("--emphasis",), lambda ns, v: Emphasis(_number(v, EMPHASIS_MAX)), "EMPHASIS",
     f"Emphasis from 0 to {EMPHASIS_MAX}. 0 is the default, 1 the strongest."),
    (("--volume",), lambda ns, v: VoiceVolume(_number(v, VOICE_VOLUME_MAX)), "VOLUME",
     f"Voice volume from 0 to {VOICE_VOLUME_MAX}. 1 is silent, {VOICE_VOLUME_MAX} the engine default."),
    (("--output-volume",), lambda ns, v: OutputVolume(_number(v, OUTPUT_VOLUME_MAX)), "PERCENT",
     "Output device volume from 0 to 100. Starts a new prompt."),
    (("--reset",), lambda ns, v: Reset(), None,
     "Change all voice options back to the defaults."),
    (("--sentence",), lambda ns, v: BeginSentence(), None, "Begin a sentence."),
    (("--end-sentence",), lambda ns, v: EndSentence(), None, "End the current sentence."),
    (("--paragraph",), lambda ns, v: BeginParagraph(), None, "Begin a paragraph."),
    (("--end-paragraph",), lambda ns, v: EndParagraph(), None, "End the current paragraph."),
    (("--loop",), _loop(FadeMode.LEVEL), "COUNT",
     "Repeat everything before this instruction COUNT times."),
    (("--fade-in",), _loop(FadeMode.FADE_IN), "COUNT",
     "Repeat everything before this instruction COUNT times, getting louder."),
    (("--fade-out",), _loop(FadeMode.FADE_OUT), "COUNT",
     "Repeat everything before this instruction COUNT times, getting quieter."),
    (("--interactive",), lambda ns, v: Interactive(), None,
     "Read lines from standard input until it ends, speaking each one."),
    (("--template",), _template, "PATH_OR_URL",
     "Read random text generated from a JSON template file or URL."),
]

# Non-instruction options that consume the following word
GENERAL_VALUE_OPTIONS = [("-o", "--output"), ("--default-voice",), ("--seed",)]

# Every flag that consumes the following word, mapped to its long form
VALUE_OPTIONS = {
    flag: flags[-1]
    for flags in [f for f, _, metavar, _ in INSTRUCTION_OPTIONS if metavar] + GENERAL_VALUE_OPTIONS
    for flag in flags
}


def promote_bare_text(argv: list[str]) -> list[str]:
    """Rewrite words that are not options as --text=WORD.

    Option values are attached to their option (--rate=2), so a value is
    taken as given even when it starts with "-". Everything after a lone
    "--" is text too.
    """
    result = []
    expecting_value = None
    literal = False
    for token in argv:
        if literal:
            result.append(f"--text={token}")
        elif expecting_value:
            result.append(f"{expecting_value}={token}")
            expecting_value = None
        elif token == "--":
            literal = True
        elif token in VALUE_OPTIONS:
            expecting_value = VALUE_OPTIONS[token]
        elif token.startswith("-"):
            result.append(token)
        else:
            result.append(f"--text={token}")
    if expecting_value:
        # Left for argparse to report the missing value
        result.append(expecting_value)
    return result


def common_parser() -> argparse.ArgumentParser:
    """Options needed before the instruction options can be parsed."""
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress while compiling and speaking")
    parser.add_argument("--online-voices", action="store_true",
                        help="Resolve voices against the full online edge-tts catalog")
    return parser


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptspeak",
        description="Read text aloud, switching voices and styles as instructed.",
        epilog='EXAMPLE: promptspeak --voice Aria "Spoken as Aria" --voice Guy "Spoken as Guy"',
        parents=[common_parser()],
        allow_abbrev=False,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    group = parser.add_argument_group("instructions", "Applied in the order they are given.")
    for flags, build, metavar, help_text in INSTRUCTION_OPTIONS:
        if metavar:
            group.add_argument(*flags, action=InstructionAction, build=build, metavar=metavar, help=help_text)
        else:
            group.add_argument(*flags, action=InstructionAction, build=build, nargs=0, help=help_text)

    output = parser.add_argument_group("output")
    output.add_argument("--list-voices", action="store_true", help="Print the voice catalog and exit")
    output.add_argument("--ssml", action="store_true", help="Print the SSML of each prompt instead of speaking")
    output.add_argument("-o", "--output", metavar="FILE", help="Write an MP3 and JSON manifest instead of playing")
    output.add_argument("--default-voice", default=DEFAULT_VOICE, metavar="VOICE_ID",
                        help="Voice used where no --voice applies (default: %(default)s)")
    output.add_argument("--seed", type=int, help="Seed for template randomness")
    return parser


def parse_args(argv: list[str], catalog: VoiceCatalog | None = None, parser=None) -> argparse.Namespace:
    """Parse argv; the result carries the ordered instruction list as .instructions."""
    if parser is None:
        parser = build_parser()
    namespace = argparse.Namespace(instructions=[], catalog=catalog or VoiceCatalog.default())
    return parser.parse_args(promote_bare_text(argv), namespace=namespace)
