"""CLI entry point: parse instructions, compile prompts, speak or export them."""

import logging
import os
import random
import shutil
import sys

from promptspeak.compiler import compile_instructions
from promptspeak.delivery import AudioCollector, deliver_all, play_audio
from promptspeak.errors import DisabledVoiceError, OrderingError, SynthesisError, TemplateError
from promptspeak.exporter import export, manifest_path_for
from promptspeak.lexer import build_parser, common_parser, parse_args
from promptspeak.markup import line_segment, render_ssml
from promptspeak.voices import VoiceCatalog

logger = logging.getLogger(__name__)


def _check_ffmpeg():
    """Verify ffmpeg is installed."""
    if not shutil.which("ffmpeg"):
        print("Error: ffmpeg is required but not found.", file=sys.stderr)
        print("Install it, or use --ssml to print prompts without speaking.", file=sys.stderr)
        raise SystemExit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _load_catalog(online: bool) -> VoiceCatalog:
    if not online:
        return VoiceCatalog.default()
    try:
        return VoiceCatalog.online()
    except Exception as e:
        print(f"Error: Could not load the online voice list: {e}", file=sys.stderr)
        raise SystemExit(1)


def read_lines(stream):
    """Yield lines from stream without their line endings, until it ends."""
    for line in stream:
        yield line.rstrip("\r\n")


def cmd_list_voices(catalog: VoiceCatalog):
    """Print the voice catalog."""
    for line in catalog.describe():
        print(line)


def cmd_ssml(segments, lines):
    """Print each prompt as SSML instead of speaking it."""
    for i, segment in enumerate(segments):
        if segment.is_interactive:
            print(f"<!-- prompt {i + 1}: interactive, volume {segment.volume} -->")
            for line in lines:
                if line.strip():
                    print(render_ssml(line_segment(segment.interactive, line, segment.volume)))
        else:
            print(f"<!-- prompt {i + 1}: volume {segment.volume} -->")
            print(render_ssml(segment))


def cmd_speak(args, segments, lines):
    """Speak every prompt, or export them to args.output."""
    _check_ffmpeg()

    sink = AudioCollector() if args.output else play_audio
    try:
        deliver_all(segments, sink, lines=lines, default_voice=args.default_voice)
    except SynthesisError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if args.output:
        settings = {
            "default_voice": args.default_voice,
            "seed": args.seed,
            "instructions": len(args.instructions),
        }
        title = os.path.splitext(os.path.basename(args.output))[0]
        path = export(sink.combined(), args.output, segments, settings, title=title)
        print(f"Done: {path}")
        print(f"Manifest: {manifest_path_for(path)}")


def main(argv=None):
    """CLI entry point."""
    argv = sys.argv[1:] if argv is None else list(argv)

    early, _ = common_parser().parse_known_args(argv)
    _configure_logging(early.verbose)
    catalog = _load_catalog(early.online_voices)

    parser = build_parser()
    try:
        args = parse_args(argv, catalog=catalog, parser=parser)
    except DisabledVoiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if args.list_voices:
        cmd_list_voices(catalog)
        return

    if not args.instructions:
        print("Nothing to do", file=sys.stderr)
        parser.print_help()
        raise SystemExit(1)

    try:
        segments = compile_instructions(args.instructions, rng=random.Random(args.seed))
    except (OrderingError, TemplateError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    lines = read_lines(sys.stdin)
    if args.ssml:
        cmd_ssml(segments, lines)
    else:
        cmd_speak(args, segments, lines)
