"""
Command-line entry points.

Usage:
    osschat [--model MODEL] your message        # /ai/v1/responses endpoint
    llamachat [--model MODEL] your message      # /ai/run/<model> endpoint
    echo "context" | osschat summarize this     # piped text prefixes the message
    python -m cfchat --endpoint run your message

Requires CLOUDFLARE_AI_ACCOUNT_ID and CLOUDFLARE_AI_API_KEY (a .env file in
the working directory is honoured).
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO, Tuple

from dotenv import load_dotenv

from cfchat.config import ChatConfig
from cfchat.exceptions import ChatError, UsageError
from cfchat.llm.shapes import SHAPES, EndpointShape, get_shape
from cfchat.logging_config import configure_logging
from cfchat.session import ChatSession

logger = logging.getLogger(__name__)


VALUE_OPTIONS = ("--model", "--history-file", "--endpoint")
FLAG_OPTIONS = ("--verbose", "--help")


class _ArgumentParser(argparse.ArgumentParser):
    """Reports bad option values as UsageError instead of exiting with status 2."""

    def error(self, message: str):
        raise UsageError(f"{self.prog}: error: {message}\n{self.format_usage().rstrip()}")


def usage_line(shape: EndpointShape) -> str:
    return f"Usage: {shape.command} [--model model-name] your message"


def build_parser(shape: Optional[EndpointShape] = None) -> argparse.ArgumentParser:
    """Parser for the option tokens of one command; ``shape=None`` adds ``--endpoint``."""
    prog = shape.command if shape else "cfchat"
    parser = _ArgumentParser(
        prog=prog,
        usage=f"{prog} [options] your message",
        description="Chat with a Cloudflare Workers AI model, streaming the reply.",
        epilog="Every word that is not one of the options above is part of the message.",
    )
    if shape is None:
        parser.add_argument(
            "--endpoint",
            choices=sorted(SHAPES),
            default="responses",
            help="Endpoint shape to talk to (default: responses)",
        )
    parser.add_argument("--model", default=None, help="Model identifier")
    parser.add_argument(
        "--history-file",
        default=None,
        help="Transcript file (default depends on the endpoint)",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def split_argv(argv: Sequence[str], value_options: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Separate option tokens from message words.

    Only the long options named in ``value_options`` (followed by a value, or
    written as ``--opt=value``) and ``FLAG_OPTIONS`` are options. Everything
    else, including ``-la`` or a trailing ``--model`` with no value, is
    message text. ``--`` makes every following token message text.
    """
    options: List[str] = []
    words: List[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--":
            words.extend(argv[i + 1:])
            break
        if token.split("=", 1)[0] in value_options and "=" in token:
            options.append(token)
        elif token in value_options and i + 1 < len(argv):
            options.extend(argv[i:i + 2])
            i += 2
            continue
        elif token in FLAG_OPTIONS:
            options.append(token)
        else:
            words.append(token)
        i += 1
    return options, words


def clean_text(text: str) -> str:
    """Replace undecodable argv/stdin bytes (lone surrogates) with U+FFFD."""
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


def resolve_message(words: Sequence[str], stdin: Optional[TextIO]) -> str:
    """
    Combine piped stdin with positional words.

    Non-interactive stdin content becomes the start of the message; each word
    is appended with a single space. The result is always encodable as UTF-8.
    """
    message = ""
    if stdin is not None and not stdin.isatty():
        message = stdin.read() or ""
    for word in words:
        message = f"{message} {word}" if message else word
    return clean_text(message)


def main(
    argv: Optional[List[str]] = None,
    *,
    shape_name: Optional[str] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    load_dotenv()

    fixed_shape = get_shape(shape_name) if shape_name else None
    value_options = VALUE_OPTIONS if fixed_shape is None else VALUE_OPTIONS[:2]
    options, words = split_argv(sys.argv[1:] if argv is None else argv, value_options)

    try:
        args = build_parser(fixed_shape).parse_args(options)
        configure_logging(args.verbose)
        shape = fixed_shape or get_shape(args.endpoint)

        message = resolve_message(words, sys.stdin if stdin is None else stdin)
        if not message:
            raise UsageError(usage_line(shape))

        config = ChatConfig.from_env(
            shape,
            model=args.model,
            history_file=args.history_file,
        )
        ChatSession(config, sink=stdout).run(message)
    except ChatError as e:
        logger.debug("Run aborted", exc_info=True)
        sys.stderr.write(f"{e.message}\n")
        return 1
    return 0


def run() -> None:
    raise SystemExit(main())


def osschat() -> None:
    raise SystemExit(main(shape_name="responses"))


def llamachat() -> None:
    raise SystemExit(main(shape_name="run"))


if __name__ == "__main__":
    run()
