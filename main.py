"""Entry point for the DUSZEK command-line chat client."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional

from dotenv import load_dotenv

from chat import (
    make_console,
    print_banner,
    print_configuration_error,
    print_configuration_loaded,
    run_interactive,
    run_single_query,
)
from completion import CompletionRequester
from config import load_chat_config
from errors import ConfigurationError
from session import ChatSession, apply_log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="duszek",
        description="Chat with a Groq-hosted model. Without a query an interactive session starts.",
    )
    parser.add_argument("query", nargs="*", help="Ask a single question and exit")
    parser.add_argument("--model", help="Model identifier (overrides MODEL)")
    parser.add_argument("--verbose", action="store_true", help="Start with verbose diagnostics enabled")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI color output")
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    apply_log_level(verbose)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    use_color = not args.no_color
    configure_logging(args.verbose)
    load_dotenv(override=False)

    console = make_console(use_color)
    print_banner(console, use_color=use_color)

    try:
        config = load_chat_config()
    except ConfigurationError as exc:
        print_configuration_error(console, exc, use_color=use_color)
        return 1
    if args.model:
        config = replace(config, model=args.model)

    print_configuration_loaded(console, config, use_color=use_color)

    session = ChatSession(verbose=args.verbose)
    with CompletionRequester(config) as requester:
        if args.query:
            try:
                return run_single_query(
                    " ".join(args.query), session, requester, console=console, use_color=use_color
                )
            except KeyboardInterrupt:
                console.print("\nInterrupted.", style="yellow" if use_color else "")
                return 1
        return run_interactive(session, requester, console=console, use_color=use_color)


if __name__ == "__main__":
    raise SystemExit(main())
