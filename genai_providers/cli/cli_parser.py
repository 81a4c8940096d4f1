"""CLI parser construction for genai-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse


def _add_common(parser: argparse.ArgumentParser, *, prompt_required: bool = True) -> None:
    parser.add_argument("--model", default=None)
    if prompt_required:
        parser.add_argument("--prompt", required=True)
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser with ``stream``, ``generate``, ``models`` and ``tokens``
        subcommands. No I/O happens here.
    """
    p = argparse.ArgumentParser(prog="genai-cli", description="Gemini streaming and generation CLI")
    p.add_argument("--log-level", default=None, help="Override GENAI_LOG_LEVEL for this run")
    sub = p.add_subparsers(dest="cmd")

    p_stream = sub.add_parser("stream", help="Stream a response, printing text as it arrives")
    _add_common(p_stream)
    p_stream.add_argument("--temperature", type=float, default=None)
    p_stream.add_argument("--max-output-tokens", type=int, default=None)

    p_gen = sub.add_parser("generate", help="Generate a complete response")
    _add_common(p_gen)
    p_gen.add_argument("--temperature", type=float, default=None)
    p_gen.add_argument("--max-output-tokens", type=int, default=None)

    p_models = sub.add_parser("models", help="List available models")
    _add_common(p_models, prompt_required=False)

    p_tokens = sub.add_parser("tokens", help="Count the tokens of a prompt")
    _add_common(p_tokens)

    return p


__all__ = ["build_parser"]
