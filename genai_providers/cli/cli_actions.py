"""CLI subcommand handlers.

Each handler takes the parsed namespace and a provider, writes its output to
stdout and returns a process exit code. Errors are reported as one line on
stderr (JSON with ``--json``) and exit code 1; nothing is retried here beyond
the transport's own policy.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, Optional, TextIO

from ..base.dto.generate_config import GenerateContentConfig
from ..base.errors import ProviderError
from ..gemini import GeminiProvider


def _config_from_args(args: argparse.Namespace) -> Optional[GenerateContentConfig]:
    temperature = getattr(args, "temperature", None)
    max_tokens = getattr(args, "max_output_tokens", None)
    if temperature is None and max_tokens is None:
        return None
    return GenerateContentConfig(temperature=temperature, max_output_tokens=max_tokens)


def _print_json(obj: Any, out: TextIO) -> None:
    out.write(json.dumps(obj, ensure_ascii=False, default=str) + "\n")
    out.flush()


def cmd_stream(args: argparse.Namespace, provider: GeminiProvider, out: TextIO = sys.stdout) -> int:
    """Print deltas as they arrive; exit 1 when the stream ended with an error."""
    events = provider.generate_content_stream(args.prompt, model=args.model, config=_config_from_args(args))
    last = None
    for event in events:
        last = event
        if args.json:
            _print_json(event.to_dict(), out)
        elif event.delta_text:
            out.write(event.delta_text)
            out.flush()
    if not args.json:
        out.write("\n")
        if last is not None and last.function_call_fragments:
            for call in last.function_call_fragments:
                _print_json(call.model_dump(), out)
    if last is not None and last.error is not None:
        sys.stderr.write(f"stream failed: {last.error}\n")
        return 1
    return 0


def cmd_generate(args: argparse.Namespace, provider: GeminiProvider, out: TextIO = sys.stdout) -> int:
    result = provider.generate_content(args.prompt, model=args.model, config=_config_from_args(args))
    if args.json:
        _print_json(
            {
                "text": result.text,
                "finish_reason": result.finish_reason,
                "function_calls": [c.model_dump() for c in result.function_calls],
                "usage": result.usage_metadata,
            },
            out,
        )
    else:
        out.write(result.text + "\n")
    return 0


def cmd_models(args: argparse.Namespace, provider: GeminiProvider, out: TextIO = sys.stdout) -> int:
    models = provider.list_models()
    if args.json:
        _print_json([m.to_dict() for m in models], out)
    else:
        for m in models:
            out.write(f"{m.name}\t{m.display_name or ''}\n")
    return 0


def cmd_tokens(args: argparse.Namespace, provider: GeminiProvider, out: TextIO = sys.stdout) -> int:
    count = provider.count_tokens(args.prompt, model=args.model)
    if args.json:
        _print_json({"model": args.model or provider.default_model(), "total_tokens": count}, out)
    else:
        out.write(f"{count}\n")
    return 0


HANDLERS: Dict[str, Callable[..., int]] = {
    "stream": cmd_stream,
    "generate": cmd_generate,
    "models": cmd_models,
    "tokens": cmd_tokens,
}


def dispatch(args: argparse.Namespace, provider: GeminiProvider, out: TextIO = sys.stdout) -> int:
    """Run the handler for ``args.cmd``; ``ProviderError`` becomes exit code 1."""
    handler = HANDLERS[args.cmd]
    try:
        return handler(args, provider, out)
    except ProviderError as err:
        if getattr(args, "json", False):
            sys.stderr.write(json.dumps(err.to_dict()) + "\n")
        else:
            sys.stderr.write(f"error: {err}\n")
        return 1


__all__ = ["HANDLERS", "dispatch", "cmd_stream", "cmd_generate", "cmd_models", "cmd_tokens"]
