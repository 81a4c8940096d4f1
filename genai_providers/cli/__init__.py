"""genai-cli entrypoint.

Usage::

    python -m genai_providers.cli stream --prompt "Tell me a story"
    python -m genai_providers.cli generate --prompt "..." --json
    python -m genai_providers.cli models
    python -m genai_providers.cli tokens --prompt "..."
"""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from ..base.logging import configure_logger
from .cli_actions import dispatch
from .cli_parser import build_parser


def main(argv: Optional[Sequence[str]] = None, provider=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return 2
    if args.log_level:
        configure_logger(level=args.log_level)
    if provider is None:
        from ..gemini import GeminiProvider

        provider = GeminiProvider()
    return dispatch(args, provider, sys.stdout)


__all__ = ["main", "build_parser"]
