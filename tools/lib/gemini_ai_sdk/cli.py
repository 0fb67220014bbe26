#!/usr/bin/env python3
"""Command-line interface for asking Gemini with text and media files.

Examples:
    gemini-ask "Summarize this document" -f report.pdf
    gemini-ask "What happens in this clip?" -f clip.mov --stream
    gemini-ask "Latest news on fusion?" --web-search -m gemini-2.5-pro

Defaults can be kept in a YAML file passed with --config:

    model: gemini-2.5-pro
    api_version: v1beta
    system_instruction: Answer in one paragraph.
    generation_config:
      temperature: 0.2
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from google.genai import errors

from .client import GeminiClient
from .constants import DEFAULT_API_VERSION, DEFAULT_TOOLS, SAFETY_DISABLED_SETTINGS
from .exceptions import GeminiSDKError
from .options import AskOptions, ClientOptions
from .parts import FileUpload

logger = logging.getLogger(__name__)

_CONFIG_KEYS = {"model", "api_version", "system_instruction", "generation_config"}


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load CLI defaults from a YAML file.

    Raises:
        ValueError: If the file is not a mapping or has unknown keys.
    """
    if not config_path:
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    unknown = set(config) - _CONFIG_KEYS
    if unknown:
        raise ValueError(
            f"Unknown keys in {config_path}: {', '.join(sorted(unknown))}"
        )
    return config


def read_uploads(paths: List[str]) -> List[FileUpload]:
    """Read files from disk as FileUploads."""
    uploads = []
    for path in paths:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        uploads.append(FileUpload(buffer=file_path.read_bytes(), file_path=str(file_path)))
    return uploads


def build_ask_options(args: argparse.Namespace, config: Dict[str, Any]) -> AskOptions:
    """Combine config-file defaults with command-line flags."""
    tools = [DEFAULT_TOOLS[name] for name in ("web_search", "code_execution")
             if getattr(args, name)]
    return AskOptions(
        model=args.model or config.get("model"),
        system_instruction=args.system or config.get("system_instruction"),
        generation_config=config.get("generation_config"),
        safety_settings=SAFETY_DISABLED_SETTINGS if args.no_safety else None,
        tools=tools or None,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ask Gemini a question, optionally attaching media files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("prompt", help="Prompt text")
    parser.add_argument(
        "-f", "--file", action="append", default=[], dest="files",
        help="File to attach (repeatable)",
    )
    parser.add_argument("-m", "--model", help="Model name")
    parser.add_argument("--system", help="System instruction")
    parser.add_argument("--stream", action="store_true", help="Stream the response")
    parser.add_argument(
        "--api-version", help=f"API version (default: {DEFAULT_API_VERSION})"
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail on files whose format Gemini does not accept",
    )
    parser.add_argument(
        "--no-safety", action="store_true", help="Disable safety filters"
    )
    parser.add_argument(
        "--web-search", action="store_true", help="Enable Google Search grounding"
    )
    parser.add_argument(
        "--code-execution", action="store_true", help="Enable code execution"
    )
    parser.add_argument("--upload-cache", help="JSON file for caching uploads")
    parser.add_argument(
        "--poll-timeout", type=float,
        help="Give up waiting for uploaded media after this many seconds",
    )
    parser.add_argument("--config", help="YAML file with default options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = load_config(args.config)
        uploads = read_uploads(args.files)
        client_options = ClientOptions(
            api_version=(
                args.api_version or config.get("api_version") or DEFAULT_API_VERSION
            ),
            upload_cache_file=args.upload_cache,
            poll_timeout=args.poll_timeout,
        )
        ask_options = build_ask_options(args, config)

        with GeminiClient(options=client_options, defaults=ask_options) as client:
            parts = client.message_to_parts([args.prompt, *uploads], strict=args.strict)
            if args.stream:
                for chunk in client.ask_stream(parts):
                    if chunk.text:
                        print(chunk.text, end="", flush=True)
                print()
            else:
                response = client.ask(parts)
                print(response.text or "")
    except (GeminiSDKError, errors.APIError, ValueError, OSError, yaml.YAMLError) as e:
        logger.debug("Request failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
