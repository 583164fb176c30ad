"""
Motion Worker Entry Point

Compiles a MotionRequest JSON file (or a JSON list of requests sharing
one audio track) and prints the job result.

Usage:
    python -m motion_worker.main request.json [--pretty]
    motion-compile request.json

Environment Variables:
    LOG_LEVEL: Root log level (default: INFO)
    PRESET_TABLE_PATH: Optional preset override JSON
    STORAGE_PATH: Root for the compiled expression cache (default: /data)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import get_settings
from .tasks.compile_motion import compile_chain_job, compile_motion_job

logger = logging.getLogger("motion_worker")


def configure_logging(level: str) -> None:
    """Configure root logging; logs go to stderr so stdout stays pure JSON."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def run(request_path: Path, pretty: bool = False) -> int:
    """
    Compile the request file and print the result.

    Returns:
        Exit code (0 on success, 1 on failure)
    """
    try:
        payload = json.loads(request_path.read_text())
    except (json.JSONDecodeError, IOError) as e:
        logger.error(f"Failed to read request {request_path}: {e}")
        return 1

    if isinstance(payload, list):
        result = compile_chain_job(payload)
    else:
        result = compile_motion_job(payload)

    print(json.dumps(result, sort_keys=True, indent=2 if pretty else None))
    return 0 if result["status"] == "complete" else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="motion-compile",
        description="Compile a motion request into per-frame FFmpeg expressions.",
    )
    parser.add_argument("request", type=Path, help="Path to a MotionRequest JSON file")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    args = parser.parse_args(argv)

    configure_logging(get_settings().log_level)
    return run(args.request, pretty=args.pretty)


if __name__ == "__main__":
    sys.exit(main())
