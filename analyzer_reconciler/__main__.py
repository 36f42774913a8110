# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""
Run a single invocation envelope.

Usage:
    python -m analyzer_reconciler event.json
    python -m analyzer_reconciler < event.json
"""

import argparse
import json
import sys

from .config import settings
from .handler import handle_request
from .utils.cloudwatch_logger import configure_logging


def main(argv: list[str] | None = None) -> int:
    """Main entry point. Returns 0 on SUCCESS, 1 on FAILED."""
    parser = argparse.ArgumentParser(
        description="Reconcile an IAM Access Analyzer analyzer from an invocation envelope",
    )
    parser.add_argument(
        "event",
        nargs="?",
        type=argparse.FileType("r"),
        default=sys.stdin,
        help="Path to the JSON envelope (default: stdin)",
    )
    parser.add_argument(
        "--region",
        help="Region to use when the envelope does not name one",
    )
    args = parser.parse_args(argv)

    config = settings()
    configure_logging(config)

    try:
        event = json.load(args.event)
    except json.JSONDecodeError as e:
        parser.error(f"invalid JSON envelope: {e}")

    if args.region and not event.get("region"):
        event["region"] = args.region

    response = handle_request(event, config=config)
    print(json.dumps(response, indent=2))
    return 0 if response["status"] == "SUCCESS" else 1


if __name__ == "__main__":
    sys.exit(main())
