# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Command-line entry point running the monitor outside a scheduler.

Usage:
    usage-monitor --families ec2 ebs --regions us-east-1 eu-west-1
    python -m usage_monitor --write-to-s3 --post-to-slack
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from . import __version__
from .handler import handler
from .services.families import FAMILIES


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usage-monitor",
        description="Audit AWS resource usage across regions and report untagged or aged resources.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--families",
        nargs="+",
        choices=sorted(FAMILIES),
        help="Families to run (default: all)",
    )
    parser.add_argument(
        "--regions", nargs="+", help="Regions to scan (default: DEFAULT_REGIONS)"
    )
    parser.add_argument(
        "--write-to-s3", action="store_true", help="Export each table to S3_BUCKET"
    )
    parser.add_argument(
        "--post-to-slack", action="store_true", help="Post digests to SLACK_WEBHOOK_URL"
    )
    parser.add_argument(
        "--put-mpu-rules",
        action="store_true",
        help="Add missing abort-incomplete-multipart-upload lifecycle rules to buckets",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the command line.

    Loads .env, runs the handler with an event built from the arguments and
    prints the response body.

    Returns:
        Process exit code
    """
    load_dotenv()
    args = build_parser().parse_args(argv)

    event = {
        "regions": args.regions,
        "families": args.families,
        "writeToS3": args.write_to_s3,
        "postToSlack": args.post_to_slack,
        "putMpuRules": args.put_mpu_rules,
    }
    try:
        response = handler(event)
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Monitor run interrupted")
        return 130

    print(json.dumps(json.loads(response["body"]), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
