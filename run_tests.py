#!/usr/bin/env python3
# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""
Test runner for the FinOps usage monitor.

Usage:
    python run_tests.py                    # Run all tests
    python run_tests.py --unit             # Run unit tests only
    python run_tests.py --property         # Run property tests only
    python run_tests.py --coverage         # Run with coverage report
    python run_tests.py --fast             # Exclude slow tests
    python run_tests.py -k fanout          # Run tests matching a keyword
"""

import argparse
import subprocess
import sys


def run_command(cmd: list[str], description: str) -> int:
    """Run a command and return the exit code."""
    print(f"\n{'=' * 70}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print(f"{'=' * 70}\n")

    result = subprocess.run(cmd)
    return result.returncode


def build_command(args: argparse.Namespace) -> list[str]:
    cmd = [sys.executable, "-m", "pytest", "tests/"]

    markers = []
    if args.unit:
        markers.append("unit")
    if args.property:
        markers.append("property")

    if markers:
        cmd.extend(["-m", " or ".join(markers)])
    elif args.fast:
        cmd.extend(["-m", "not slow"])

    if args.keyword:
        cmd.extend(["-k", args.keyword])

    cmd.append("-vv" if args.verbose else "-v")

    if args.coverage:
        cmd.extend([
            "--cov=usage_monitor",
            "--cov-report=html",
            "--cov-report=term-missing",
            "--cov-fail-under=80",
        ])

    if args.failfast:
        cmd.append("-x")

    cmd.append("--color=yes")
    return cmd


def main() -> int:
    """Main entry point for the test runner."""
    parser = argparse.ArgumentParser(
        description="Run tests for the FinOps usage monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--unit", action="store_true", help="Run unit tests only")
    parser.add_argument("--property", action="store_true", help="Run property-based tests only")
    parser.add_argument(
        "--coverage", action="store_true", help="Run with coverage reporting - target 80 percent"
    )
    parser.add_argument("--fast", action="store_true", help="Exclude slow tests")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--failfast", "-x", action="store_true", help="Stop on first failure")
    parser.add_argument(
        "--keyword", "-k", type=str, help="Run tests matching the given keyword expression"
    )
    args = parser.parse_args()

    exit_code = run_command(build_command(args), "Usage Monitor Test Suite")

    print(f"\n{'=' * 70}")
    if exit_code == 0:
        print("PASS: All tests passed!")
    else:
        print(f"FAIL: Tests failed with exit code: {exit_code}")
    print(f"{'=' * 70}\n")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
