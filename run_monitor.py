#!/usr/bin/env python3
# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""
Main entry point for a local usage monitor run.

Loads environment variables from .env, runs the requested families and
prints the per-family reports.

Usage:
    python run_monitor.py --families ec2 ebs --regions us-east-1
"""

import sys

from usage_monitor.cli import main

if __name__ == "__main__":
    sys.exit(main())
