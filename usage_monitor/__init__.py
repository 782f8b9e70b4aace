# Copyright (c) 2025-2026 OptimNow. All Rights Reserved.
# Licensed under the Apache License, Version 2.0.
# See LICENSE file in the project root for full license information.

"""Cross-region AWS usage monitor: inventory, billing-tag and age policies."""

__version__ = "0.3.0"
