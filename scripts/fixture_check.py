#!/usr/bin/env python3
"""
fixture_check.py - invariant checker for generated gateway fixtures

Usage:
  python scripts/fixture_check.py <dir>        # checks every *.json under dir
  python scripts/fixture_check.py <file.json>  # checks a single fixture
Exits non-zero on failure.
"""
import sys

from gateway_fixtures.check import main

if __name__ == "__main__":
    sys.exit(main())
