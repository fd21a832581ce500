#!/usr/bin/env python3
"""
Generate deterministic gateway fixtures (status snapshots, expose blocks,
devices) to seed test vectors and downstream differential tests.
"""
import sys

from gateway_fixtures.corpus import main

if __name__ == "__main__":
    sys.exit(main())
