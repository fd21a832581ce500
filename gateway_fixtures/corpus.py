"""
Generate a deterministic corpus of gateway fixtures as JSON files.

Each fixture gets its own RandomDriver seeded from the master seed, so any
single file can be regenerated from the ``seed`` it records.

Usage:
  gateway-fixtures-corpus -o out/ [--seed 1337] [-n 128] [-k status|expose|device|all]
"""
from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path
from typing import Iterator, Tuple

from .driver import RandomDriver
from .generator import produce
from .schema import Device, Expose, GetDataplaneStatusResponse, to_obj

log = logging.getLogger(__name__)

DEFAULT_SEED = 1337
DEFAULT_COUNT = 128

KINDS = {
    "status": GetDataplaneStatusResponse,
    "expose": Expose,
    "device": Device,
}


def iter_fixtures(seed: int, count: int, kind: str) -> Iterator[Tuple[int, dict]]:
    """Yield ``(index, document)`` pairs; ``all`` cycles through every kind."""
    kinds = sorted(KINDS) if kind == "all" else [kind]
    rng = random.Random(seed)
    for i in range(count):
        case_kind = kinds[i % len(kinds)]
        case_seed = rng.getrandbits(63)
        value = produce(KINDS[case_kind], RandomDriver(case_seed))
        if value is None:
            log.warning("case %d (%s, seed %d) produced no value", i, case_kind, case_seed)
            continue
        yield i, {"kind": case_kind, "seed": case_seed, "value": to_obj(value)}


def write_corpus(outdir: Path, seed: int, count: int, kind: str) -> int:
    outdir.mkdir(parents=True, exist_ok=True)
    written = 0
    for i, doc in iter_fixtures(seed, count, kind):
        p = outdir / f"generated_{i:04d}_{doc['kind']}.json"
        p.write_text(json.dumps(doc, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        log.debug("wrote %s", p)
        written += 1
    return written


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Generate deterministic gateway fixtures.")
    ap.add_argument("--seed", type=int, default=DEFAULT_SEED)
    ap.add_argument("-n", "--count", type=int, default=DEFAULT_COUNT)
    ap.add_argument("-k", "--kind", choices=sorted(KINDS) + ["all"], default="all")
    ap.add_argument("-o", "--outdir", type=str, required=True)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    if args.count < 0:
        ap.error("--count must be non-negative")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    outdir = Path(args.outdir)
    written = write_corpus(outdir, args.seed, args.count, args.kind)
    print(f"wrote {written} fixtures to {outdir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
