"""
Policy process: runs one of the reference strategies over stdin/stdout.
"""
from __future__ import annotations

import sys
import argparse
import logging
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from judgesim import serve_policy
from judgesim.strategies import STRATEGIES

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Serve a reference scheduling policy")
    parser.add_argument("--strategy", type=str, default="expected_cost", choices=sorted(STRATEGIES))
    parser.add_argument("--no_preamble", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if args.verbose else logging.WARNING)
    serve_policy(STRATEGIES[args.strategy](), sys.stdin, sys.stdout, read_preamble=not args.no_preamble)
