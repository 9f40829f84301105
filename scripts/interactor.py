"""
Referee process: reads a test file, talks to the policy over stdin/stdout and
writes the score to an output file. Exit status 0 = accepted, 1 = rejected.
"""
from __future__ import annotations

import sys
import argparse
import logging
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from judgesim import JudgeConfig, TextChannel, load_judge_input, run_judge
from judgesim.loader import write_profile

logger = logging.getLogger("judge")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Judge scheduling referee")
    parser.add_argument("test_file", type=Path)
    parser.add_argument("output_file", type=Path)
    parser.add_argument("--profile", type=Path, default=None, help="Write the per-submission diagnostic CSV here")
    parser.add_argument("--no_preamble", action="store_true", help="Do not announce invokers and problems first")
    parser.add_argument("--test_id_bound", type=str, default="exclusive", choices=["exclusive", "inclusive"])
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )
    judge_input = load_judge_input(args.test_file)
    if args.profile is not None:
        write_profile(judge_input, args.profile)

    config = JudgeConfig(send_preamble=not args.no_preamble, test_id_bound=args.test_id_bound)
    outcome = run_judge(judge_input, TextChannel(sys.stdin, sys.stdout), config)
    if not outcome.accepted:
        logger.error(f"wrong answer: {outcome.message}")
        return 1
    args.output_file.write_text(f"{outcome.score}\n", encoding="utf-8")
    logger.info(f"ok: {outcome.message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
