"""
Score an external policy command on every test in a directory: each test runs
an interactor process wired to a fresh policy process.
"""
from __future__ import annotations

import sys
import argparse
import logging
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

import pandas as pd
from joblib import Parallel, delayed

ROOT = Path(__file__).resolve().parents[1]
INTERACTOR = Path(__file__).resolve().parent / "interactor.py"
DEFAULT_POLICY = f"{shlex.quote(sys.executable)} {shlex.quote(str(Path(__file__).resolve().parent / 'policy.py'))}"

logger = logging.getLogger("crossrun")


def run(test_file: Path, policy_cmd: str, extra_args: List[str]) -> Optional[int]:
    """Run one test; returns the score, or None if the policy was rejected."""
    with tempfile.TemporaryDirectory() as tmp:
        output_file = Path(tmp) / "output"
        policy = subprocess.Popen(
            shlex.split(policy_cmd),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            text=True,
        )
        interactor = subprocess.Popen(
            [sys.executable, str(INTERACTOR), str(test_file), str(output_file), *extra_args],
            stdin=policy.stdout,
            stdout=policy.stdin,
            text=True,
        )
        # the child processes own the pipe ends now
        policy.stdout.close()
        policy.stdin.close()
        code = interactor.wait()
        policy.wait()
        if code != 0:
            logger.warning(f"{test_file.name}: rejected (interactor exit {code})")
            return None
        return int(output_file.read_text(encoding="utf-8").split()[0])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Score a policy command over a test directory")
    parser.add_argument("--tests", type=Path, default=ROOT / "data")
    parser.add_argument("--policy", type=str, default=DEFAULT_POLICY, help="Command line of the policy process")
    parser.add_argument("--n_jobs", type=int, default=4)
    parser.add_argument("--test_id_bound", type=str, default="exclusive", choices=["exclusive", "inclusive"])
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
    test_files = sorted(p for p in args.tests.iterdir() if p.is_file())
    extra = ["--test_id_bound", args.test_id_bound]
    scores = Parallel(n_jobs=args.n_jobs, backend="threading")(
        delayed(run)(f, args.policy, extra) for f in test_files
    )
    df = pd.DataFrame({"Test": [f.name for f in test_files], "Score": scores})
    print(df.to_string(index=False))
    if df["Score"].isna().any():
        print("Total\trejected")
        sys.exit(1)
    print(f"Total\t{int(df['Score'].sum())}")
