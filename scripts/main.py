from __future__ import annotations

import sys
import argparse
import logging
from pathlib import Path
from typing import Dict, Tuple, Type

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from judgesim import JudgeConfig, JudgeSim, PolicyChannel, generate_judge_input
from judgesim.simulator import JudgeResult
from judgesim.strategies import STRATEGIES, Policy

RESULT_DIR = ROOT / "results"
FIG_DIR = RESULT_DIR / "figures"


# ------------------- one run: returns result and metrics -------------------
def run_sim_and_metrics(
    policy_cls: Type[Policy],
    seed: int,
    n_submissions: int,
    n_problems: int,
    n_invokers: int,
    arrival_rate: float,
    config: JudgeConfig,
) -> Tuple[JudgeResult, Dict[str, float]]:
    rng = np.random.default_rng(seed)
    judge_input = generate_judge_input(
        n_submissions,
        n_problems=n_problems,
        n_invokers=n_invokers,
        arrival_rate=arrival_rate,
        rng=rng,
    )
    sim = JudgeSim.from_input(judge_input, PolicyChannel(policy_cls(time_step=config.time_step)), config)
    result = sim.run()
    return result, result.metrics()


def plot_busy_invokers(results: Dict[str, JudgeResult], n_invokers: int, out_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(11, 6.5))
    colors = plt.cm.viridis(np.linspace(0.1, 0.9, len(results)))
    for color, (name, result) in zip(colors, results.items()):
        hist = result.history
        if hist.empty:
            continue
        ax.plot(hist["time"], hist["busy_invokers"], label=name, linewidth=1.6, color=color, alpha=0.9)
    ax.axhline(n_invokers, linestyle="--", linewidth=1.0, color="#7c8aa6")
    ax.set_xlabel("Time (ms)", fontsize=16)
    ax.set_ylabel("Busy invokers", fontsize=16)
    ax.grid(True, which="major", linestyle="--", linewidth=0.6, alpha=0.35, color="#7c8aa6")
    for spine in ["top", "right"]:
        ax.spines[spine].set_visible(False)
    ax.legend(fontsize=12, frameon=True, fancybox=True, framealpha=0.9)
    fig.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)


def plot_scores(summary: pd.DataFrame, out_path: Path) -> None:
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(summary.index, summary["mean"], yerr=summary["std"], color="#3366cc", alpha=0.85, capsize=6)
    ax.set_ylabel("Power-mean score (lower is better)", fontsize=14)
    ax.grid(True, axis="y", linestyle="--", linewidth=0.6, alpha=0.35)
    for spine in ["top", "right"]:
        ax.spines[spine].set_visible(False)
    fig.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)


# ------------------- Main program -------------------
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Compare scheduling policies on generated judge workloads")
    parser.add_argument("--N", type=int, default=200, help="Submissions per test (default: 200)")
    parser.add_argument("--problems", type=int, default=5, help="Problems per test (default: 5)")
    parser.add_argument("--invokers", type=int, default=8, help="Invoker count (default: 8)")
    parser.add_argument("--arrival_rate", type=float, default=0.02, help="Submissions per ms (default: 0.02)")
    parser.add_argument("--n_repeat", type=int, default=20, help="Number of seeds per strategy (default: 20)")
    parser.add_argument("--seed", type=int, default=42, help="Base random seed (default: 42)")
    parser.add_argument("--n_jobs", type=int, default=-1, help="Parallel jobs, -1 means all cores (default: -1)")
    parser.add_argument("--strategy", type=str, default=None, choices=sorted(STRATEGIES), help="Run one strategy only")
    parser.add_argument("--test_id_bound", type=str, default="exclusive", choices=["exclusive", "inclusive"])
    parser.add_argument("--max_ticks", type=int, default=None, help="Abort a run after this many ticks")
    parser.add_argument("--skip_plot", action="store_true", help="Skip plotting")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    config = JudgeConfig(test_id_bound=args.test_id_bound, max_ticks=args.max_ticks)
    strategies = {args.strategy: STRATEGIES[args.strategy]} if args.strategy else dict(STRATEGIES)
    seeds = np.arange(args.n_repeat) + args.seed

    first_runs: Dict[str, JudgeResult] = {}
    rows = []
    for name, policy_cls in strategies.items():
        results = Parallel(n_jobs=args.n_jobs)(
            delayed(run_sim_and_metrics)(
                policy_cls, int(seed), args.N, args.problems, args.invokers, args.arrival_rate, config
            )
            for seed in tqdm(seeds, desc=name, ncols=80)
        )
        first_runs[name] = results[0][0]
        df = pd.DataFrame([m for _, m in results])
        df["strategy"] = name
        rows.append(df)

        print("\n" + "=" * 60)
        print(f"{name} strategy".center(60))
        print("=" * 60)
        for k in df.columns.drop("strategy"):
            print(f"{k:>20s}: {df[k].mean():.2f} ± {df[k].std():.2f}")

    all_df = pd.concat(rows, ignore_index=True)
    summary = all_df.groupby("strategy")["score"].agg(["mean", "std"])
    RESULT_DIR.mkdir(parents=True, exist_ok=True)
    all_df.to_csv(RESULT_DIR / "strategy_scores.csv", index=False)

    if not args.skip_plot:
        FIG_DIR.mkdir(parents=True, exist_ok=True)
        plot_busy_invokers(first_runs, args.invokers, FIG_DIR / "busy_invokers.png")
        plot_scores(summary, FIG_DIR / "scores.png")
