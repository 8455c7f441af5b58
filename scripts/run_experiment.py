#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

import pandas as pd

from lightdark.config import Config
from lightdark.pomdp.simulate import evaluate, summarize
from lightdark.schema import ExperimentConfig, build_model, build_planner, build_tracker, load_experiment
from lightdark.utils.logging_utils import get_logger, set_level

logger = get_logger(__name__)


def run_experiment(cfg: ExperimentConfig) -> Tuple[pd.DataFrame, Dict[str, float]]:
    """Run every episode of an experiment and aggregate the metrics."""
    model = build_model(cfg)
    planner = build_planner(cfg, model)
    tracker = build_tracker(cfg, model)

    logger.info(f"Running {cfg.name}: {cfg.episodes} episodes with {planner!r}")
    df = evaluate(
        model,
        planner,
        tracker,
        n_episodes=cfg.episodes,
        seed=cfg.seed,
        max_steps=cfg.max_steps,
    )
    return df, summarize(df)


def resolve_out_dir(cfg: ExperimentConfig, out_dir: Optional[str] = None) -> Path:
    """Output directory: explicit argument, else ``<base>/<name>/<timestamp>``."""
    if out_dir:
        return Path(out_dir)
    base = Path(cfg.outputs.out_dir) if cfg.outputs.out_dir else Config.RUNS_DIR
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return base / cfg.name / ts


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a Light-Dark planning experiment.")
    parser.add_argument("--scenario", required=True, help="Path to experiment YAML.")
    parser.add_argument("--out-dir", dest="out_dir", type=str, default=None,
                       help="Output directory (if not provided, uses <RUNS_DIR>/<name>/<timestamp>/)")
    parser.add_argument("--log-level", dest="log_level", type=str, default=Config.LOG_LEVEL,
                       help="Logging level for the package and this script")
    args = parser.parse_args()
    set_level(args.log_level, __name__)

    cfg = load_experiment(args.scenario)
    df, metrics = run_experiment(cfg)

    out_dir = resolve_out_dir(cfg, args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if cfg.outputs.save_csv:
        df.to_csv(out_dir / "episodes.csv", index=False)
    with open(out_dir / "metrics.json", "w", encoding="utf-8") as f:
        json.dump(metrics, f, indent=2, sort_keys=True)

    # Print summary
    print(f"Experiment: {cfg.name} (planner={cfg.planner.kind})")
    for k, v in metrics.items():
        print(f"{k}: {v:.6f}")
    print(f"Outputs: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
