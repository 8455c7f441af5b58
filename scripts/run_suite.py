#!/usr/bin/env python3
from __future__ import annotations

import json
from pathlib import Path
from datetime import datetime
from typing import List

import pandas as pd

from lightdark.config import Config
from lightdark.schema import load_experiment
from lightdark.utils.logging_utils import get_logger, set_level
from scripts.run_experiment import run_experiment

logger = get_logger(__name__)


def find_experiments(scenarios_dir: Path) -> List[Path]:
    """Find all YAML experiment files in the scenarios directory."""
    if not scenarios_dir.exists():
        raise FileNotFoundError(f"Scenarios directory not found: {scenarios_dir}")
    return sorted(scenarios_dir.glob("*.yaml"))


def run_suite(scenarios_dir: Path = Config.SCENARIOS_DIR, output_base: Path = Config.RUNS_DIR) -> pd.DataFrame:
    """
    Run all experiments in the scenarios directory and return summary DataFrame.
    
    Args:
        scenarios_dir: Directory containing experiment YAML files
        output_base: Base directory for outputs
        
    Returns:
        DataFrame with one row per experiment and all metrics as columns
    """
    experiment_files = find_experiments(scenarios_dir)
    
    if not experiment_files:
        raise ValueError(f"No experiment files found in {scenarios_dir}")
    
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    suite_dir = output_base / f"suite_{timestamp}"
    suite_dir.mkdir(parents=True, exist_ok=True)
    
    summary_rows = []
    
    for experiment_path in experiment_files:
        try:
            cfg = load_experiment(str(experiment_path))
            df, metrics = run_experiment(cfg)
            
            experiment_dir = suite_dir / cfg.name
            experiment_dir.mkdir(parents=True, exist_ok=True)
            
            if cfg.outputs.save_csv:
                df.to_csv(experiment_dir / "episodes.csv", index=False)
            with open(experiment_dir / "metrics.json", "w", encoding="utf-8") as f:
                json.dump(metrics, f, indent=2, sort_keys=True)
            
            summary_rows.append({
                "experiment": cfg.name,
                "experiment_file": experiment_path.name,
                "planner": cfg.planner.kind,
                **metrics
            })
            
        except Exception as e:
            # Log error but continue with other experiments
            logger.error(f"Error running {experiment_path.name}: {e}")
            summary_rows.append({
                "experiment": experiment_path.stem,
                "experiment_file": experiment_path.name,
                "error": str(e)
            })
    
    summary_df = pd.DataFrame(summary_rows)
    
    summary_path = suite_dir / "summary.csv"
    summary_df.to_csv(summary_path, index=False)
    
    logger.info(f"Suite run complete: {len(summary_df)} experiments")
    logger.info(f"Summary: {summary_path}")
    
    return summary_df


def main() -> int:
    """Main entrypoint for batch experiment runner."""
    import argparse
    
    parser = argparse.ArgumentParser(description="Run all experiments in scenarios/ directory")
    parser.add_argument("--scenarios-dir", type=str, default=str(Config.SCENARIOS_DIR),
                       help="Directory containing experiment YAML files")
    parser.add_argument("--output-dir", type=str, default=str(Config.RUNS_DIR),
                       help="Base output directory")
    parser.add_argument("--log-level", type=str, default=Config.LOG_LEVEL,
                       help="Logging level for the package and this script")
    args = parser.parse_args()
    set_level(args.log_level, __name__, "scripts.run_experiment")
    
    Config.ensure_directories()
    summary_df = run_suite(Path(args.scenarios_dir), Path(args.output_dir))
    
    print("\n=== Summary ===")
    print(summary_df.to_string(index=False))
    
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
