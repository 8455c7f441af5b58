"""Schema validation for experiment configuration files."""

from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional
from pathlib import Path
import yaml

from lightdark.config import Config
from lightdark.pomdp.belief import GridBeliefTracker
from lightdark.pomdp.interface import BasePlanner
from lightdark.pomdp.model import LightDark1D
from lightdark.pomdp.policies import PolicyPlanner, policy_myopic, policy_threshold
from lightdark.pomdp.schema import LightDarkParams


class ProblemConfig(BaseModel):
    """Light-Dark problem parameters."""
    discount: float = Field(default=0.9, gt=0, lt=1, description="Discount factor")
    correct_reward: float = Field(default=10.0, description="Reward for terminating in the goal region")
    incorrect_reward: float = Field(default=-10.0, description="Reward for terminating elsewhere")
    step_size: float = Field(default=1.0, gt=0, description="Distance covered by one move")
    movement_cost: float = Field(default=0.0, ge=0, description="Cost per move (subtracted)")
    light_center: float = Field(default=5.0, description="Best-visibility position")
    goal_radius: float = Field(default=1.0, gt=0, description="Goal region half-width")
    noise_epsilon: float = Field(default=0.01, ge=0, description="Rounding guard for the noise radius")
    init_mean: float = Field(default=2.0, description="Initial belief mean")
    init_std: float = Field(default=3.0, gt=0, description="Initial belief standard deviation")

    def to_params(self) -> LightDarkParams:
        return LightDarkParams(**self.model_dump())


class PlannerConfig(BaseModel):
    """Planner configuration."""
    kind: Literal["pomcp", "myopic", "threshold"] = Field(default="pomcp", description="Planner type")

    # POMCP
    num_sims: int = Field(default=1000, ge=1, description="Simulations per decision")
    max_depth: int = Field(default=20, ge=1, description="Search depth")
    exploration_const: float = Field(default=20.0, ge=0, description="UCB1 exploration constant")
    num_particles: int = Field(default=500, ge=1, description="Root particles per decision")

    # Threshold policy
    goal_threshold: float = Field(default=0.9, gt=0, le=1, description="Goal probability needed to terminate")
    std_threshold: float = Field(default=0.5, ge=0, description="Belief spread that triggers localization")


class BeliefConfig(BaseModel):
    """Belief tracker configuration."""
    resolution: int = Field(default=10, ge=1, description="Support points per step")
    width: float = Field(default=4.0, gt=0, description="Initial support half-width in standard deviations")


class OutputsConfig(BaseModel):
    """Output configuration."""
    out_dir: Optional[str] = Field(default=None, description="Output directory (defaults to Config.RUNS_DIR)")
    save_csv: bool = Field(default=True, description="Save per-episode CSV")


class ExperimentConfig(BaseModel):
    """Schema for experiment configuration files."""

    name: str = Field(..., description="Experiment name")
    seed: int = Field(default=Config.DEFAULT_RANDOM_SEED, description="Random seed for reproducibility")
    description: Optional[str] = Field(default=None, description="Experiment description")

    problem: ProblemConfig = Field(default_factory=ProblemConfig, description="Problem parameters")
    planner: PlannerConfig = Field(default_factory=PlannerConfig, description="Planner configuration")
    belief: BeliefConfig = Field(default_factory=BeliefConfig, description="Belief tracker configuration")
    episodes: int = Field(default=10, ge=1, description="Number of episodes")
    max_steps: int = Field(default=Config.DEFAULT_MAX_STEPS, ge=1, description="Step limit per episode")
    outputs: OutputsConfig = Field(default_factory=OutputsConfig, description="Output configuration")

    @model_validator(mode="after")
    def validate_rewards(self):
        """Terminating correctly must pay more than terminating incorrectly."""
        if self.problem.correct_reward <= self.problem.incorrect_reward:
            raise ValueError("correct_reward must exceed incorrect_reward")
        return self


def load_experiment(path: str) -> ExperimentConfig:
    """Load and validate an experiment from a YAML file."""
    experiment_path = Path(path)
    if not experiment_path.exists():
        raise FileNotFoundError(f"Experiment file not found: {path}")

    with open(experiment_path, "r") as f:
        data = yaml.safe_load(f) or {}

    return ExperimentConfig(**data)


def build_model(cfg: ExperimentConfig) -> LightDark1D:
    return LightDark1D(cfg.problem.to_params())


def build_tracker(cfg: ExperimentConfig, model: LightDark1D) -> GridBeliefTracker:
    return GridBeliefTracker(model, resolution=cfg.belief.resolution, width=cfg.belief.width)


def build_planner(cfg: ExperimentConfig, model: LightDark1D) -> BasePlanner:
    """Construct the planner named by ``cfg.planner.kind``."""
    p = cfg.planner
    if p.kind == "myopic":
        return PolicyPlanner(model, policy_myopic)
    if p.kind == "threshold":
        return PolicyPlanner(
            model,
            policy_threshold,
            goal_threshold=p.goal_threshold,
            std_threshold=p.std_threshold,
        )

    from lightdark.planning import POMCPPlanner

    return POMCPPlanner(
        model,
        num_sims=p.num_sims,
        max_depth=p.max_depth,
        exploration_const=p.exploration_const,
        num_particles=p.num_particles,
        seed=cfg.seed + 1,
    )
