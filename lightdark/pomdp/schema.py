"""
Light-Dark POMDP schema definitions.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class InvalidActionError(ValueError):
    """Raised when an action is outside the fixed action set."""


class ObservationModelError(ValueError):
    """Raised when the observation sampler and likelihood disagree."""


class Action(IntEnum):
    """
    Light-Dark actions. The integer value is the direction of motion.
    """
    LEFT = -1
    TERMINATE = 0
    RIGHT = 1


@dataclass(frozen=True)
class ActiveState:
    """Agent at a 1-D position, episode still running."""
    position: float


@dataclass(frozen=True)
class TerminatedState:
    """Absorbing state entered after the terminate action."""

    def __repr__(self) -> str:
        return "TERMINATED"


TERMINATED = TerminatedState()

State = Union[ActiveState, TerminatedState]


@dataclass(frozen=True)
class LightDarkParams:
    """
    Light-Dark problem parameters.

    Attributes:
        discount: Discount factor, strictly between 0 and 1
        correct_reward: Reward for terminating inside the goal region
        incorrect_reward: Reward for terminating outside the goal region
        step_size: Distance covered by one move
        movement_cost: Cost per move (non-negative, subtracted from reward)
        light_center: Position where observations are sharpest
        goal_radius: Terminating with |position| < goal_radius is correct
        noise_epsilon: Small constant added before rounding the noise radius up
        init_mean: Mean of the initial normal belief
        init_std: Standard deviation of the initial normal belief
    """
    discount: float = 0.9
    correct_reward: float = 10.0
    incorrect_reward: float = -10.0
    step_size: float = 1.0
    movement_cost: float = 0.0
    light_center: float = 5.0
    goal_radius: float = 1.0
    noise_epsilon: float = 0.01
    init_mean: float = 2.0
    init_std: float = 3.0

    def __post_init__(self):
        """Validate parameters."""
        if not 0.0 < self.discount < 1.0:
            raise ValueError(f"discount must be in (0, 1), got {self.discount}")
        if self.step_size <= 0:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.movement_cost < 0:
            raise ValueError(
                f"movement_cost should be non-negative (costs are subtracted), got {self.movement_cost}"
            )
        if self.goal_radius <= 0:
            raise ValueError(f"goal_radius must be positive, got {self.goal_radius}")
        if self.noise_epsilon < 0:
            raise ValueError(f"noise_epsilon must be non-negative, got {self.noise_epsilon}")
        if self.init_std <= 0:
            raise ValueError(f"init_std must be positive, got {self.init_std}")
