"""
Light-Dark 1-D problem model.

The agent moves along a line with unit steps and must terminate inside the
goal region around the origin. Position readings are exact only near the
light at ``light_center``; the uniform noise band widens with the distance
from it.
"""

import math
from typing import Tuple

import numpy as np
from scipy import stats

from lightdark.pomdp.interface import GenerativePOMDP
from lightdark.pomdp.schema import (
    TERMINATED,
    Action,
    ActiveState,
    InvalidActionError,
    LightDarkParams,
    State,
    TerminatedState,
)

_ACTIONS: Tuple[Action, ...] = (Action.LEFT, Action.TERMINATE, Action.RIGHT)


def validate_action(action) -> Action:
    """
    Coerce ``action`` to an ``Action``.

    Raises:
        InvalidActionError: If the value is not in the action set
    """
    if isinstance(action, Action):
        return action
    if isinstance(action, (bool, np.bool_)) or not isinstance(action, (int, np.integer)):
        raise InvalidActionError(f"Action {action!r} not in Light-Dark actions")
    try:
        return Action(int(action))
    except ValueError as exc:
        raise InvalidActionError(f"Action {action!r} not in Light-Dark actions") from exc


class LightDark1D(GenerativePOMDP):
    """
    Light-Dark POMDP with a stateless generative interface.

    Attributes:
        params: Immutable problem parameters
    """

    def __init__(self, params: LightDarkParams = None):
        self.params = params or LightDarkParams()

    def __repr__(self) -> str:
        return f"LightDark1D({self.params})"

    def actions(self) -> Tuple[Action, ...]:
        return _ACTIONS

    def discount(self) -> float:
        return self.params.discount

    def initial_belief(self):
        """Frozen normal distribution over the starting position."""
        return stats.norm(loc=self.params.init_mean, scale=self.params.init_std)

    def is_terminal(self, state: State) -> bool:
        return isinstance(state, TerminatedState)

    def sample_next_state(self, state: State, action, rng: np.random.Generator = None) -> State:
        """
        Deterministic move by one step, or termination.

        ``rng`` is accepted for interface uniformity; the dynamics draw nothing.
        """
        action = validate_action(action)
        if self.is_terminal(state):
            raise ValueError("Cannot advance a terminated state")
        if action is Action.TERMINATE:
            return TERMINATED
        return ActiveState(state.position + int(action) * self.params.step_size)

    def noise_radius(self, next_state: ActiveState) -> int:
        """Half-width of the uniform integer observation band at ``next_state``."""
        distance = abs(next_state.position - self.params.light_center)
        return int(math.ceil(distance / math.sqrt(2) + self.params.noise_epsilon))

    def sample_observation(
        self,
        state: State,
        action,
        next_state: State,
        rng: np.random.Generator,
    ) -> int:
        validate_action(action)
        if self.is_terminal(next_state):
            return 0
        radius = self.noise_radius(next_state)
        return int(round(next_state.position)) + int(rng.integers(-radius, radius, endpoint=True))

    def observation_likelihood(self, action, next_state: State, observation: int) -> float:
        """
        Probability of ``observation`` given the successor state.

        Uniform over the same integer band ``sample_observation`` draws from,
        a point mass at 0 once terminated.
        """
        validate_action(action)
        if self.is_terminal(next_state):
            return 1.0 if observation == 0 else 0.0
        radius = self.noise_radius(next_state)
        if abs(observation - int(round(next_state.position))) <= radius:
            return 1.0 / (2 * radius + 1)
        return 0.0

    def observation_likelihoods(self, positions: np.ndarray, observation: int) -> np.ndarray:
        """Vectorized ``observation_likelihood`` over active positions."""
        positions = np.asarray(positions, dtype=float)
        distance = np.abs(positions - self.params.light_center)
        radii = np.ceil(distance / math.sqrt(2) + self.params.noise_epsilon)
        inside = np.abs(observation - np.round(positions)) <= radii
        return np.where(inside, 1.0 / (2 * radii + 1), 0.0)

    def reward(self, state: State, action, next_state: State = None) -> float:
        action = validate_action(action)
        if self.is_terminal(state):
            return 0.0
        if action is Action.TERMINATE:
            if abs(state.position) < self.params.goal_radius:
                return float(self.params.correct_reward)
            return float(self.params.incorrect_reward)
        return 0.0 - self.params.movement_cost
