"""
Policy functions for the Light-Dark POMDP.
"""

from typing import Callable

import numpy as np

from lightdark.pomdp.belief import GridBelief
from lightdark.pomdp.interface import BasePlanner
from lightdark.pomdp.model import LightDark1D
from lightdark.pomdp.schema import Action, ActiveState
from lightdark.utils.logging_utils import get_logger

logger = get_logger(__name__)


def expected_reward(model: LightDark1D, belief: GridBelief, action) -> float:
    """
    Expected immediate reward E[R | b, a] = sum_x b[x] * R(x, a).
    """
    if belief.terminated:
        return 0.0
    rewards = np.array([model.reward(ActiveState(float(x)), action) for x in belief.positions])
    return float(np.dot(belief.weights, rewards))


def policy_myopic(
    model: LightDark1D,
    belief: GridBelief,
) -> Action:
    """
    Myopic policy: choose action maximizing expected immediate reward.

    Ties are broken by the model's action enumeration order.

    Args:
        model: Light-Dark model
        belief: Current belief

    Returns:
        Action
    """
    best_action = None
    best_value = -np.inf

    for a in model.actions():
        value = expected_reward(model, belief, a)
        if value > best_value:
            best_value = value
            best_action = a

    return best_action


def policy_threshold(
    model: LightDark1D,
    belief: GridBelief,
    goal_threshold: float = 0.9,
    std_threshold: float = 0.5,
) -> Action:
    """
    Threshold policy: terminate once P(goal) clears the threshold.

    Otherwise localize first: move toward the light while the belief is
    wider than ``std_threshold``, then head for the origin.

    Args:
        model: Light-Dark model
        belief: Current belief
        goal_threshold: Goal probability needed to terminate
        std_threshold: Belief spread below which the agent heads for the goal

    Returns:
        Action
    """
    p_goal = belief.prob_in_goal(model.params.goal_radius)
    if p_goal >= goal_threshold:
        return Action.TERMINATE

    mean = belief.mean()
    if belief.std() > std_threshold:
        target = model.params.light_center
    else:
        target = 0.0

    step = model.params.step_size
    if abs(target - mean) < step / 2:
        # At the target already; step toward the origin
        return Action.LEFT if mean > 0 else Action.RIGHT
    return Action.RIGHT if target > mean else Action.LEFT


class PolicyPlanner(BasePlanner):
    """
    Adapts a policy function ``policy(model, belief, **kwargs)`` to a planner.
    """

    def __init__(self, model: LightDark1D, policy: Callable[..., Action], **policy_kwargs):
        self.model = model
        self.policy = policy
        self.policy_kwargs = policy_kwargs

    def __repr__(self) -> str:
        return f"PolicyPlanner({self.policy.__name__})"

    def recommend_action(self, belief: GridBelief) -> Action:
        action = self.policy(self.model, belief, **self.policy_kwargs)
        logger.debug(
            f"{self.policy.__name__}: mean={belief.mean():.3f} std={belief.std():.3f} -> {action.name}"
        )
        return action
