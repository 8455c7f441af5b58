"""
Light-Dark 1-D POMDP: problem model, belief tracking, policies and rollouts.
"""

from lightdark.pomdp.schema import (
    TERMINATED,
    Action,
    ActiveState,
    InvalidActionError,
    LightDarkParams,
    ObservationModelError,
    State,
    TerminatedState,
)
from lightdark.pomdp.interface import BaseBeliefTracker, BasePlanner, GenerativePOMDP
from lightdark.pomdp.model import LightDark1D, validate_action
from lightdark.pomdp.belief import GridBelief, GridBeliefTracker, belief_update, discretize_normal
from lightdark.pomdp.policies import PolicyPlanner, expected_reward, policy_myopic, policy_threshold
from lightdark.pomdp.simulate import Step, evaluate, rollout, run_episode, steps_to_frame, summarize
from lightdark.pomdp.validation import check_observation_consistency

__all__ = [
    "TERMINATED",
    "Action",
    "ActiveState",
    "InvalidActionError",
    "LightDarkParams",
    "ObservationModelError",
    "State",
    "TerminatedState",
    "BaseBeliefTracker",
    "BasePlanner",
    "GenerativePOMDP",
    "LightDark1D",
    "validate_action",
    "GridBelief",
    "GridBeliefTracker",
    "belief_update",
    "discretize_normal",
    "PolicyPlanner",
    "expected_reward",
    "policy_myopic",
    "policy_threshold",
    "Step",
    "evaluate",
    "rollout",
    "run_episode",
    "steps_to_frame",
    "summarize",
    "check_observation_consistency",
]
