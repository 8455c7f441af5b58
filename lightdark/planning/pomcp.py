"""
POMCP planning for the Light-Dark POMDP through ``pomdp_py``.

The search itself is ``pomdp_py.POMCP``; this module only wraps the
generative model into the transition/observation/reward/rollout models
``pomdp_py`` expects, and seeds a fresh particle belief from the tracked
belief at every decision.
"""

from typing import List, Optional

import numpy as np
import pomdp_py

from lightdark.pomdp.belief import GridBelief
from lightdark.pomdp.interface import BasePlanner
from lightdark.pomdp.model import LightDark1D
from lightdark.pomdp.schema import TERMINATED, Action, State
from lightdark.utils.logging_utils import get_logger

logger = get_logger(__name__)


class LDState(pomdp_py.State):
    def __init__(self, state: State):
        self.state = state

    def __hash__(self):
        return hash(self.state)

    def __eq__(self, other):
        return isinstance(other, LDState) and self.state == other.state

    def __repr__(self):
        return f"LDState({self.state})"


class LDAction(pomdp_py.Action):
    def __init__(self, action: Action):
        self.action = action

    def __hash__(self):
        return hash(self.action)

    def __eq__(self, other):
        return isinstance(other, LDAction) and self.action == other.action

    def __repr__(self):
        return f"LDAction({self.action.name})"


class LDObservation(pomdp_py.Observation):
    def __init__(self, value: int):
        self.value = int(value)

    def __hash__(self):
        return hash(self.value)

    def __eq__(self, other):
        return isinstance(other, LDObservation) and self.value == other.value

    def __repr__(self):
        return f"LDObservation({self.value})"


class LDTransitionModel(pomdp_py.TransitionModel):
    """Terminated states are absorbing inside the search tree."""

    def __init__(self, model: LightDark1D, rng: np.random.Generator):
        self.model = model
        self.rng = rng

    def sample(self, state, action):
        if self.model.is_terminal(state.state):
            return LDState(TERMINATED)
        return LDState(self.model.sample_next_state(state.state, action.action, self.rng))

    def probability(self, next_state, state, action):
        if self.model.is_terminal(state.state):
            return 1.0 if self.model.is_terminal(next_state.state) else 0.0
        expected = self.model.sample_next_state(state.state, action.action, self.rng)
        return 1.0 if next_state.state == expected else 0.0


class LDObservationModel(pomdp_py.ObservationModel):
    def __init__(self, model: LightDark1D, rng: np.random.Generator):
        self.model = model
        self.rng = rng

    def sample(self, next_state, action):
        return LDObservation(
            self.model.sample_observation(next_state.state, action.action, next_state.state, self.rng)
        )

    def probability(self, observation, next_state, action):
        return self.model.observation_likelihood(action.action, next_state.state, observation.value)


class LDRewardModel(pomdp_py.RewardModel):
    def __init__(self, model: LightDark1D):
        self.model = model

    def sample(self, state, action, next_state):
        return self.model.reward(state.state, action.action, next_state.state)


class LDRolloutPolicy(pomdp_py.RolloutPolicy):
    """Uniformly random rollouts over the model's actions."""

    def __init__(self, model: LightDark1D, rng: np.random.Generator):
        self.model = model
        self.rng = rng
        self._actions = [LDAction(a) for a in model.actions()]

    def get_all_actions(self, state=None, history=None):
        return self._actions

    def sample(self, state):
        return self._actions[int(self.rng.integers(len(self._actions)))]

    def rollout(self, state, history=None):
        return self.sample(state)


class POMCPPlanner(BasePlanner):
    """
    Belief-space Monte Carlo tree search planner.

    ``rng`` draws the root particle set from the tracked belief and drives
    rollouts and simulated dynamics. ``pomdp_py.POMCP`` then resamples root
    particles with Python's global ``random`` module, which ``seed`` does not
    control, so two runs with the same seed can choose different actions.

    Attributes:
        model: Light-Dark model
        num_sims: Simulations per decision
        max_depth: Search depth
        exploration_const: UCB1 exploration constant
        num_particles: Particles drawn from the tracked belief at each decision
        rng: Generator for the root particle set, rollouts and simulated dynamics
    """

    def __init__(
        self,
        model: LightDark1D,
        num_sims: int = 1000,
        max_depth: int = 20,
        exploration_const: float = 20.0,
        num_particles: int = 500,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if num_sims < 1:
            raise ValueError(f"num_sims must be at least 1, got {num_sims}")
        if num_particles < 1:
            raise ValueError(f"num_particles must be at least 1, got {num_particles}")
        self.model = model
        self.num_sims = num_sims
        self.max_depth = max_depth
        self.exploration_const = exploration_const
        self.num_particles = num_particles
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self.transition_model = LDTransitionModel(model, self.rng)
        self.observation_model = LDObservationModel(model, self.rng)
        self.reward_model = LDRewardModel(model)
        self.rollout_policy = LDRolloutPolicy(model, self.rng)

    def __repr__(self) -> str:
        return (
            f"POMCPPlanner(num_sims={self.num_sims}, max_depth={self.max_depth}, "
            f"exploration_const={self.exploration_const}, num_particles={self.num_particles})"
        )

    def particles(self, belief: GridBelief) -> List[LDState]:
        return [LDState(s) for s in belief.sample(self.rng, self.num_particles)]

    def make_agent(self, belief: GridBelief) -> pomdp_py.Agent:
        return pomdp_py.Agent(
            pomdp_py.Particles(self.particles(belief)),
            self.rollout_policy,
            self.transition_model,
            self.observation_model,
            self.reward_model,
        )

    def recommend_action(self, belief: GridBelief) -> Action:
        if belief.terminated:
            raise ValueError("No action to recommend for a terminated belief")

        agent = self.make_agent(belief)
        planner = pomdp_py.POMCP(
            max_depth=self.max_depth,
            discount_factor=self.model.discount(),
            num_sims=self.num_sims,
            exploration_const=self.exploration_const,
            rollout_policy=self.rollout_policy,
            show_progress=False,
        )
        action = planner.plan(agent).action
        logger.debug(
            f"POMCP: mean={belief.mean():.3f} std={belief.std():.3f} "
            f"sims={self.num_sims} -> {action.name}"
        )
        return action

