"""Generative POMDP, planner and belief tracker interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Tuple

import numpy as np

from lightdark.pomdp.schema import Action, ActiveState, State


class GenerativePOMDP(ABC):
    """
    Capability set a planner needs from a problem model.

    Sampling operations draw from the generator passed by the caller; models
    never own or seed randomness themselves.
    """

    @abstractmethod
    def actions(self) -> Tuple[Action, ...]:
        """Return the action set in a fixed enumeration order."""

    @abstractmethod
    def discount(self) -> float:
        """Return the discount factor."""

    @abstractmethod
    def initial_belief(self) -> Any:
        """Return the initial state distribution."""

    def sample_initial_state(self, rng: np.random.Generator) -> State:
        """Draw a starting state from the initial belief."""
        return ActiveState(float(self.initial_belief().rvs(random_state=rng)))

    @abstractmethod
    def is_terminal(self, state: State) -> bool:
        """Return True once the episode has ended."""

    @abstractmethod
    def sample_next_state(self, state: State, action: Action, rng: np.random.Generator) -> State:
        """Draw a successor state."""

    @abstractmethod
    def sample_observation(
        self,
        state: State,
        action: Action,
        next_state: State,
        rng: np.random.Generator,
    ) -> int:
        """Draw an observation of the successor state."""

    @abstractmethod
    def reward(self, state: State, action: Action, next_state: State) -> float:
        """Return the reward for a transition."""

    def observation_likelihood(self, action: Action, next_state: State, observation: int) -> float:
        """Return P(observation | action, next_state); optional capability."""
        raise NotImplementedError(f"{type(self).__name__} has no exact observation likelihood")

    def step(self, state: State, action: Action, rng: np.random.Generator) -> Tuple[State, int, float]:
        """Draw (next_state, observation, reward) in one call."""
        next_state = self.sample_next_state(state, action, rng)
        observation = self.sample_observation(state, action, next_state, rng)
        return next_state, observation, self.reward(state, action, next_state)


class BasePlanner(ABC):
    """Maps a belief to an action recommendation."""

    @abstractmethod
    def recommend_action(self, belief: Any) -> Action:
        """Return the action to take under ``belief``."""


class BaseBeliefTracker(ABC):
    """Maintains a belief across (action, observation) pairs."""

    @abstractmethod
    def initialize(self, distribution: Any) -> Any:
        """Convert an initial state distribution into a tracked belief."""

    @abstractmethod
    def update(self, belief: Any, action: Action, observation: int) -> Any:
        """Return the posterior belief after ``action`` and ``observation``."""
