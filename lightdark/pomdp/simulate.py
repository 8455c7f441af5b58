"""
Light-Dark simulation and rollouts.
"""

from typing import Any, Dict, Iterator, NamedTuple, Optional

import numpy as np
import pandas as pd

from lightdark.pomdp.interface import BaseBeliefTracker, BasePlanner, GenerativePOMDP
from lightdark.pomdp.schema import Action, ActiveState, State
from lightdark.utils.logging_utils import get_logger

logger = get_logger(__name__)


class Step(NamedTuple):
    """One simulated time step."""
    state: State
    action: Action
    reward: float
    next_state: State
    observation: int
    belief: Any


def run_episode(
    model: GenerativePOMDP,
    planner: BasePlanner,
    belief_tracker: BaseBeliefTracker,
    rng: Optional[np.random.Generator] = None,
    initial_state: Optional[State] = None,
    max_steps: int = 100,
) -> Iterator[Step]:
    """
    Lazily simulate one episode, yielding a ``Step`` per time step.

    The generator stops after the first step whose successor state is
    terminal, or after ``max_steps`` steps. ``Step.belief`` is the belief the
    planner acted on.

    Args:
        model: Problem model
        planner: Planner recommending actions from beliefs
        belief_tracker: Tracker updating beliefs after each observation
        rng: Random number generator for the true dynamics
        initial_state: True starting state (if None, sample from initial belief)
        max_steps: Step limit
    """
    if rng is None:
        rng = np.random.default_rng(42)

    belief = belief_tracker.initialize(model.initial_belief())
    if initial_state is None:
        initial_state = model.sample_initial_state(rng)

    state = initial_state
    for t in range(max_steps):
        action = planner.recommend_action(belief)
        next_state, observation, reward = model.step(state, action, rng)
        logger.debug(f"t={t} s={state} a={Action(action).name} r={reward} sp={next_state} o={observation}")

        yield Step(state, Action(action), reward, next_state, observation, belief)

        if model.is_terminal(next_state):
            return
        belief = belief_tracker.update(belief, action, observation)
        state = next_state


def rollout(
    model: GenerativePOMDP,
    planner: BasePlanner,
    belief_tracker: BaseBeliefTracker,
    rng: Optional[np.random.Generator] = None,
    initial_state: Optional[State] = None,
    max_steps: int = 100,
) -> Dict[str, Any]:
    """
    Simulate a full episode and collect its histories.

    Returns:
        Dict with keys:
            - total_reward: Undiscounted sum of rewards
            - discounted_return: Sum of discount**t * reward_t
            - terminated: Whether the episode reached a terminal state
            - belief_history: Beliefs acted on at each step
            - action_history: Actions taken
            - observation_history: Observations received
            - state_history: True states, including the final one
            - reward_history: Step rewards
    """
    gamma = model.discount()
    steps = list(run_episode(model, planner, belief_tracker, rng, initial_state, max_steps))

    rewards = [s.reward for s in steps]
    discounts = gamma ** np.arange(len(rewards))
    state_history = [s.state for s in steps]
    if steps:
        state_history.append(steps[-1].next_state)

    return {
        "total_reward": float(np.sum(rewards)),
        "discounted_return": float(np.dot(discounts, rewards)) if rewards else 0.0,
        "terminated": bool(steps) and model.is_terminal(steps[-1].next_state),
        "belief_history": [s.belief for s in steps],
        "action_history": [s.action for s in steps],
        "observation_history": [s.observation for s in steps],
        "state_history": state_history,
        "reward_history": rewards,
    }


def steps_to_frame(steps) -> pd.DataFrame:
    """Tabulate episode steps, one row per time step."""
    rows = []
    for t, s in enumerate(steps):
        rows.append({
            "t": t,
            "position": getattr(s.state, "position", np.nan),
            "action": s.action.name,
            "reward": s.reward,
            "next_position": getattr(s.next_state, "position", np.nan),
            "observation": s.observation,
        })
    return pd.DataFrame(rows, columns=["t", "position", "action", "reward", "next_position", "observation"])


def evaluate(
    model: GenerativePOMDP,
    planner: BasePlanner,
    belief_tracker: BaseBeliefTracker,
    n_episodes: int = 10,
    seed: int = 42,
    max_steps: int = 100,
) -> pd.DataFrame:
    """
    Run several independent episodes and summarize each one.

    Returns:
        DataFrame with one row per episode: episode, steps, total_reward,
        discounted_return, terminated, correct, initial_position,
        final_position
    """
    rng = np.random.default_rng(seed)
    rows = []

    for episode in range(n_episodes):
        result = rollout(model, planner, belief_tracker, rng=rng, max_steps=max_steps)
        states = result["state_history"]
        last_active = [s for s in states if isinstance(s, ActiveState)]
        # Correct means terminated inside the goal, whatever the reward values
        correct = (
            result["terminated"]
            and bool(last_active)
            and abs(last_active[-1].position) < model.params.goal_radius
        )
        rows.append({
            "episode": episode,
            "steps": len(result["action_history"]),
            "total_reward": result["total_reward"],
            "discounted_return": result["discounted_return"],
            "terminated": result["terminated"],
            "correct": bool(correct),
            "initial_position": states[0].position if states else np.nan,
            "final_position": last_active[-1].position if last_active else np.nan,
        })
        logger.info(
            f"Episode {episode + 1}/{n_episodes}: steps={rows[-1]['steps']} "
            f"return={result['discounted_return']:.3f} correct={rows[-1]['correct']}"
        )

    return pd.DataFrame(rows)


def summarize(df: pd.DataFrame) -> Dict[str, float]:
    """Aggregate metrics over an ``evaluate`` DataFrame."""
    n = len(df)
    return {
        "episodes": int(n),
        "mean_discounted_return": float(df["discounted_return"].mean()),
        "std_discounted_return": float(df["discounted_return"].std(ddof=1)) if n > 1 else 0.0,
        "mean_total_reward": float(df["total_reward"].mean()),
        "mean_steps": float(df["steps"].mean()),
        "termination_rate": float(df["terminated"].mean()),
        "success_rate": float(df["correct"].mean()),
    }
