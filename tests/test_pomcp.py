"""
Tests for the pomdp_py POMCP adapter.
"""

import numpy as np
import pytest

pomdp_py = pytest.importorskip("pomdp_py")

from lightdark.planning import POMCPPlanner
from lightdark.planning.pomcp import LDAction, LDObservation, LDState, LDTransitionModel
from lightdark.pomdp import (
    TERMINATED,
    Action,
    ActiveState,
    GridBelief,
    GridBeliefTracker,
    LightDark1D,
    run_episode,
)


def point(x):
    return GridBelief(positions=np.array([x]), weights=np.array([1.0]))


def test_wrappers_hash_by_value():
    assert LDState(ActiveState(1.0)) == LDState(ActiveState(1.0))
    assert hash(LDState(TERMINATED)) == hash(LDState(TERMINATED))
    assert LDAction(Action.LEFT) != LDAction(Action.RIGHT)
    assert len({LDObservation(3), LDObservation(3), LDObservation(4)}) == 2


def test_terminated_is_absorbing_in_search():
    model = LightDark1D()
    T = LDTransitionModel(model, np.random.default_rng(0))
    assert T.sample(LDState(TERMINATED), LDAction(Action.RIGHT)) == LDState(TERMINATED)
    nxt = T.sample(LDState(ActiveState(1.0)), LDAction(Action.RIGHT))
    assert nxt.state.position == pytest.approx(2.0)


def test_recommends_a_model_action():
    model = LightDark1D()
    planner = POMCPPlanner(model, num_sims=200, max_depth=10, num_particles=100, seed=0)
    belief = GridBeliefTracker(model).initialize()
    assert planner.recommend_action(belief) in model.actions()


def test_terminates_when_certain_in_goal():
    """Terminating at 0 is worth 10; any detour is worth at most 9."""
    model = LightDark1D()
    planner = POMCPPlanner(model, num_sims=300, max_depth=5, num_particles=50, seed=1)
    assert planner.recommend_action(point(0.0)) is Action.TERMINATE


def test_terminated_belief_raises():
    planner = POMCPPlanner(LightDark1D(), num_sims=10, seed=0)
    with pytest.raises(ValueError):
        planner.recommend_action(GridBelief.terminal())


def test_invalid_settings_raise():
    with pytest.raises(ValueError):
        POMCPPlanner(LightDark1D(), num_sims=0)
    with pytest.raises(ValueError):
        POMCPPlanner(LightDark1D(), num_particles=0)


def test_episode_with_pomcp():
    model = LightDark1D()
    planner = POMCPPlanner(model, num_sims=100, max_depth=8, num_particles=100, seed=2)
    steps = list(run_episode(model, planner, GridBeliefTracker(model),
                             rng=np.random.default_rng(2), max_steps=8))
    assert 1 <= len(steps) <= 8
    for step in steps[:-1]:
        assert not model.is_terminal(step.next_state)


def test_seed_reproduces_root_particles():
    """The seed fixes the particle set drawn from the tracked belief."""
    model = LightDark1D()
    belief = GridBeliefTracker(model).initialize()
    a = POMCPPlanner(model, num_sims=10, num_particles=50, seed=5).particles(belief)
    b = POMCPPlanner(model, num_sims=10, num_particles=50, seed=5).particles(belief)
    c = POMCPPlanner(model, num_sims=10, num_particles=50, seed=6).particles(belief)
    assert a == b
    assert a != c
