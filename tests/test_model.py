"""
Tests for the Light-Dark problem model.
"""

import math

import numpy as np
import pytest

from lightdark.pomdp import (
    TERMINATED,
    Action,
    ActiveState,
    InvalidActionError,
    LightDark1D,
    LightDarkParams,
    ObservationModelError,
    check_observation_consistency,
    validate_action,
)


@pytest.fixture
def model():
    return LightDark1D(
        LightDarkParams(
            discount=0.9,
            correct_reward=10.0,
            incorrect_reward=-10.0,
            step_size=1.0,
            movement_cost=0.0,
        )
    )


def test_worked_example(model):
    """Move left into the goal region, then terminate for the correct reward."""
    rng = np.random.default_rng(0)
    s = ActiveState(1.145)

    sp = model.sample_next_state(s, Action.LEFT, rng)
    assert isinstance(sp, ActiveState)
    assert sp.position == pytest.approx(0.145)
    assert model.reward(s, Action.LEFT, sp) == 0.0

    spp = model.sample_next_state(sp, Action.TERMINATE, rng)
    assert spp is TERMINATED
    assert model.is_terminal(spp)
    assert model.reward(sp, Action.TERMINATE, spp) == 10.0


def test_terminate_outside_goal_is_penalized(model):
    """Terminating at |x| >= 1 earns the incorrect reward."""
    assert model.reward(ActiveState(5.0), Action.TERMINATE, TERMINATED) == -10.0
    assert model.reward(ActiveState(1.0), Action.TERMINATE, TERMINATED) == -10.0
    assert model.reward(ActiveState(-1.0), Action.TERMINATE, TERMINATED) == -10.0
    assert model.reward(ActiveState(-0.999), Action.TERMINATE, TERMINATED) == 10.0


def test_moves_never_terminate(model):
    """Left/right moves shift the position by exactly one step."""
    rng = np.random.default_rng(1)
    for x in np.linspace(-10, 10, 41):
        for a in (Action.LEFT, Action.RIGHT):
            sp = model.sample_next_state(ActiveState(float(x)), a, rng)
            assert not model.is_terminal(sp), "Moves should not terminate"
            assert sp.position == pytest.approx(x + int(a) * 1.0)


def test_terminate_always_terminates(model):
    rng = np.random.default_rng(2)
    for x in (-4.0, 0.0, 0.5, 7.3):
        assert model.sample_next_state(ActiveState(x), Action.TERMINATE, rng) is TERMINATED


def test_step_size_scales_moves():
    model = LightDark1D(LightDarkParams(step_size=0.5))
    sp = model.sample_next_state(ActiveState(2.0), Action.RIGHT, np.random.default_rng(0))
    assert sp.position == pytest.approx(2.5)


def test_advancing_terminated_state_raises(model):
    with pytest.raises(ValueError):
        model.sample_next_state(TERMINATED, Action.LEFT, np.random.default_rng(0))


def test_terminated_state_earns_nothing(model):
    assert model.reward(TERMINATED, Action.TERMINATE, TERMINATED) == 0.0


def test_movement_cost_is_subtracted():
    """A positive movement cost makes every move a negative reward."""
    model = LightDark1D(LightDarkParams(movement_cost=0.5))
    s = ActiveState(3.0)
    for a in (Action.LEFT, Action.RIGHT):
        assert model.reward(s, a, model.sample_next_state(s, a)) == -0.5


def test_integer_actions_are_accepted(model):
    assert validate_action(-1) is Action.LEFT
    assert validate_action(0) is Action.TERMINATE
    assert validate_action(np.int64(1)) is Action.RIGHT
    sp = model.sample_next_state(ActiveState(1.145), -1, np.random.default_rng(0))
    assert sp.position == pytest.approx(0.145)


@pytest.mark.parametrize("bad", [2, -2, "left", 0.5, True, None])
def test_invalid_actions_are_rejected(model, bad):
    with pytest.raises(InvalidActionError):
        model.sample_next_state(ActiveState(0.0), bad, np.random.default_rng(0))
    with pytest.raises(ValueError):
        model.reward(ActiveState(0.0), bad, TERMINATED)


def test_noise_radius(model):
    """Noise radius is ceil(|x - 5| / sqrt(2) + eps)."""
    assert model.noise_radius(ActiveState(5.0)) == 1
    assert model.noise_radius(ActiveState(0.0)) == 4
    assert model.noise_radius(ActiveState(10.0)) == 4
    assert model.noise_radius(ActiveState(2.0)) == math.ceil(3 / math.sqrt(2))


def test_observations_stay_in_band(model):
    """Sampled observations lie within round(x) ± radius."""
    rng = np.random.default_rng(3)
    for x in (-3.7, 0.145, 2.5, 5.0, 9.2):
        sp = ActiveState(x)
        r = model.noise_radius(sp)
        center = int(round(x))
        for _ in range(500):
            o = model.sample_observation(ActiveState(0.0), Action.RIGHT, sp, rng)
            assert isinstance(o, int)
            assert center - r <= o <= center + r, f"Observation {o} outside band at {x}"


def test_observations_are_uniform_over_band(model):
    """At x = 0 the band is [-4, 4]; each value appears ~1/9 of the time."""
    rng = np.random.default_rng(4)
    sp = ActiveState(0.0)
    n = 18000
    draws = np.array([model.sample_observation(sp, Action.LEFT, sp, rng) for _ in range(n)])
    values, counts = np.unique(draws, return_counts=True)
    assert list(values) == list(range(-4, 5))
    assert np.allclose(counts / n, 1.0 / 9.0, atol=0.015)


def test_terminated_observation_is_zero(model):
    rng = np.random.default_rng(5)
    assert model.sample_observation(ActiveState(3.0), Action.TERMINATE, TERMINATED, rng) == 0
    assert model.observation_likelihood(Action.TERMINATE, TERMINATED, 0) == 1.0
    assert model.observation_likelihood(Action.TERMINATE, TERMINATED, 1) == 0.0


def test_observation_likelihood_sums_to_one(model):
    for x in (-6.0, -0.4, 0.145, 2.5, 5.0, 11.3):
        sp = ActiveState(x)
        total = sum(model.observation_likelihood(Action.LEFT, sp, o) for o in range(-40, 41))
        assert total == pytest.approx(1.0), f"Likelihood at {x} sums to {total}"


def test_observation_likelihood_outside_band_is_zero(model):
    sp = ActiveState(5.0)
    assert model.observation_likelihood(Action.RIGHT, sp, 5) == pytest.approx(1 / 3)
    assert model.observation_likelihood(Action.RIGHT, sp, 7) == 0.0
    assert model.observation_likelihood(Action.RIGHT, sp, 3) == 0.0


def test_vectorized_likelihood_matches_scalar(model):
    positions = np.array([-3.5, -0.5, 0.0, 0.145, 1.5, 2.5, 4.9, 5.0, 8.5])
    for o in range(-8, 12):
        vec = model.observation_likelihoods(positions, o)
        scalar = [model.observation_likelihood(Action.LEFT, ActiveState(x), o) for x in positions]
        assert np.allclose(vec, scalar), f"Mismatch at observation {o}"


def test_discount_is_constant(model):
    values = {model.discount() for _ in range(10)}
    assert values == {0.9}
    assert 0.0 < model.discount() < 1.0


def test_actions_are_fixed_and_ordered(model):
    assert model.actions() == (Action.LEFT, Action.TERMINATE, Action.RIGHT)
    assert model.actions() == model.actions()


def test_initial_belief_defaults():
    belief = LightDark1D().initial_belief()
    assert belief.mean() == pytest.approx(2.0)
    assert belief.std() == pytest.approx(3.0)


def test_sample_initial_state_is_reproducible():
    model = LightDark1D()
    a = model.sample_initial_state(np.random.default_rng(9))
    b = model.sample_initial_state(np.random.default_rng(9))
    assert isinstance(a, ActiveState)
    assert a == b


def test_step_combines_generative_draws(model):
    next_state, observation, reward = model.step(ActiveState(0.3), Action.TERMINATE, np.random.default_rng(0))
    assert next_state is TERMINATED
    assert observation == 0
    assert reward == 10.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"discount": 0.0},
        {"discount": 1.0},
        {"step_size": 0.0},
        {"movement_cost": -1.0},
        {"goal_radius": 0.0},
        {"init_std": 0.0},
    ],
)
def test_invalid_params_rejected(kwargs):
    with pytest.raises(ValueError):
        LightDarkParams(**kwargs)


def test_observation_model_is_consistent(model):
    rng = np.random.default_rng(6)
    for x in (-2.0, 0.145, 5.0, 8.7):
        freqs = check_observation_consistency(model, Action.RIGHT, ActiveState(x), n_samples=2000, rng=rng)
        assert sum(freqs.values()) == pytest.approx(1.0)
    check_observation_consistency(model, Action.TERMINATE, TERMINATED, n_samples=10, rng=rng)


def test_narrow_likelihood_is_detected():
    """A likelihood narrower than the sampler misses sampled observations."""

    class NarrowLikelihood(LightDark1D):
        def observation_likelihood(self, action, next_state, observation):
            radius = self.noise_radius(next_state) - 1
            if abs(observation - int(round(next_state.position))) <= radius:
                return 1.0 / (2 * radius + 1)
            return 0.0

    with pytest.raises(ObservationModelError):
        check_observation_consistency(NarrowLikelihood(), Action.LEFT, ActiveState(0.0), n_samples=1000)


def test_unnormalized_likelihood_is_detected():
    class HalfLikelihood(LightDark1D):
        def observation_likelihood(self, action, next_state, observation):
            return 0.5 * super().observation_likelihood(action, next_state, observation)

    with pytest.raises(ObservationModelError):
        check_observation_consistency(HalfLikelihood(), Action.LEFT, ActiveState(0.0), n_samples=1000)
