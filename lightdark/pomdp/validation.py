"""
Consistency checks between a model's observation sampler and its likelihood.
"""

from typing import Dict, Optional

import numpy as np

from lightdark.pomdp.interface import GenerativePOMDP
from lightdark.pomdp.schema import ObservationModelError, State
from lightdark.utils.logging_utils import get_logger

logger = get_logger(__name__)


def check_observation_consistency(
    model: GenerativePOMDP,
    action,
    next_state: State,
    state: Optional[State] = None,
    n_samples: int = 1000,
    rng: Optional[np.random.Generator] = None,
    atol: float = 1e-9,
) -> Dict[int, float]:
    """
    Verify that ``observation_likelihood`` covers what ``sample_observation`` draws.

    Every sampled observation must have positive likelihood, and the
    likelihood must sum to 1 over the integer band spanned by the samples
    (widened until no further mass is found).

    Args:
        model: Model exposing both sampler and likelihood
        action: Action leading to ``next_state``
        next_state: Successor state to observe
        state: Pre-transition state passed to the sampler (defaults to next_state)
        n_samples: Number of observations to draw
        rng: Random number generator
        atol: Tolerance on the likelihood normalization

    Returns:
        Empirical frequency of each sampled observation

    Raises:
        ObservationModelError: If the two disagree
    """
    if rng is None:
        rng = np.random.default_rng(42)
    if state is None:
        state = next_state

    samples = [
        model.sample_observation(state, action, next_state, rng)
        for _ in range(n_samples)
    ]

    for obs in set(samples):
        if model.observation_likelihood(action, next_state, obs) <= 0.0:
            raise ObservationModelError(
                f"Observation {obs} sampled at {next_state} has zero likelihood"
            )

    lo, hi = min(samples), max(samples)
    total = sum(model.observation_likelihood(action, next_state, o) for o in range(lo, hi + 1))
    # Extend the band outward while the likelihood keeps reporting mass
    while model.observation_likelihood(action, next_state, lo - 1) > 0.0:
        lo -= 1
        total += model.observation_likelihood(action, next_state, lo)
    while model.observation_likelihood(action, next_state, hi + 1) > 0.0:
        hi += 1
        total += model.observation_likelihood(action, next_state, hi)

    if not np.isclose(total, 1.0, atol=atol):
        raise ObservationModelError(
            f"Observation likelihood at {next_state} sums to {total:.6f} over [{lo}, {hi}]"
        )

    values, counts = np.unique(samples, return_counts=True)
    frequencies = {int(v): c / n_samples for v, c in zip(values, counts)}
    logger.debug(f"Observation model consistent at {next_state}: support [{lo}, {hi}]")
    return frequencies
