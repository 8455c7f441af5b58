"""
Belief tracking for the Light-Dark POMDP.

Beliefs are weighted support points. Moves shift every support point by the
same step, so the predicted belief is exact; observations reweight the points
by the model's exact likelihood.
"""

from dataclasses import dataclass, field
import numpy as np

from lightdark.pomdp.interface import BaseBeliefTracker
from lightdark.pomdp.model import LightDark1D, validate_action
from lightdark.pomdp.schema import TERMINATED, Action, ActiveState
from lightdark.utils.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass
class GridBelief:
    """
    Discrete belief over positions.

    Attributes:
        positions: Support positions
        weights: Probabilities of each position (sum to 1)
        terminated: True once the terminate action was taken
    """
    positions: np.ndarray = field(default_factory=lambda: np.zeros(0))
    weights: np.ndarray = field(default_factory=lambda: np.zeros(0))
    terminated: bool = False

    def __post_init__(self):
        """Validate belief structure."""
        self.positions = np.asarray(self.positions, dtype=float)
        self.weights = np.asarray(self.weights, dtype=float)
        if self.terminated:
            return
        if self.positions.shape != self.weights.shape or self.positions.ndim != 1:
            raise ValueError(
                f"positions {self.positions.shape} and weights {self.weights.shape} must be matching 1-D arrays"
            )
        if len(self.positions) == 0:
            raise ValueError("Belief needs at least one support point")
        if np.any(self.weights < 0):
            raise ValueError("Belief weights must be non-negative")
        if not np.isclose(self.weights.sum(), 1.0, atol=1e-6):
            raise ValueError(f"Belief weights sum to {self.weights.sum():.6f}, expected 1")

    @classmethod
    def terminal(cls) -> "GridBelief":
        return cls(terminated=True)

    def mean(self) -> float:
        if self.terminated:
            return float("nan")
        return float(np.dot(self.weights, self.positions))

    def std(self) -> float:
        if self.terminated:
            return 0.0
        variance = np.dot(self.weights, (self.positions - self.mean()) ** 2)
        return float(np.sqrt(max(variance, 0.0)))

    def prob_in_goal(self, radius: float = 1.0) -> float:
        """Probability mass strictly inside (-radius, radius)."""
        if self.terminated:
            return 0.0
        return float(self.weights[np.abs(self.positions) < radius].sum())

    def sample(self, rng: np.random.Generator, n: int = 1) -> list:
        """Draw ``n`` states from the belief."""
        if self.terminated:
            return [TERMINATED] * n
        idx = rng.choice(len(self.positions), size=n, p=self.weights)
        return [ActiveState(float(self.positions[i])) for i in idx]


def discretize_normal(
    distribution,
    spacing: float = 0.1,
    width: float = 4.0,
    offset: float = 0.0,
) -> GridBelief:
    """
    Discretize a continuous distribution onto evenly spaced support points.

    Each point receives the CDF mass of the cell centered on it, covering
    ``mean ± width * std``; the tails are folded into the end cells.

    Args:
        distribution: Frozen scipy distribution (e.g. ``scipy.stats.norm``)
        spacing: Distance between support points
        width: Half-width of the covered range, in standard deviations
        offset: Shift of the whole grid away from the mean

    Returns:
        GridBelief over the support points
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    mean = float(distribution.mean())
    std = float(distribution.std())
    n_half = int(np.ceil(width * std / spacing))
    positions = mean + offset + spacing * np.arange(-n_half, n_half + 1)

    edges = np.concatenate([positions - spacing / 2, [positions[-1] + spacing / 2]])
    cdf = distribution.cdf(edges)
    cdf[0], cdf[-1] = 0.0, 1.0
    weights = np.diff(cdf)
    weights = np.maximum(weights, 0.0)
    weights = weights / weights.sum()

    return GridBelief(positions=positions, weights=weights)


def belief_update(
    model: LightDark1D,
    belief: GridBelief,
    action,
    observation: int,
) -> GridBelief:
    """
    Update belief: b'(x + a) ∝ P(o | x + a) * b(x)

    If the observation is impossible under the predicted belief, the belief
    restarts from every support point consistent with the observation,
    weighted by its likelihood. Only when no support point is consistent is
    the predicted belief kept.

    Args:
        model: Light-Dark model
        belief: Current belief
        action: Action taken
        observation: Observation received

    Returns:
        Updated belief (normalized)
    """
    action = validate_action(action)
    if belief.terminated:
        raise ValueError("Cannot update a terminated belief")

    if action is Action.TERMINATE:
        return GridBelief.terminal()

    # Predict: every support point moves by the same step
    predicted = belief.positions + int(action) * model.params.step_size

    # Correct: reweight by the exact observation likelihood
    likelihoods = model.observation_likelihoods(predicted, observation)
    new_weights = likelihoods * belief.weights

    norm = new_weights.sum()
    if norm < 1e-10:
        total = likelihoods.sum()
        if total <= 0:
            logger.warning(
                f"Observation {observation} impossible over the whole support, keeping predicted belief"
            )
            return GridBelief(positions=predicted, weights=belief.weights.copy())
        logger.warning(
            f"Observation {observation} impossible under current belief, restarting from "
            f"{int(np.count_nonzero(likelihoods))} consistent support points"
        )
        return GridBelief(positions=predicted, weights=likelihoods / total)

    return GridBelief(positions=predicted, weights=new_weights / norm)


class GridBeliefTracker(BaseBeliefTracker):
    """
    Belief tracker over a discretized initial distribution.

    Attributes:
        model: Light-Dark model
        resolution: Support points per step
        width: Covered range of the initial distribution, in standard deviations
    """

    def __init__(self, model: LightDark1D, resolution: int = 10, width: float = 4.0):
        if resolution < 1:
            raise ValueError(f"resolution must be at least 1, got {resolution}")
        self.model = model
        self.resolution = resolution
        self.width = width

    def initialize(self, distribution=None) -> GridBelief:
        if distribution is None:
            distribution = self.model.initial_belief()
        spacing = self.model.params.step_size / self.resolution
        # A quarter-cell shift keeps support points off half-integer rounding ties
        belief = discretize_normal(distribution, spacing=spacing, width=self.width, offset=spacing / 4)
        logger.debug(
            f"Initialized belief with {len(belief.positions)} support points, "
            f"mean={belief.mean():.3f}, std={belief.std():.3f}"
        )
        return belief

    def update(self, belief: GridBelief, action, observation: int) -> GridBelief:
        return belief_update(self.model, belief, action, observation)

