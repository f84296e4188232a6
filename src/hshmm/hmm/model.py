"""
Hidden Markov Model with continuous emissions and unconditional state marginals.

This module implements the parameter container of an HMM whose per-state
emission densities are pluggable continuous distributions, together with the
forward propagation of the hidden chain's state distribution and
inverse-CDF sampling of states.
"""

import sys
from typing import Callable, List, Optional, TextIO, Tuple, Union

import numpy as np

from ..config import get_config
from ..exceptions import (
    EmissionError,
    InvalidDimensionsError,
    InvalidParametersError,
    StaleTableError,
    StateIndexError,
    TimeIndexError,
)
from ..logger import get_logger
from .emissions import EmissionDistribution, get_emission_factory
from .report import format_report
from .uniform import UniformLike, as_uniform_source, checked_draw, generator_source, inverse_cdf_index

logger = get_logger(__name__)


class MarginalHMM:
    """
    HMM parameter container with marginal state probabilities over a horizon.

    The model holds:
    - initial_prob: P(q_0 = s_i) [n_states]
    - transition: P(q_t+1 = s_j | q_t = s_i) indexed [i, j]
    - one emission distribution per state over n_dims dimensions
    - marginal_prob: P(q_t = s_i), not conditioned on observations [n_states, horizon]

    Derived tables (marginal_cumulative, transition_cumulative) are tracked as
    current or stale. Any change to initial_prob or transition marks both
    stale, and sampling from a stale table raises StaleTableError.
    """

    def __init__(self,
                 n_states: int,
                 n_dims: int,
                 horizon: int,
                 emission_factory: Optional[Callable[[], EmissionDistribution]] = None,
                 random_state: Union[None, int, np.random.Generator] = None,
                 uniform_source: UniformLike = None):
        """
        Allocate all tables for the given dimensions.

        Args:
            n_states: Number of hidden states
            n_dims: Dimensionality of the observation space
            horizon: Number of time steps T for marginal propagation
            emission_factory: Zero-argument callable creating an emission
                distribution (default: config emission.family)
            random_state: Seed or numpy Generator used for emission
                initialization and, unless uniform_source is given, for draws
            uniform_source: Source of uniform draws for sampling

        Raises:
            InvalidDimensionsError: If any dimension is not a positive integer
            EmissionError: If the factory does not produce an emission distribution
        """
        _check_positive('n_states', n_states)
        _check_positive('n_dims', n_dims)
        _check_positive('horizon', horizon)

        self._n_states = int(n_states)
        self._n_dims = int(n_dims)
        self._horizon = int(horizon)

        if isinstance(random_state, np.random.Generator):
            self._rng = random_state
        else:
            self._rng = np.random.default_rng(random_state)

        # Draws share the emission generator unless overridden
        if uniform_source is None:
            self._uniform = generator_source(self._rng)
        else:
            self._uniform = as_uniform_source(uniform_source)

        self._initial_prob = np.zeros(self._n_states)
        self._transition = np.zeros((self._n_states, self._n_states))

        if emission_factory is None:
            emission_factory = get_emission_factory()
        self._emissions = []
        for _ in range(self._n_states):
            distribution = emission_factory()
            if not isinstance(distribution, EmissionDistribution):
                raise EmissionError(
                    f"{type(distribution).__name__} does not implement the emission interface"
                )
            distribution.init(self._n_dims)
            self._emissions.append(distribution)

        # Derived tables, stale until computed
        self._marginal_prob = np.zeros((self._n_states, self._horizon))
        self._marginal_cumulative = np.zeros((self._n_states, self._horizon))
        self._transition_cumulative = np.zeros((self._n_states, self._n_states))

        self._transition_cumulative_current = False
        self._marginals_current = False

        logger.debug(f"Initialized MarginalHMM with {self._n_states} states, "
                     f"{self._n_dims} dims, horizon {self._horizon}")

    @property
    def n_states(self) -> int:
        return self._n_states

    @property
    def n_dims(self) -> int:
        return self._n_dims

    @property
    def horizon(self) -> int:
        return self._horizon

    @property
    def initial_prob(self) -> np.ndarray:
        return _readonly(self._initial_prob)

    @property
    def transition(self) -> np.ndarray:
        return _readonly(self._transition)

    @property
    def emission_distributions(self) -> List[EmissionDistribution]:
        return list(self._emissions)

    @property
    def marginal_prob(self) -> np.ndarray:
        return _readonly(self._marginal_prob)

    @property
    def marginal_cumulative(self) -> np.ndarray:
        return _readonly(self._marginal_cumulative)

    @property
    def transition_cumulative(self) -> np.ndarray:
        return _readonly(self._transition_cumulative)

    @property
    def transition_cumulative_current(self) -> bool:
        """Whether transition_cumulative reflects the current transition matrix."""
        return self._transition_cumulative_current

    @property
    def marginals_current(self) -> bool:
        """Whether marginal_prob reflects the current parameters."""
        return self._marginals_current

    def randomly_initialize(self, finalize: Optional[bool] = None) -> None:
        """
        Uniform initial and transition probabilities, randomized emissions.

        The cumulative tables are left stale unless ``finalize`` is true
        (default: config hmm.auto_finalize).
        """
        uniform = 1.0 / self._n_states

        self._initial_prob = np.full(self._n_states, uniform)
        self._transition = np.full((self._n_states, self._n_states), uniform)
        self._mark_stale()

        for distribution in self._emissions:
            distribution.randomly_initialize(self._rng)

        logger.debug("Randomly initialized MarginalHMM parameters")

        if _resolve_finalize(finalize):
            self.finalize()

    def custom_initialize(self, finalize: Optional[bool] = None) -> None:
        """
        Initial distribution skewed toward state 0 and self-loop biased transitions.

        Initial weights are 1/(i+1), normalized. Each transition row starts
        uniform at 1/n, its diagonal entry is set to 1.0, and the row is
        renormalized. Emissions are randomized as in randomly_initialize.
        The cumulative transition table is always computed before returning;
        marginals are computed too when ``finalize`` is true.
        """
        # Initial probabilities skewed toward the first state
        weights = 1.0 / np.arange(1, self._n_states + 1, dtype=float)
        self._initial_prob = weights / weights.sum()

        # Uniform rows with a dominant self-transition
        transition = np.full((self._n_states, self._n_states), 1.0 / self._n_states)
        np.fill_diagonal(transition, 1.0)
        # Normalize rows to make stochastic
        self._transition = transition / transition.sum(axis=1, keepdims=True)
        self._mark_stale()

        for distribution in self._emissions:
            distribution.randomly_initialize(self._rng)

        logger.debug("Custom initialized MarginalHMM parameters")

        if _resolve_finalize(finalize):
            self.finalize()
        else:
            self.compute_cumulative_transition()

    def set_parameters(self, initial_prob: np.ndarray, transition: np.ndarray) -> None:
        """
        Replace initial and transition probabilities.

        Both derived tables become stale until recomputed.

        Args:
            initial_prob: Initial state probabilities [n_states]
            transition: Transition matrix [n_states, n_states]

        Raises:
            InvalidParametersError: If shapes are wrong or values are not stochastic
        """
        initial_prob = np.array(initial_prob, dtype=float)
        transition = np.array(transition, dtype=float)

        if initial_prob.shape != (self._n_states,):
            raise InvalidParametersError(
                f"initial_prob shape {initial_prob.shape} doesn't match expected ({self._n_states},)")
        if transition.shape != (self._n_states, self._n_states):
            raise InvalidParametersError(
                f"transition shape {transition.shape} doesn't match expected "
                f"({self._n_states}, {self._n_states})")

        _check_stochastic(initial_prob, transition)

        # Copies taken above, so callers cannot alias the tables
        self._initial_prob = initial_prob
        self._transition = transition
        self._mark_stale()

        logger.debug("Model parameters updated and validated")

    def get_parameters(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return copies of (initial_prob, transition)."""
        return self._initial_prob.copy(), self._transition.copy()

    def validate_stochastic_matrices(self) -> bool:
        """
        Check that initial_prob and every transition row are probability vectors.

        Raises:
            InvalidParametersError: If any table violates stochastic properties
        """
        _check_stochastic(self._initial_prob, self._transition)
        return True

    def compute_cumulative_transition(self) -> None:
        """
        Fill transition_cumulative[j, i] with the sum of transition[i, :j+1].

        Each column i is the CDF of the next state given current state i.
        """
        self._transition_cumulative = np.cumsum(self._transition, axis=1).T.copy()
        self._transition_cumulative_current = True

    def compute_state_probabilities(self) -> None:
        """
        Propagate P(q_t = s_i) forward from the initial distribution.

        marginal_prob[:, 0] is initial_prob and each later column is the
        previous column times the transition matrix. The per-column CDF
        marginal_cumulative is refreshed afterwards. O(n_states^2 * horizon).
        """
        # Base case
        marginal = np.zeros((self._n_states, self._horizon))
        marginal[:, 0] = self._initial_prob

        # Recursive step
        for t in range(1, self._horizon):
            marginal[:, t] = marginal[:, t - 1] @ self._transition

        # Cumulative probabilities for state draws
        self._marginal_prob = marginal
        self._marginal_cumulative = np.cumsum(marginal, axis=0)
        self._marginals_current = True

        logger.debug(f"Computed state marginals over {self._horizon} steps")

    def finalize(self) -> None:
        """Recompute every derived table."""
        self.compute_cumulative_transition()
        self.compute_state_probabilities()

    def draw_state(self, t: int, uniform: UniformLike = None) -> int:
        """
        Draw a state from P(q_t).

        Args:
            t: Time index in [0, horizon)
            uniform: Optional uniform source overriding the model's own

        Raises:
            TimeIndexError: If t is out of range
            StaleTableError: If marginals are not current
        """
        if not _is_index(t) or not (0 <= t < self._horizon):
            raise TimeIndexError(f"Time index {t} out of range [0, {self._horizon - 1}]")
        if not self._marginals_current:
            raise StaleTableError(
                "State marginals are stale; call compute_state_probabilities() first")

        u = checked_draw(self._source(uniform))
        return inverse_cdf_index(self._marginal_cumulative[:, t], u)

    def draw_state_given_last_state(self, i: int, uniform: UniformLike = None) -> int:
        """
        Draw a state from P(q_t | q_t-1 = s_i).

        Args:
            i: Current state index in [0, n_states)
            uniform: Optional uniform source overriding the model's own

        Raises:
            StateIndexError: If i is out of range
            StaleTableError: If the cumulative transition table is not current
        """
        if not _is_index(i) or not (0 <= i < self._n_states):
            raise StateIndexError(f"State index {i} out of range [0, {self._n_states - 1}]")
        if not self._transition_cumulative_current:
            raise StaleTableError(
                "Cumulative transition table is stale; call compute_cumulative_transition() first")

        u = checked_draw(self._source(uniform))
        return inverse_cdf_index(self._transition_cumulative[:, i], u)

    def print_debug(self, name: str = "", stream: Optional[TextIO] = None) -> None:
        """Write a diagnostics report to ``stream`` (default: stderr)."""
        stream = stream if stream is not None else sys.stderr
        stream.write(format_report(self, name))

    def _source(self, uniform: UniformLike):
        if uniform is None:
            return self._uniform
        return as_uniform_source(uniform)

    def _mark_stale(self) -> None:
        self._transition_cumulative_current = False
        self._marginals_current = False

    def __repr__(self) -> str:
        return (f"MarginalHMM(n_states={self._n_states}, n_dims={self._n_dims}, "
                f"horizon={self._horizon})")


def _is_index(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _check_positive(name: str, value) -> None:
    if not _is_index(value) or value <= 0:
        raise InvalidDimensionsError(f"{name} must be a positive integer, got {value!r}")


def _readonly(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


def _resolve_finalize(finalize: Optional[bool]) -> bool:
    if finalize is None:
        return bool(get_config('hmm', 'auto_finalize'))
    return finalize


def _check_stochastic(initial_prob: np.ndarray, transition: np.ndarray) -> None:
    tolerance = get_config('hmm', 'tolerance') or 1e-9

    # Initial probabilities
    if np.any(initial_prob < 0):
        raise InvalidParametersError("Initial probabilities contain negative values")
    if not np.isclose(initial_prob.sum(), 1.0, rtol=0.0, atol=tolerance):
        raise InvalidParametersError(f"Initial probabilities sum to {initial_prob.sum()}, expected 1.0")

    # Transition rows
    if np.any(transition < 0):
        raise InvalidParametersError("Transition matrix contains negative values")
    row_sums = transition.sum(axis=1)
    if not np.allclose(row_sums, 1.0, rtol=0.0, atol=tolerance):
        raise InvalidParametersError(f"Transition matrix rows don't sum to 1.0: {row_sums}")
