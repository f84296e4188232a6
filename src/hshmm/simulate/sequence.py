"""
Sampling of hidden state paths and observation sequences from a MarginalHMM.

A path starts with q_0 drawn from P(q_0) and continues with
q_t drawn from P(q_t | q_t-1). Observations are drawn from the emission
distribution of the current state.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

import numpy as np

from ..exceptions import EmissionError
from ..hmm.model import MarginalHMM
from ..hmm.uniform import UniformLike, as_uniform_source
from ..logger import get_sampling_logger

logger = get_sampling_logger()


@dataclass
class SampledSequence:
    """Hidden states [horizon] and observations [horizon, n_dims]."""

    states: np.ndarray
    observations: np.ndarray

    def __len__(self) -> int:
        return len(self.states)


def sample_state_path(model: MarginalHMM, uniform: UniformLike = None) -> np.ndarray:
    """
    Draw one hidden state path of length ``model.horizon``.

    Args:
        model: Model with current marginals and cumulative transitions
        uniform: Optional uniform source shared by every draw of the path

    Returns:
        Integer array of state indices [horizon]

    Raises:
        StaleTableError: If either derived table is stale
    """
    source = None if uniform is None else as_uniform_source(uniform)

    path = np.zeros(model.horizon, dtype=int)
    path[0] = model.draw_state(0, source)
    for t in range(1, model.horizon):
        path[t] = model.draw_state_given_last_state(int(path[t - 1]), source)

    return path


def sample_sequence(model: MarginalHMM,
                    rng: Union[None, int, np.random.Generator] = None,
                    uniform: UniformLike = None) -> SampledSequence:
    """
    Draw a state path together with one observation per step.

    Args:
        model: Model with current derived tables
        rng: Seed or Generator for the emission draws
        uniform: Optional uniform source for the state draws

    Raises:
        EmissionError: If an emission distribution cannot be sampled
    """
    rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)

    states = sample_state_path(model, uniform)
    distributions = model.emission_distributions

    observations = np.zeros((model.horizon, model.n_dims))
    for t, state in enumerate(states):
        distribution = distributions[state]
        if not hasattr(distribution, 'sample'):
            raise EmissionError(f"{type(distribution).__name__} does not support sampling")
        observations[t] = distribution.sample(rng)

    logger.debug(f"Sampled sequence of length {model.horizon}")
    return SampledSequence(states=states, observations=observations)


def empirical_state_frequencies(paths: Iterable[np.ndarray], n_states: int,
                                horizon: Optional[int] = None) -> np.ndarray:
    """
    Per-time state occupancy frequencies over a collection of paths.

    Args:
        paths: State paths of equal length
        n_states: Number of states
        horizon: Path length (default: length of the first path)

    Returns:
        Frequencies [n_states, horizon], each column summing to 1,
        comparable with MarginalHMM.marginal_prob
    """
    paths = [np.asarray(p, dtype=int) for p in paths]
    if not paths:
        raise ValueError("paths cannot be empty")
    if horizon is None:
        horizon = len(paths[0])

    counts = np.zeros((n_states, horizon))
    for path_idx, path in enumerate(paths):
        if len(path) != horizon:
            raise ValueError(f"Path {path_idx} has length {len(path)}, expected {horizon}")
        counts[path, np.arange(horizon)] += 1

    return counts / len(paths)
