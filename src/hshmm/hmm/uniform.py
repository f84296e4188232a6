"""
Uniform random-draw sources for inverse-CDF sampling.

A uniform source is any zero-argument callable returning a float in [0, 1).
Sampling routines never touch the global numpy RNG; they draw from a
source built here.
"""

from typing import Callable, Iterable, Optional, Union

import numpy as np

from ..exceptions import SamplingError

UniformSource = Callable[[], float]

UniformLike = Union[None, int, np.random.Generator, UniformSource, Iterable[float]]


def generator_source(rng: np.random.Generator) -> UniformSource:
    """Wrap a numpy Generator as a uniform source."""
    def draw() -> float:
        return float(rng.random())
    return draw


class ReplaySource:
    """
    Uniform source that replays a fixed sequence of draws.

    Useful for driving the sampler at known quantiles.

    Examples:
        >>> source = ReplaySource([0.1, 0.25, 0.9])
        >>> source(), source()
        (0.1, 0.25)
    """

    def __init__(self, values: Iterable[float]):
        self._values = [float(v) for v in values]
        self._position = 0

    def __call__(self) -> float:
        if self._position >= len(self._values):
            raise SamplingError(
                f"Replay source exhausted after {len(self._values)} draws"
            )
        value = self._values[self._position]
        self._position += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self._values) - self._position


def as_uniform_source(source: UniformLike = None) -> UniformSource:
    """
    Coerce a seed, generator, callable or finite sequence into a uniform source.

    Args:
        source: None (fresh unseeded generator), an int seed, a
            numpy Generator, a zero-argument callable, or an iterable of
            floats to replay in order

    Returns:
        Zero-argument callable returning floats in [0, 1)

    Raises:
        SamplingError: If the object cannot be used as a uniform source
    """
    # Booleans are ints to isinstance but never meant as seeds
    if isinstance(source, (bool, np.bool_)):
        raise SamplingError(f"Cannot use {type(source).__name__} as a uniform source")
    if source is None or isinstance(source, (int, np.integer)):
        return generator_source(np.random.default_rng(source))
    if isinstance(source, np.random.Generator):
        return generator_source(source)
    if callable(source):
        return source
    try:
        return ReplaySource(source)
    except (TypeError, ValueError) as e:
        raise SamplingError(f"Cannot use {type(source).__name__} as a uniform source: {e}")


def checked_draw(source: UniformSource) -> float:
    """Draw once and verify the value lies in [0, 1]."""
    u = source()
    if not (0.0 <= u <= 1.0):
        raise SamplingError(f"Uniform source returned {u}, expected a value in [0, 1)")
    return u


def inverse_cdf_index(cumulative: np.ndarray, u: float) -> int:
    """
    Return the first index whose cumulative value is >= u.

    Scans linearly from index 0. If rounding leaves the final entry below
    ``u``, the last index is returned.

    A draw of exactly 0.0 satisfies the rule at the first entry, so it
    returns index 0 even when that state has zero probability (its
    cumulative value is 0.0). Generator draws hit 0.0 with negligible
    probability; replayed or custom sources should avoid it when state 0
    must be unreachable.
    """
    last = len(cumulative) - 1
    i = 0
    # Clamp to the last index when rounding leaves the total below u
    while i < last and u > cumulative[i]:
        i += 1
    return i
