"""
Continuous emission distributions for per-state observation densities.

The HMM depends only on the ``EmissionDistribution`` protocol; the Gaussian
families here are the stock implementations.
"""

from typing import Callable, Dict, Optional, Protocol, runtime_checkable

import numpy as np

from ..config import get_config
from ..exceptions import EmissionError


@runtime_checkable
class EmissionDistribution(Protocol):
    """Interface every per-state emission distribution must provide."""

    def init(self, n_dims: int) -> None:
        ...

    def randomly_initialize(self, rng: Optional[np.random.Generator] = None) -> None:
        ...

    @property
    def mu(self) -> np.ndarray:
        ...

    @property
    def sigma(self) -> np.ndarray:
        ...


class GaussianDistribution:
    """
    Multivariate Gaussian with full covariance.

    Parameters are zero mean and identity covariance after ``init``;
    ``randomly_initialize`` draws a random mean and a random symmetric
    positive-definite covariance.
    """

    def __init__(self, mean_scale: Optional[float] = None, min_variance: Optional[float] = None):
        """
        Args:
            mean_scale: Standard deviation of the random mean components
                (default: config emission.mean_scale)
            min_variance: Ridge added to the random covariance diagonal
                (default: config emission.min_variance)
        """
        if mean_scale is None:
            mean_scale = get_config('emission', 'mean_scale')
        if min_variance is None:
            min_variance = get_config('emission', 'min_variance')
        if min_variance <= 0:
            raise EmissionError(f"min_variance must be positive, got {min_variance}")

        self.mean_scale = float(mean_scale)
        self.min_variance = float(min_variance)
        self.n_dims = 0
        self._mu = np.zeros(0)
        self._sigma = np.zeros((0, 0))

    def init(self, n_dims: int) -> None:
        """Allocate parameters for ``n_dims`` dimensions."""
        _check_dims(n_dims)
        self.n_dims = int(n_dims)
        self._mu = np.zeros(self.n_dims)
        self._sigma = np.eye(self.n_dims)

    def randomly_initialize(self, rng: Optional[np.random.Generator] = None) -> None:
        self._require_init()
        rng = rng if rng is not None else np.random.default_rng()

        self._mu = rng.standard_normal(self.n_dims) * self.mean_scale

        # Wishart-style draw, scaled so the expected diagonal is ~1
        factor = rng.standard_normal((self.n_dims, self.n_dims))
        sigma = factor @ factor.T / self.n_dims
        self._sigma = sigma + self.min_variance * np.eye(self.n_dims)

    def sample(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        """Draw one observation vector."""
        self._require_init()
        rng = rng if rng is not None else np.random.default_rng()
        return rng.multivariate_normal(self._mu, self._sigma)

    @property
    def mu(self) -> np.ndarray:
        return self._mu.copy()

    @property
    def sigma(self) -> np.ndarray:
        return self._sigma.copy()

    def _require_init(self) -> None:
        if self.n_dims <= 0:
            raise EmissionError(f"{type(self).__name__} used before init()")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_dims={self.n_dims})"


class DiagonalGaussianDistribution(GaussianDistribution):
    """Gaussian with independent dimensions; ``sigma`` is the variance vector."""

    def init(self, n_dims: int) -> None:
        _check_dims(n_dims)
        self.n_dims = int(n_dims)
        self._mu = np.zeros(self.n_dims)
        self._sigma = np.ones(self.n_dims)

    def randomly_initialize(self, rng: Optional[np.random.Generator] = None) -> None:
        self._require_init()
        rng = rng if rng is not None else np.random.default_rng()

        self._mu = rng.standard_normal(self.n_dims) * self.mean_scale
        # Per-dimension variances, floored at min_variance
        self._sigma = rng.chisquare(df=1, size=self.n_dims) + self.min_variance

    def sample(self, rng: Optional[np.random.Generator] = None) -> np.ndarray:
        self._require_init()
        rng = rng if rng is not None else np.random.default_rng()
        return self._mu + rng.standard_normal(self.n_dims) * np.sqrt(self._sigma)


def _check_dims(n_dims) -> None:
    if isinstance(n_dims, bool) or not isinstance(n_dims, (int, np.integer)) or n_dims <= 0:
        raise EmissionError(f"Emission dimensionality must be a positive integer, got {n_dims!r}")


EMISSION_FAMILIES: Dict[str, Callable[[], EmissionDistribution]] = {
    'gaussian': GaussianDistribution,
    'diagonal_gaussian': DiagonalGaussianDistribution,
}


def get_emission_factory(family: Optional[str] = None) -> Callable[[], EmissionDistribution]:
    """
    Look up an emission family by name.

    Args:
        family: Registered family name (default: config emission.family)

    Raises:
        EmissionError: If the family is unknown
    """
    if family is None:
        family = get_config('emission', 'family') or 'gaussian'
    try:
        return EMISSION_FAMILIES[family]
    except KeyError:
        raise EmissionError(
            f"Unknown emission family '{family}'. Available: {sorted(EMISSION_FAMILIES)}"
        )
