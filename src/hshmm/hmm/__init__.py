"""
Hidden Markov Model module.

Continuous-emission HMM with unconditional state marginals and inverse-CDF sampling.
"""

from .model import MarginalHMM
from .emissions import (
    EmissionDistribution, GaussianDistribution, DiagonalGaussianDistribution,
    EMISSION_FAMILIES, get_emission_factory
)
from .uniform import ReplaySource, as_uniform_source
from .report import format_report

__all__ = [
    "MarginalHMM",
    "EmissionDistribution",
    "GaussianDistribution",
    "DiagonalGaussianDistribution",
    "EMISSION_FAMILIES",
    "get_emission_factory",
    "ReplaySource",
    "as_uniform_source",
    "format_report"
]
