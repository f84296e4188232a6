"""
hshmm: Hidden Markov Models with continuous emissions

A Python library for holding HMM parameters with pluggable continuous
emission densities, propagating unconditional state marginals over a fixed
horizon, and sampling hidden states.
"""

__version__ = "0.1.0"
__author__ = "hshmm Development Team"

from .config import get_config, set_config
from .logger import get_logger

__all__ = [
    "get_config",
    "set_config",
    "get_logger",
    "__version__"
]
