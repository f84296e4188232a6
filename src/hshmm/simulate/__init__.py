"""
Simulation module.

Sample hidden state paths and observation sequences from a model.
"""

from .sequence import (
    SampledSequence, sample_state_path, sample_sequence, empirical_state_frequencies
)

__all__ = [
    "SampledSequence",
    "sample_state_path",
    "sample_sequence",
    "empirical_state_frequencies"
]
