"""
Exception hierarchy for the hshmm package.
"""


class HSHMMError(Exception):
    """Base exception for the hshmm package."""
    pass


class InvalidDimensionsError(HSHMMError, ValueError):
    """Non-positive or non-integer model dimensions."""
    pass


class InvalidParametersError(HSHMMError, ValueError):
    """Probability tables with wrong shape or non-stochastic values."""
    pass


class StateIndexError(HSHMMError, IndexError):
    """State index outside [0, n_states)."""
    pass


class TimeIndexError(HSHMMError, IndexError):
    """Time index outside [0, horizon)."""
    pass


class StaleTableError(HSHMMError, RuntimeError):
    """A derived table was used before it was (re)computed."""
    pass


class EmissionError(HSHMMError):
    """Emission distribution misuse."""
    pass


class SamplingError(HSHMMError):
    """Uniform source produced an invalid value or ran out."""
    pass
