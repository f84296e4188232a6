"""
Plain-text diagnostics for MarginalHMM.
"""

from typing import List

import numpy as np


def _format_array(values: np.ndarray) -> str:
    return np.array2string(np.asarray(values), precision=6, suppress_small=True)


def format_report(model, name: str = "") -> str:
    """
    Render initial probabilities, transition matrix and per-state emission parameters.

    Only reads from the model.
    """
    lines: List[str] = [f"----- HMM {name} ------"]

    lines.append("initial probabilities:")
    lines.append(_format_array(model.initial_prob))
    lines.append("transition probabilities:")
    lines.append(_format_array(model.transition))

    for i, distribution in enumerate(model.emission_distributions):
        lines.append(f"state {i + 1}:")
        lines.append("mu:")
        lines.append(_format_array(distribution.mu))
        lines.append("sigma:")
        lines.append(_format_array(distribution.sigma))
        lines.append("")

    return "\n".join(lines) + "\n"
