"""
Integration tests for hshmm.

Build a model, initialize it, derive its tables and sample from it end to end.
"""

import io

import numpy as np
import pytest

from hshmm.hmm import MarginalHMM, DiagonalGaussianDistribution, format_report
from hshmm.simulate import sample_sequence, empirical_state_frequencies


@pytest.mark.integration
class TestCompletePipeline:

    def test_uniform_policy_requires_explicit_cumulative(self):
        model = MarginalHMM(n_states=4, n_dims=3, horizon=8, random_state=2,
                            emission_factory=DiagonalGaussianDistribution)
        model.randomly_initialize()
        model.compute_cumulative_transition()
        model.compute_state_probabilities()

        sequences = [sample_sequence(model, rng=i) for i in range(50)]
        frequencies = empirical_state_frequencies([s.states for s in sequences], 4)

        assert all(s.observations.shape == (8, 3) for s in sequences)
        np.testing.assert_allclose(frequencies.sum(axis=0), 1.0)
        np.testing.assert_allclose(model.marginal_prob, 0.25)

    def test_biased_marginals_converge_to_stationary(self):
        model = MarginalHMM(n_states=3, n_dims=1, horizon=200)
        model.custom_initialize(finalize=True)

        # Doubly stochastic transitions have a uniform stationary distribution
        np.testing.assert_allclose(model.marginal_prob[:, -1], 1.0 / 3, atol=1e-9)
        np.testing.assert_allclose(model.marginal_prob.sum(axis=0), 1.0, atol=1e-9)

    def test_parameter_change_then_finalize(self):
        model = MarginalHMM(n_states=2, n_dims=1, horizon=3)
        model.custom_initialize(finalize=True)

        model.set_parameters(np.array([1.0, 0.0]), np.array([[0.0, 1.0], [1.0, 0.0]]))
        model.finalize()

        np.testing.assert_allclose(model.marginal_prob, [[1.0, 0.0, 1.0], [0.0, 1.0, 0.0]])
        assert model.draw_state(1, [0.5]) == 1
        assert model.draw_state_given_last_state(1, [0.99]) == 0

    def test_report_matches_print_debug(self):
        model = MarginalHMM(n_states=2, n_dims=2, horizon=2, random_state=0)
        model.randomly_initialize()

        stream = io.StringIO()
        model.print_debug("x", stream)

        assert stream.getvalue() == format_report(model, "x")
