import numpy as np
import jax.numpy as jnp
import pytest

from annealpath_jax.core import BufferPool
from annealpath_jax.potentials import FunctionLogPotential, GaussianLogPotential
from annealpath_jax.paths import InterpolatingPath, interpolate
from annealpath_jax.inference.autodiff import (
    InterpolatedGradientEvaluator,
    buffered_evaluator,
    differentiate,
)


def _make_problem(beta, d=3):
    ref = GaussianLogPotential(mean=np.zeros(d), std=np.linspace(0.5, 1.5, d))
    target = GaussianLogPotential(mean=np.linspace(1.0, 3.0, d), std=np.full(d, 0.7))
    log_potential = interpolate(InterpolatingPath(ref, target), beta)
    x = np.linspace(-1.0, 2.0, d)
    return ref, target, log_potential, x


class _Failing:
    def __init__(self, dim, exc=None, value=np.nan):
        self.dim = dim
        self.exc = exc
        self.value = value

    def __call__(self, x):
        return self.value

    def dimension(self):
        return self.dim

    def evaluate(self, x):
        if self.exc is not None:
            raise self.exc
        return self.value

    def evaluate_with_gradient(self, x):
        if self.exc is not None:
            raise self.exc
        return self.value, np.full(self.dim, self.value)


def test_beta_zero_is_reference():
    ref, _, log_potential, x = _make_problem(0.0)
    evaluator = differentiate("jax", log_potential, BufferPool())

    assert evaluator.evaluate(x) == ref.evaluate(x)
    value, grad = evaluator.evaluate_with_gradient(x)
    ref_value, ref_grad = ref.evaluate_with_gradient(x)
    assert value == ref_value
    np.testing.assert_array_equal(grad, ref_grad)


def test_beta_one_is_target():
    _, target, log_potential, x = _make_problem(1.0)
    evaluator = differentiate("jax", log_potential, BufferPool())

    assert evaluator.evaluate(x) == target.evaluate(x)
    value, grad = evaluator.evaluate_with_gradient(x)
    target_value, target_grad = target.evaluate_with_gradient(x)
    assert value == target_value
    np.testing.assert_array_equal(grad, target_grad)


def test_midpoint_is_average_across_backends():
    # hand-written reference, JAX target
    d = 4
    ref = GaussianLogPotential.standard(d, mean=-1.0)
    target = FunctionLogPotential(lambda x: -0.5 * jnp.sum((x - 2.0) ** 2), d)
    log_potential = interpolate(InterpolatingPath(ref, target), 0.5)
    evaluator = differentiate("jax", log_potential, BufferPool())

    x = np.array([0.0, 0.5, -2.0, 3.0])
    value, grad = evaluator.evaluate_with_gradient(x)
    expected_grad = 0.5 * (-(x + 1.0)) + 0.5 * (-(x - 2.0))
    np.testing.assert_allclose(grad, expected_grad, rtol=1e-5, atol=1e-5)
    expected_value = 0.5 * ref.evaluate(x) + 0.5 * (-0.5 * np.sum((x - 2.0) ** 2))
    assert value == pytest.approx(expected_value, rel=1e-5)
    assert evaluator.evaluate(x) == pytest.approx(expected_value, rel=1e-5)


def test_value_and_gradient_use_same_weights():
    ref, target, log_potential, x = _make_problem(0.3)
    evaluator = differentiate("jax", log_potential, BufferPool())

    value, grad = evaluator.evaluate_with_gradient(x)
    ref_value, ref_grad = ref.evaluate_with_gradient(x)
    target_value, target_grad = target.evaluate_with_gradient(x)
    assert value == pytest.approx(0.7 * ref_value + 0.3 * target_value, rel=1e-12)
    np.testing.assert_allclose(grad, 0.7 * ref_grad + 0.3 * target_grad, rtol=1e-12)
    assert evaluator.evaluate(x) == pytest.approx(value, rel=1e-12)


def test_no_stale_data_between_calls():
    for beta in [0.2, 0.9]:
        _, _, log_potential, x = _make_problem(beta)
        evaluator = differentiate("jax", log_potential, BufferPool())
        x_other = x[::-1] + 5.0

        evaluator.evaluate_with_gradient(x)
        value, grad = evaluator.evaluate_with_gradient(x_other)

        fresh = differentiate("jax", log_potential, BufferPool())
        fresh_value, fresh_grad = fresh.evaluate_with_gradient(x_other)
        assert value == fresh_value
        np.testing.assert_array_equal(grad, fresh_grad)


def test_returned_gradient_aliases_combination_buffer():
    _, _, log_potential, x = _make_problem(0.5)
    evaluator = differentiate("jax", log_potential, BufferPool())

    _, first = evaluator.evaluate_with_gradient(x)
    assert first is evaluator.buffer
    kept = first.copy()
    _, second = evaluator.evaluate_with_gradient(x + 1.0)
    assert second is first
    assert not np.array_equal(first, kept)

    out = np.empty(evaluator.dimension())
    _, grad = evaluator.evaluate_with_gradient(x, out=out)
    assert grad is out
    np.testing.assert_allclose(out, kept, rtol=1e-12)


def test_beta_is_read_on_every_call():
    ref, target, log_potential, x = _make_problem(0.0)
    evaluator = differentiate("jax", log_potential, BufferPool())

    log_potential.beta = 0.6
    value, grad = evaluator.evaluate_with_gradient(x)
    ref_value, ref_grad = ref.evaluate_with_gradient(x)
    target_value, target_grad = target.evaluate_with_gradient(x)
    assert value == pytest.approx(0.4 * ref_value + 0.6 * target_value, rel=1e-12)
    np.testing.assert_allclose(grad, 0.4 * ref_grad + 0.6 * target_grad, rtol=1e-12)


def test_buffer_tags():
    _, _, log_potential, _ = _make_problem(0.5)
    pool = BufferPool()
    evaluator = differentiate("jax", log_potential, pool)

    assert sorted(pool.tags()) == [
        "gradient_interpolated_buffer",
        "gradient_interpolated_scratch_buffer",
        "reference_gradient_buffer",
        "target_gradient_buffer",
    ]
    buffers = [evaluator.buffer, evaluator.scratch, evaluator.ref_ad.buffer, evaluator.target_ad.buffer]
    for i in range(4):
        for j in range(i + 1, 4):
            assert not np.shares_memory(buffers[i], buffers[j])


def test_replica_buffers_are_reused_across_rounds():
    class Replica:
        def __init__(self):
            self.buffers = BufferPool()

    replica = Replica()
    _, _, log_potential, _ = _make_problem(0.5)
    first = differentiate("jax", log_potential, replica)
    second = differentiate("jax", log_potential, replica)
    assert first is not second
    assert first.buffer is second.buffer


def test_dimension_mismatch():
    _, _, log_potential, _ = _make_problem(0.5)
    pool = BufferPool()
    ref_ad = buffered_evaluator(GaussianLogPotential.standard(3), pool, tag="a")
    target_ad = buffered_evaluator(GaussianLogPotential.standard(2), pool, tag="b")
    with pytest.raises(ValueError):
        InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, np.zeros(3), np.zeros(3))


def test_combination_buffer_must_not_alias():
    _, _, log_potential, _ = _make_problem(0.5)
    pool = BufferPool()
    ref_ad = buffered_evaluator(GaussianLogPotential.standard(3), pool, tag="a")
    target_ad = buffered_evaluator(GaussianLogPotential.standard(3), pool, tag="b")
    with pytest.raises(ValueError):
        InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, ref_ad.buffer, np.zeros(3))
    with pytest.raises(ValueError):
        InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, np.zeros(3), target_ad.buffer)
    with pytest.raises(ValueError):
        InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, np.zeros(2), np.zeros(3))
    shared = np.zeros(3)
    with pytest.raises(ValueError):
        InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, shared, shared)


def test_nonlinear_interpolator_rejected():
    class GeometricInterpolator:
        def __call__(self, ref_value, target_value, beta):
            return ref_value ** (1.0 - beta) * target_value ** beta

    ref = GaussianLogPotential.standard(2)
    path = InterpolatingPath(ref, ref, interpolator=GeometricInterpolator())
    with pytest.raises(ValueError):
        differentiate("jax", interpolate(path, 0.5), BufferPool())


def test_endpoint_errors_propagate():
    ref = GaussianLogPotential.standard(2)
    path = InterpolatingPath(ref, _Failing(2, exc=FloatingPointError("boom")))
    evaluator = differentiate("jax", interpolate(path, 0.5), BufferPool())
    with pytest.raises(FloatingPointError):
        evaluator.evaluate(np.zeros(2))
    with pytest.raises(FloatingPointError):
        evaluator.evaluate_with_gradient(np.zeros(2))


def test_nan_is_reported_as_is():
    ref = GaussianLogPotential.standard(2)
    path = InterpolatingPath(ref, _Failing(2))
    evaluator = differentiate("jax", interpolate(path, 0.5), BufferPool())
    value, grad = evaluator.evaluate_with_gradient(np.zeros(2))
    assert np.isnan(value)
    assert np.all(np.isnan(grad))


def test_nested_paths():
    d = 2
    a = GaussianLogPotential.standard(d, mean=-1.0)
    b = GaussianLogPotential.standard(d, mean=1.0)
    c = GaussianLogPotential.standard(d, mean=4.0)
    inner = interpolate(InterpolatingPath(a, b), 0.5)
    outer = interpolate(InterpolatingPath(inner, c), 0.25)

    pool = BufferPool()
    evaluator = differentiate("jax", outer, pool)
    assert isinstance(evaluator.ref_ad, InterpolatedGradientEvaluator)
    assert len(pool) == 7

    x = np.array([0.3, -0.4])
    value, grad = evaluator.evaluate_with_gradient(x)
    ga, gb, gc = -(x + 1.0), -(x - 1.0), -(x - 4.0)
    np.testing.assert_allclose(grad, 0.75 * (0.5 * ga + 0.5 * gb) + 0.25 * gc, rtol=1e-12)
    expected = 0.75 * (0.5 * a.evaluate(x) + 0.5 * b.evaluate(x)) + 0.25 * c.evaluate(x)
    assert value == pytest.approx(expected, rel=1e-12)


def test_endpoint_gradients_are_left_intact():
    _, target, log_potential, x = _make_problem(0.4)
    evaluator = differentiate("jax", log_potential, BufferPool())
    evaluator.evaluate_with_gradient(x)
    np.testing.assert_array_equal(evaluator.target_ad.buffer, target.evaluate_with_gradient(x)[1])
