import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import numpy.typing as npt
import pytest

from jsonio import MemoryBlobStore, ShapeMismatchError, add_gradient, as_json, from_json, interpolate


@dataclass
class Layer:
    name: str
    weights: npt.NDArray[np.float32]
    bias: float
    units: int


@dataclass
class Model:
    layers: list[Layer]
    epoch: int = 0
    frozen: bool = False
    notes: list[str] = field(default_factory=list)


def _model(scale: float, *, epoch: int = 1) -> Model:
    return Model(
        layers=[
            Layer('dense', np.full((2, 3), scale, dtype=np.float32), bias=scale, units=3),
            Layer('out', np.full(3, -scale, dtype=np.float32), bias=-scale, units=1),
        ],
        epoch=epoch,
        notes=['init'],
    )


@pytest.mark.parametrize('t', [0.0, 1.0])
def test_interpolate_boundaries(t: float) -> None:
    a = as_json(_model(1.0, epoch=2), Model)
    b = as_json(_model(3.0, epoch=4), Model)
    result = from_json(interpolate(a, b, t), Model).unwrap()
    expected = _model(1.0 if t == 0 else 3.0, epoch=2 if t == 0 else 4)
    assert result.epoch == expected.epoch
    for layer, expected_layer in zip(result.layers, expected.layers):
        np.testing.assert_array_equal(layer.weights, expected_layer.weights)
        assert layer.bias == expected_layer.bias


def test_interpolate_midpoint() -> None:
    a = as_json(_model(1.0, epoch=1), Model)
    b = as_json(_model(2.0, epoch=2), Model)
    result = from_json(interpolate(a, b, 0.5), Model).unwrap()
    np.testing.assert_allclose(result.layers[0].weights, np.full((2, 3), 1.5))
    assert result.layers[0].weights.dtype == np.float32
    assert result.layers[1].bias == -1.5
    # integers are rounded, half to even
    assert result.epoch == 2
    # non-numeric leaves come from the first operand
    assert result.layers[0].name == 'dense'
    assert result.frozen is False
    assert result.notes == ['init']


def test_zero_gradient_is_identity() -> None:
    a = as_json(_model(1.25), Model)
    zero = as_json(_model(0.0, epoch=0), Model)
    assert add_gradient(a, zero, 0.1) == a
    assert add_gradient(a, a, 0.0) == a


def test_add_gradient() -> None:
    a = as_json({'w': np.array([1.0, 2.0]), 'n': 10, 'lr': 0.5})
    grad = as_json({'w': np.array([0.5, -1.0]), 'n': 3, 'lr': 1.0})
    combined = add_gradient(a, grad, -2.0)
    assert str(combined) == '{"w":{"dtype":"<f8","shape":[2],"data":[0.0,4.0]},"n":4,"lr":-1.5}'


def test_integer_arrays_are_rounded() -> None:
    a = as_json([np.array([1, 2, 3], dtype=np.int16)])
    b = as_json([np.array([2, 2, 4], dtype=np.int16)])
    assert str(interpolate(a, b, 0.5)) == '[{"dtype":"<i2","shape":[3],"data":[2,2,4]}]'


def test_nan_and_null() -> None:
    a = as_json([math.nan, 1.0])
    b = as_json([1.0, math.inf])
    assert str(interpolate(a, b, 0.5)) == '[null,null]'


def test_mismatch_paths() -> None:
    a = as_json(_model(1.0), Model)
    model = _model(1.0)
    model.layers[1].weights = np.zeros(4, dtype=np.float32)
    b = as_json(model, Model)
    with pytest.raises(ShapeMismatchError) as exc_info:
        interpolate(a, b, 0.5)
    assert exc_info.value.path == 'layers[1].weights'

    model = _model(1.0)
    model.layers.append(model.layers[0])
    with pytest.raises(ShapeMismatchError) as exc_info:
        interpolate(a, as_json(model, Model), 0.5)
    assert exc_info.value.path == 'layers'

    with pytest.raises(ShapeMismatchError) as exc_info:
        add_gradient(as_json({'a': 1, 'b': 2}), as_json({'a': 1, 'c': 2}), 1.0)
    assert exc_info.value.path == ''
    assert 'b, c' in str(exc_info.value)

    with pytest.raises(ShapeMismatchError) as exc_info:
        add_gradient(as_json({'a': [1]}), as_json({'a': ['x']}), 1.0)
    assert exc_info.value.path == 'a[0]'


def test_booleans_are_not_numbers() -> None:
    with pytest.raises(ShapeMismatchError):
        interpolate(as_json([True]), as_json([1]), 0.5)
    assert str(interpolate(as_json([True]), as_json([False]), 1.0)) == '[true]'


def test_result_shares_blobs() -> None:
    store = MemoryBlobStore()
    a = as_json({'w': np.zeros(32)}, blobs=store)
    b = as_json({'w': np.ones(32)}, blobs=store)
    result = interpolate(a, b, 0.25)
    assert result.blobs is store
    assert str(result) == '{"w":{"dtype":"<f8","shape":[32],"blob":[512,256]}}'
    np.testing.assert_array_equal(from_json(result, dict[str, np.ndarray]).unwrap()['w'], np.full(32, 0.25))


def test_large_integers_are_exact() -> None:
    big = 2**60 + 1
    a = as_json({'step': big, 'w': np.array([big, -big], dtype=np.int64)})
    grad = as_json({'step': 1, 'w': np.array([1, 1], dtype=np.int64)})
    assert add_gradient(a, grad, 0.0) == a
    combined = from_json(add_gradient(a, grad, 1.0), Any).unwrap()
    assert combined['step'] == big + 1
    assert combined['w'].tolist() == [big + 1, -big + 1]

    b = as_json({'step': big + 2, 'w': np.array([big + 2, 3], dtype=np.int64)})
    assert interpolate(a, b, 0.0) == a
    assert interpolate(a, b, 1.0) == b
    assert from_json(interpolate(a, b, 0.5), Any).unwrap()['step'] == big + 1


def test_unsigned_arrays_move_down() -> None:
    a = as_json([np.array([2**63 + 5, 10], dtype=np.uint64)])
    grad = as_json([np.array([2, 3], dtype=np.uint64)])
    assert from_json(add_gradient(a, grad, -1.0), Any).unwrap()[0].tolist() == [2**63 + 3, 7]


def test_zero_weight_ignores_null() -> None:
    a = as_json({'n': 3, 'x': 1.5})
    b = as_json({'n': None, 'x': math.nan})
    assert interpolate(a, b, 0.0) == a
    assert add_gradient(a, b, 0.0) == a
    assert str(interpolate(b, a, 1.0)) == '{"n":3,"x":1.5}'


def test_null_cannot_be_merged_into_integers() -> None:
    a = as_json({'n': 3, 'x': 1.5})
    with pytest.raises(ShapeMismatchError) as exc_info:
        interpolate(a, as_json({'n': None, 'x': 2.5}), 0.5)
    assert exc_info.value.path == 'n'

    a = as_json({'w': np.array([1, 2], dtype=np.int32)})
    b = as_json({'w': np.array([1.0, math.nan])})
    with pytest.raises(ShapeMismatchError) as exc_info:
        add_gradient(a, b, 1.0)
    assert exc_info.value.path == 'w'


def test_integer_leaf_facing_float_leaf() -> None:
    # the integer leaf of the first operand stays an integer, even at the far boundary
    assert str(interpolate(as_json({'n': 1}), as_json({'n': 2.5}), 1.0)) == '{"n":2}'
    assert str(interpolate(as_json({'n': 1.0}), as_json({'n': 2}), 1.0)) == '{"n":2}'


def test_non_finite_factor() -> None:
    a = as_json([1.0])
    with pytest.raises(ValueError):
        interpolate(a, a, math.nan)
    with pytest.raises(ValueError):
        add_gradient(a, a, math.inf)
