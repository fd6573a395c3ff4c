# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Numeric combinators over encoded values.

Both operands are decoded as generic trees (`typing.Any`) and walked in parallel, every numeric leaf of the result is
computed from the two leaves at the same position and everything else is taken from the first operand. The trees must
have the same shape: the same keys in objects, the same lengths in arrays and the same shapes in numpy arrays.

Numeric leaves are ints, floats and numeric numpy arrays, booleans are not numeric. Integer leaves of the first operand
stay integers, so the result still decodes into the same typed structure as the first operand:

- integer scalars are computed exactly and rounded half to even, even above 2**53;
- integer arrays keep their dtype and move by a rounded step, float arrays keep the dtype of the first operand;
- a `null` (NaN) or infinite leaf that would have to be merged into an integer leaf raises `ShapeMismatchError`.

A leaf whose weight is zero never looks at the other operand, so `interpolate(a, b, 0)` and `add_gradient(a, g, 0)`
give back `a` and `interpolate(a, b, 1)` gives back `b`. The one exception is an integer leaf of `a` facing a
float leaf of `b`, which can only happen with untyped values: the result is `b`'s leaf rounded to an integer.

>>> a = as_json({'w': [1.0, 2.0], 'n': 10, 'name': 'a'})
>>> b = as_json({'w': [3.0, 4.0], 'n': 20, 'name': 'b'})
>>> str(interpolate(a, b, 0.5))
'{"w":[2.0,3.0],"n":15,"name":"a"}'
>>> str(add_gradient(a, b, -1.0))
'{"w":[-2.0,-2.0],"n":-10,"name":"a"}'
"""

import math
from fractions import Fraction
from typing import Any, NamedTuple

import numpy as np
from structlog import get_logger

from jsonio.api import as_json, from_json
from jsonio.encoded import EncodedValue

logger = get_logger()

_NUMERIC_KINDS = 'iuf'


class ShapeMismatchError(ValueError):
    """ The two operands of a numeric combinator do not have the same structure.

    `path` locates the first divergence, like `layers[2].weights`, it is empty for the root.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f'{path or "<root>"}: {message}')
        self.path = path


class _Blend(NamedTuple):
    """ Leaf arithmetic of a combinator: `x + factor * (y - x)` when `relative`, `x + factor * y` otherwise.
    """

    factor: float
    relative: bool

    def floats(self, x: Any, y: Any) -> Any:
        if self.relative:
            return (1 - self.factor) * x + self.factor * y
        return x + self.factor * y

    def step(self, x: Any, y: Any) -> Any:
        return self.factor * (y - x) if self.relative else self.factor * y

    def exact_step(self, x: int, y: int | float) -> Fraction:
        other = Fraction(y) - x if self.relative else Fraction(y)
        return Fraction(self.factor) * other

    @property
    def takes_other(self) -> bool:
        return self.relative and self.factor == 1


def interpolate(a: EncodedValue, b: EncodedValue, t: float) -> EncodedValue:
    """ Every numeric leaf becomes `(1 - t) * a + t * b`, so `t=0` gives `a` and `t=1` gives `b`.
    """
    if not math.isfinite(t):
        raise ValueError(f'interpolation factor must be finite, got {t}')
    return _combine(a, b, _Blend(t, relative=True))


def add_gradient(a: EncodedValue, grad: EncodedValue, rate: float) -> EncodedValue:
    """ Every numeric leaf becomes `a + rate * grad`.
    """
    if not math.isfinite(rate):
        raise ValueError(f'rate must be finite, got {rate}')
    return _combine(a, grad, _Blend(rate, relative=False))


def _combine(a: EncodedValue, b: EncodedValue, blend: _Blend) -> EncodedValue:
    tree_a = from_json(a, Any).unwrap_or_raise()
    tree_b = from_json(b, Any).unwrap_or_raise()
    result = _walk(tree_a, tree_b, blend, '')
    logger.debug('combined encoded values', size_a=len(a.text), size_b=len(b.text))
    return as_json(result, blobs=a.blobs)


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return 'bool'
    if value is None or isinstance(value, (int, float)):
        # XXX: null is a float that is not finite, NaN or infinity
        return 'number'
    if isinstance(value, np.ndarray):
        return 'array'
    if isinstance(value, dict):
        return 'object'
    if isinstance(value, list):
        return 'list'
    return type(value).__name__


def _walk(x: Any, y: Any, blend: _Blend, path: str) -> Any:
    kind = _kind(x)
    if kind != _kind(y):
        raise ShapeMismatchError(path, f'{kind} does not match {_kind(y)}')
    if kind == 'number':
        return _combine_numbers(x, y, blend, path)
    if kind == 'array':
        return _combine_arrays(x, y, blend, path)
    if kind == 'object':
        if x.keys() != y.keys():
            differing = sorted(x.keys() ^ y.keys())
            raise ShapeMismatchError(path, f'keys differ: {", ".join(differing)}')
        return {key: _walk(item, y[key], blend, f'{path}.{key}' if path else key) for key, item in x.items()}
    if kind == 'list':
        if len(x) != len(y):
            raise ShapeMismatchError(path, f'length {len(x)} does not match {len(y)}')
        return [_walk(item, other, blend, f'{path}[{i}]') for i, (item, other) in enumerate(zip(x, y))]
    return x


def _combine_numbers(x: int | float | None, y: int | float | None, blend: _Blend, path: str) -> int | float | None:
    if blend.factor == 0:
        return x
    if isinstance(x, int):
        if y is None or (isinstance(y, float) and not math.isfinite(y)):
            raise ShapeMismatchError(path, f'{"null" if y is None else y} cannot be combined into an integer')
        return round(x + blend.exact_step(x, y))
    if blend.takes_other:
        return y
    return blend.floats(math.nan if x is None else x, math.nan if y is None else y)


def _combine_arrays(x: np.ndarray, y: np.ndarray, blend: _Blend, path: str) -> np.ndarray:
    if x.shape != y.shape:
        raise ShapeMismatchError(path, f'shape {x.shape} does not match {y.shape}')
    if x.dtype.kind not in _NUMERIC_KINDS or y.dtype.kind not in _NUMERIC_KINDS:
        return x
    if blend.factor == 0:
        return x
    if blend.takes_other and y.dtype == x.dtype:
        return y
    if x.dtype.kind == 'f':
        return blend.floats(x.astype(np.float64), y.astype(np.float64)).astype(x.dtype)
    step = blend.step(x.astype(np.float64), y.astype(np.float64))
    if not np.isfinite(step).all():
        raise ShapeMismatchError(path, f'non-finite values cannot be combined into an array of {x.dtype}')
    return _shift(x, step)


def _shift(x: np.ndarray, step: np.ndarray) -> np.ndarray:
    """ Round `x + step` half to even without ever converting `x` itself to a float.

    Moving by an even number doesn't change how a tie rounds, so only the parity of `x` takes part in the rounding.
    """
    parity = (x % 2).astype(np.float64)
    moves = np.rint(parity + step) - parity
    magnitude = np.abs(moves).astype(x.dtype)
    return np.where(moves < 0, x - magnitude, x + magnitude).astype(x.dtype)
