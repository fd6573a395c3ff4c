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
Numpy arrays are written as a descriptor object holding the dtype (`numpy.dtype.str`, which includes the byte order),
the shape and either the flattened items in C order or a handle to the raw buffer in the blob store:

    {"dtype":"<f8","shape":[2,2],"data":[1.0,2.0,3.0,4.0]}
    {"dtype":"<f4","shape":[512,512],"blob":[0,1048576]}

The buffer goes to the blob store when one is attached and it is larger than the blob threshold. Only boolean, integer
and floating point arrays are supported.

A `NDArray[dtype]` annotation fixes the dtype, reading an array of a different dtype is an error unless type checks are
disabled, in which case it is cast. A plain `numpy.ndarray` annotation accepts any supported dtype.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, get_args, get_origin

import numpy as np
from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import JsonTypeError, ReadContext, WriteContext
from jsonio.serialization.compound_encoding.collection import iter_array, size_array, write_array
from jsonio.serialization.compound_encoding.mapping import iter_object_keys, key_literal
from jsonio.serialization.consts import BLOB_KEY
from jsonio.serialization.encoding.blob import read_blob_handle, size_blob_handle, write_blob_handle
from jsonio.serialization.encoding.bool import bool_literal
from jsonio.serialization.encoding.number import float_literal, int_literal, read_int, read_number
from jsonio.serialization.encoding.utf8 import read_string_token, string_literal

DTYPE_KEY = 'dtype'
SHAPE_KEY = 'shape'
DATA_KEY = 'data'

#: dtype kinds that can be written: boolean, signed and unsigned integers, floating point
SUPPORTED_KINDS = 'biuf'


def _item_literal(kind: str, item: Any) -> str:
    if kind == 'f':
        return float_literal(item)
    if kind == 'b':
        return bool_literal(item)
    return int_literal(item)


def _read_item(ctx: ReadContext) -> Any:
    if ctx.consume('null'):
        return math.nan
    if ctx.consume('true'):
        return True
    if ctx.consume('false'):
        return False
    return read_number(ctx)


def _read_dim(ctx: ReadContext) -> int:
    ctx.skip_ws()
    start = ctx.pos
    dim = read_int(ctx)
    if dim < 0:
        raise JsonTypeError('array dimensions must be non-negative', pos=start)
    return dim


class NDArrayJsonType(JsonType[np.ndarray]):
    """ Represents `numpy.ndarray` values, optionally of a fixed dtype.
    """

    __slots__ = ('_dtype',)

    _dtype: np.dtype | None

    def __init__(self, dtype: Any = None) -> None:
        self._dtype = None if dtype is None else np.dtype(dtype)
        if self._dtype is not None and self._dtype.kind not in SUPPORTED_KINDS:
            raise TypeError(f'unsupported array dtype {self._dtype}')

    def __repr__(self) -> str:
        return f'NDArrayJsonType({self._dtype})' if self._dtype is not None else 'NDArrayJsonType()'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not issubclass(origin_type, np.ndarray):
            raise TypeError('expected ndarray type')
        args = get_args(type_)
        if not args:
            return cls()
        # NDArray[X] is ndarray[<shape>, dtype[X]]
        dtype_arg = args[-1]
        scalar_args = get_args(dtype_arg)
        if get_origin(dtype_arg) is not np.dtype or len(scalar_args) != 1:
            raise TypeError(f'expected ndarray[<shape>, dtype[<scalar type>]], got {type_}')
        scalar_type, = scalar_args
        if scalar_type is Any:
            return cls()
        return cls(scalar_type)

    @override
    def _check_value(self, value: np.ndarray, /, *, deep: bool) -> None:
        if not isinstance(value, np.ndarray):
            raise TypeError(f'expected ndarray, got {type(value).__name__}')
        if value.dtype.kind not in SUPPORTED_KINDS:
            raise TypeError(f'unsupported array dtype {value.dtype}')
        if self._dtype is not None and value.dtype != self._dtype:
            raise TypeError(f'expected array of {self._dtype}, got {value.dtype}')

    def _header(self, value: np.ndarray) -> str:
        shape = '[' + ','.join(int_literal(dim) for dim in value.shape) + ']'
        dtype = string_literal(value.dtype.str)
        return '{' + key_literal(DTYPE_KEY) + dtype + ',' + key_literal(SHAPE_KEY) + shape + ','

    def _items(self, value: np.ndarray) -> Iterable[str]:
        kind = value.dtype.kind
        return (_item_literal(kind, item) for item in value.ravel().tolist())

    @override
    def _size(self, ctx: WriteContext, value: np.ndarray, /) -> int:
        size = len(self._header(value)) + 1
        if ctx.use_blob_for(value.nbytes):
            return size + len(key_literal(BLOB_KEY)) + size_blob_handle(ctx, value.nbytes)
        return size + len(key_literal(DATA_KEY)) + size_array(ctx, self._items(value), lambda ctx, text: len(text))

    @override
    def _write(self, ctx: WriteContext, value: np.ndarray, /) -> None:
        ctx.write(self._header(value))
        if ctx.use_blob_for(value.nbytes):
            ctx.write(key_literal(BLOB_KEY))
            write_blob_handle(ctx, value.tobytes(order='C'))
        else:
            ctx.write(key_literal(DATA_KEY))
            write_array(ctx, self._items(value), lambda ctx, text: ctx.write(text))
        ctx.write('}')

    @override
    def _read(self, ctx: ReadContext, /) -> np.ndarray:
        ctx.skip_ws()
        start = ctx.pos
        dtype: np.dtype | None = None
        shape: tuple[int, ...] | None = None
        items: list[Any] | None = None
        payload: bytes | None = None
        for key in iter_object_keys(ctx):
            if key == DTYPE_KEY and dtype is None:
                dtype_start = ctx.pos
                dtype_str = read_string_token(ctx)
                try:
                    dtype = np.dtype(dtype_str)
                except (TypeError, ValueError) as e:
                    raise JsonTypeError(f'invalid dtype {dtype_str!r}', pos=dtype_start) from e
                if dtype.kind not in SUPPORTED_KINDS:
                    raise JsonTypeError(f'unsupported array dtype {dtype}', pos=dtype_start)
            elif key == SHAPE_KEY and shape is None:
                shape = tuple(iter_array(ctx, _read_dim))
            elif key == DATA_KEY and items is None and payload is None:
                items = list(iter_array(ctx, _read_item))
            elif key == BLOB_KEY and items is None and payload is None:
                payload = ctx.read_blob(read_blob_handle(ctx))
            else:
                raise ctx.type_error(f'unexpected key {key!r} in array')
        if dtype is None or shape is None or (items is None and payload is None):
            raise JsonTypeError('array must have a dtype, a shape and either data or a blob', pos=start)
        count = math.prod(shape)
        if payload is not None:
            if len(payload) != count * dtype.itemsize:
                raise JsonTypeError(f'blob has {len(payload)} bytes, expected {count * dtype.itemsize}', pos=start)
            array = np.frombuffer(payload, dtype=dtype).reshape(shape).copy()
        else:
            assert items is not None
            if len(items) != count:
                raise JsonTypeError(f'array has {len(items)} items, expected {count}', pos=start)
            try:
                array = np.array(items, dtype=dtype).reshape(shape)
            except (ValueError, OverflowError) as e:
                raise JsonTypeError(f'invalid items for {dtype}: {e}', pos=start) from e
        if self._dtype is not None and array.dtype != self._dtype:
            if not ctx.no_type_check:
                raise JsonTypeError(f'expected array of {self._dtype}, got {array.dtype}', pos=start)
            array = array.astype(self._dtype)
        return array
