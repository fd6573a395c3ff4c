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
`typing.Any` is resolved at runtime.

When writing, the JsonType is chosen from the type of each value: lists, tuples and sets become arrays of `Any`, dicts
become objects of `Any` and everything else is resolved through the same type map, so dataclasses, enums and arrays in
an `Any` position are written exactly like they would be with a precise annotation.

When reading there is no type to guide the decoding, so a generic tree is built: objects become `dict`, arrays become
`list`, and the JSON scalars become `None`, `bool`, `int`, `float` and `str`. Two kinds of objects are recognized:
array descriptors (`{"dtype":..,"shape":..,"data"|"blob":..}`) are decoded to `numpy.ndarray` and blob references
(`{"blob":[offset,length]}`) are decoded to `bytes`. An object that only looks like an array descriptor, for instance
with an unknown dtype, stays a `dict`, so every dict written through `Any` reads back as the same dict.
"""

from __future__ import annotations

import json
from types import NoneType
from typing import Any

from typing_extensions import Self, override

from jsonio.json_types.bool_json_type import BoolJsonType
from jsonio.json_types.bytes_json_type import BytesJsonType
from jsonio.json_types.collection_json_type import ListJsonType
from jsonio.json_types.float_json_type import FloatJsonType
from jsonio.json_types.int_json_type import IntJsonType
from jsonio.json_types.json_type import JsonType
from jsonio.json_types.map_json_type import DictJsonType
from jsonio.json_types.ndarray_json_type import DATA_KEY, DTYPE_KEY, SHAPE_KEY, NDArrayJsonType
from jsonio.json_types.null_json_type import NullJsonType
from jsonio.json_types.str_json_type import StrJsonType
from jsonio.json_types.utils import is_namedtuple_class
from jsonio.serialization import JsonTypeError, ReadContext, WriteContext
from jsonio.serialization.compound_encoding.mapping import iter_object_keys
from jsonio.serialization.consts import BLOB_KEY
from jsonio.serialization.encoding.number import read_number
from jsonio.serialization.encoding.utf8 import read_string_token

_ARRAY_KEY_SETS = (
    frozenset({DTYPE_KEY, SHAPE_KEY, DATA_KEY}),
    frozenset({DTYPE_KEY, SHAPE_KEY, BLOB_KEY}),
)
_BLOB_KEY_SET = frozenset({BLOB_KEY})


class AnyJsonType(JsonType[Any]):
    """ Represents values of any supported type, dispatching on the runtime type.
    """

    __slots__ = ('_type_map', '_array', '_object', '_ndarray', '_bytes', '_by_type')

    _type_map: JsonType.TypeMap
    # cache of the JsonType resolved for each runtime type
    _by_type: dict[type, JsonType]

    def __init__(self, type_map: JsonType.TypeMap) -> None:
        self._type_map = type_map
        self._array = ListJsonType(self)
        self._object = DictJsonType(self)
        self._ndarray = NDArrayJsonType()
        self._bytes = BytesJsonType()
        self._by_type = {
            NoneType: NullJsonType(),
            bool: BoolJsonType(),
            int: IntJsonType(),
            float: FloatJsonType(),
            str: StrJsonType(),
            bytes: self._bytes,
        }

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if type_ is not Any:
            raise TypeError('expected typing.Any')
        return cls(type_map)

    def _dispatch(self, value: Any) -> JsonType:
        value_type = type(value)
        json_type = self._by_type.get(value_type)
        if json_type is not None:
            return json_type
        if isinstance(value, dict):
            return self._object
        if isinstance(value, (list, tuple, set, frozenset)) and not is_namedtuple_class(value_type):
            return self._array
        json_type = JsonType.from_type(value_type, type_map=self._type_map)
        self._by_type[value_type] = json_type
        return json_type

    @override
    def _check_value(self, value: Any, /, *, deep: bool) -> None:
        if deep:
            self._dispatch(value)._check_value(value, deep=True)

    @override
    def _size(self, ctx: WriteContext, value: Any, /) -> int:
        return self._dispatch(value).size(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: Any, /) -> None:
        self._dispatch(value).write(ctx, value)

    @override
    def _read(self, ctx: ReadContext, /) -> Any:
        char = ctx.peek()
        if char == '{':
            return self._read_object(ctx)
        if char == '[':
            return self._array.read(ctx)
        if char == '"':
            return read_string_token(ctx)
        if ctx.consume('null'):
            return None
        if ctx.consume('true'):
            return True
        if ctx.consume('false'):
            return False
        if not char:
            raise ctx.syntax_error('unexpected end of text')
        return read_number(ctx)

    def _read_object(self, ctx: ReadContext) -> Any:
        start = ctx.pos
        spans: dict[str, tuple[int, int]] = {}
        duplicated = False
        for key in iter_object_keys(ctx):
            duplicated |= key in spans
            spans[key] = ctx.skip_value()
        ctx.pos = start
        if not duplicated and self._is_array_descriptor(ctx, spans):
            try:
                return self._ndarray.read(ctx)
            except JsonTypeError:
                # not a valid descriptor after all, it is read as a plain object
                ctx.pos = start
        if not duplicated and self._is_blob_reference(ctx, spans):
            return self._bytes.read(ctx)
        return self._object.read(ctx)

    def _is_array_descriptor(self, ctx: ReadContext, spans: dict[str, tuple[int, int]]) -> bool:
        if frozenset(spans) not in _ARRAY_KEY_SETS:
            return False
        dtype_start, _ = spans[DTYPE_KEY]
        return ctx.text.startswith('"', dtype_start)

    def _is_blob_reference(self, ctx: ReadContext, spans: dict[str, tuple[int, int]]) -> bool:
        if frozenset(spans) != _BLOB_KEY_SET:
            return False
        handle = json.loads(ctx.text[slice(*spans[BLOB_KEY])])
        return (
            isinstance(handle, list)
            and len(handle) == 2
            and all(type(i) is int and i >= 0 for i in handle)
        )
