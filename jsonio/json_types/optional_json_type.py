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

from __future__ import annotations

from types import NoneType, UnionType
from typing import Any, TypeVar, Union, get_args, get_origin

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.compound_encoding.optional import read_optional, size_optional, write_optional

V = TypeVar('V')


class OptionalJsonType(JsonType[V | None]):
    """ Represents a json_type that is either `V` or `None`.

    Only unions of exactly one type with `None` are supported, `int | str` has no unambiguous JSON encoding.
    """

    __slots__ = ('_value',)

    _value: JsonType[V]

    def __init__(self, json_type: JsonType[V]) -> None:
        self._value = json_type

    def __repr__(self) -> str:
        return f'OptionalJsonType({self._value!r})'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if get_origin(type_) not in (Union, UnionType):
            raise TypeError('expected type union')
        args = get_args(type_)
        assert args, 'union always has args'
        if len(args) != 2 or NoneType not in args:
            raise TypeError('type must be either `None | T` or `T | None`')
        not_none_type, = tuple(set(args) - {NoneType})  # get the type that is not None
        return cls(JsonType.from_type(not_none_type, type_map=type_map))

    @override
    def _check_value(self, value: V | None, /, *, deep: bool) -> None:
        if value is None:
            return
        self._value._check_value(value, deep=deep)

    @override
    def _size(self, ctx: WriteContext, value: V | None, /) -> int:
        return size_optional(ctx, value, self._value.size)

    @override
    def _write(self, ctx: WriteContext, value: V | None, /) -> None:
        write_optional(ctx, value, self._value.write)

    @override
    def _read(self, ctx: ReadContext, /) -> V | None:
        return read_optional(ctx, self._value.read)
