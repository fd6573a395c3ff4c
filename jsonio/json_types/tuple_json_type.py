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

from collections.abc import Iterable
from typing import Any, get_args, get_origin

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.compound_encoding.collection import (
    iter_array,
    read_array,
    size_array,
    write_array,
)


# XXX: we can't usefully describe the tuple type
class TupleJsonType(JsonType[tuple]):
    """ Represents tuple values, which can either be homogeneous-type variable size or heterogeneous-type fixed size.

    Both are written as a JSON array, a fixed size tuple must be read back from an array with exactly as many items.
    """

    __slots__ = ('_varsize', '_args')

    _varsize: bool
    _args: tuple[JsonType, ...]

    def __init__(self, args: JsonType | Iterable[JsonType]) -> None:
        if isinstance(args, JsonType):
            self._varsize = True
            self._args = (args,)
        else:
            self._varsize = False
            self._args = tuple(args)
            for arg in self._args:
                assert isinstance(arg, JsonType)

    def __repr__(self) -> str:
        if self._varsize:
            return f'TupleJsonType({self._args[0]!r}, ...)'
        return f'TupleJsonType({", ".join(map(repr, self._args))})'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, tuple):
            raise TypeError('expected tuple type')
        if type_ is origin_type:
            raise TypeError('expected tuple[<args...>]')
        args = list(get_args(type_))
        if args and args[-1] is Ellipsis:
            if len(args) != 2:
                raise TypeError('ellipsis only allowed with one type: tuple[T, ...]')
            arg, _ellipsis = args
            return cls(JsonType.from_type(arg, type_map=type_map))
        else:
            return cls(JsonType.from_type(arg, type_map=type_map) for arg in args)

    @override
    def _check_value(self, value: tuple, /, *, deep: bool) -> None:
        if not isinstance(value, (tuple, list)):
            raise TypeError(f'expected tuple, got {type(value).__name__}')
        if not self._varsize and len(value) != len(self._args):
            raise TypeError(f'wrong tuple size, expected {len(self._args)} got {len(value)}')
        if deep:
            if self._varsize:
                arg_json_type, = self._args
                for i in value:
                    arg_json_type._check_value(i, deep=True)
            else:
                for i, arg_json_type in zip(value, self._args):
                    arg_json_type._check_value(i, deep=True)

    @override
    def _size(self, ctx: WriteContext, value: tuple, /) -> int:
        if self._varsize:
            return size_array(ctx, value, self._args[0].size)
        return size_array(ctx, range(len(value)), lambda ctx, i: self._args[i].size(ctx, value[i]))

    @override
    def _write(self, ctx: WriteContext, value: tuple, /) -> None:
        if self._varsize:
            write_array(ctx, value, self._args[0].write)
        else:
            write_array(ctx, range(len(value)), lambda ctx, i: self._args[i].write(ctx, value[i]))

    @override
    def _read(self, ctx: ReadContext, /) -> tuple:
        if self._varsize:
            return read_array(ctx, self._args[0].read, tuple)
        args = iter(self._args)

        def read_item(ctx: ReadContext) -> Any:
            arg_json_type = next(args, None)
            if arg_json_type is None:
                raise ctx.type_error(f'too many items, expected {len(self._args)}')
            return arg_json_type.read(ctx)

        items = tuple(iter_array(ctx, read_item))
        if len(items) != len(self._args):
            raise ctx.type_error(f'too few items, expected {len(self._args)} got {len(items)}')
        return items
