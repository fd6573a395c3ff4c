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

from abc import ABC, abstractmethod
from collections import OrderedDict
from collections.abc import Mapping
from typing import Any, Iterable, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.json_types.utils import pretty_type
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.compound_encoding.mapping import read_mapping, size_object, write_object
from jsonio.utils.typing import is_subclass

T = TypeVar('T')


class _MapJsonType(JsonType[Mapping[str, T]], ABC):
    """ Base class to help implement JsonType for mappings, they are written as JSON objects so keys must be `str`.
    """

    __slots__ = ('_value',)

    _value: JsonType[T]

    def __init__(self, value: JsonType[T]) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._value!r})'

    @abstractmethod
    def _build(self, items: Iterable[tuple[str, T]]) -> Mapping[str, T]:
        """ How to build the concrete map from an iterable of (key, value).
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Mapping):
            raise TypeError('expected Mapping type')
        args = get_args(type_)
        if not args or len(args) != 2:
            raise TypeError(f'expected {pretty_type(origin_type)}[<key type>, <value type>]')
        key_type, value_type = args
        if not is_subclass(key_type, str):
            raise TypeError(f'object keys must be str, not {pretty_type(key_type)}')
        return cls(JsonType.from_type(value_type, type_map=type_map))

    @override
    def _check_value(self, value: Mapping[str, T], /, *, deep: bool) -> None:
        if not isinstance(value, Mapping):
            raise TypeError(f'expected a mapping, got {type(value).__name__}')
        if deep:
            for k, v in value.items():
                if not isinstance(k, str):
                    raise TypeError(f'object keys must be str, got {type(k).__name__}')
                self._value._check_value(v, deep=True)

    @override
    def _size(self, ctx: WriteContext, value: Mapping[str, T], /) -> int:
        return size_object(ctx, value.items(), self._value.size)

    @override
    def _write(self, ctx: WriteContext, value: Mapping[str, T], /) -> None:
        write_object(ctx, value.items(), self._value.write)

    @override
    def _read(self, ctx: ReadContext, /) -> Mapping[str, T]:
        return read_mapping(ctx, self._value.read, self._build)


class DictJsonType(_MapJsonType[T]):
    """ Represents builtin `dict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[str, T]]) -> dict[str, T]:
        return dict(items)


class OrderedDictJsonType(_MapJsonType[T]):
    """ Represents `collections.OrderedDict` values.
    """

    @override
    def _build(self, items: Iterable[tuple[str, T]]) -> OrderedDict[str, T]:
        return OrderedDict(items)
