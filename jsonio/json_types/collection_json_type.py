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
from collections import deque
from collections.abc import Collection, Hashable, Iterable, Set
from typing import Any, TypeVar, get_args, get_origin

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.json_types.utils import is_origin_hashable, pretty_type
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.compound_encoding.collection import read_array, size_array, write_array

T = TypeVar('T')
H = TypeVar('H', bound=Hashable)


class _CollectionJsonType(JsonType[Collection[T]], ABC):
    """ Used as base for JsonType classes that represent collections, all of them are written as JSON arrays.
    """
    __slots__ = ('_item',)

    _item: JsonType[T]

    def __init__(self, item_json_type: JsonType[T], /) -> None:
        self._item = item_json_type

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._item!r})'

    @abstractmethod
    def _build(self, items: Iterable[T]) -> Collection[T]:
        """ How to build the concrete collection from an iterable of items.
        """
        raise NotImplementedError

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        member_type = cls._get_member_type(type_)
        member_json_type = JsonType.from_type(member_type, type_map=type_map)
        return cls(member_json_type)

    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Collection):
            raise TypeError('expected Collection type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeError(f'expected {pretty_type(origin_type)}[<type>]')
        return args[0]

    def _check_item(self, item: T) -> None:
        self._item._check_value(item, deep=True)

    def _iter_items(self, value: Collection[T]) -> Iterable[T]:
        """ Items in the order they are written, which must be the same in the sizing and the writing pass.
        """
        return value

    @override
    def _check_value(self, value: Collection[T], /, *, deep: bool) -> None:
        if not isinstance(value, Collection) or isinstance(value, (str, bytes, bytearray)):
            raise TypeError(f'expected a collection, got {type(value).__name__}')
        if deep:
            for i in value:
                self._check_item(i)

    @override
    def _size(self, ctx: WriteContext, value: Collection[T], /) -> int:
        return size_array(ctx, self._iter_items(value), self._item.size)

    @override
    def _write(self, ctx: WriteContext, value: Collection[T], /) -> None:
        write_array(ctx, self._iter_items(value), self._item.write)

    @override
    def _read(self, ctx: ReadContext, /) -> Collection[T]:
        return read_array(ctx, self._item.read, self._build)


class ListJsonType(_CollectionJsonType[T]):
    """ Represents builtin `list` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> list[T]:
        return list(items)


class DequeJsonType(_CollectionJsonType[T]):
    """ Represents builtin `collections.deque` values.
    """

    @override
    def _build(self, items: Iterable[T]) -> deque[T]:
        return deque(items)


class SetJsonType(_CollectionJsonType[H]):
    """ Represents builtin `set` values.

    Members are written sorted when they can be compared, so that equal sets always have the same encoding.
    """

    @override
    def _build(self, items: Iterable[H]) -> Set[H]:
        return set(items)

    @override
    @classmethod
    def _get_member_type(cls, type_: Any) -> Any:
        origin_type: type = get_origin(type_) or type_
        if not issubclass(origin_type, Set):
            raise TypeError('expected Set type')
        args = get_args(type_)
        if not args or len(args) != 1:
            raise TypeError(f'expected {pretty_type(origin_type)}[<type>]')
        member_type, = args
        if not is_origin_hashable(member_type):
            raise TypeError(f'{pretty_type(member_type)} is not hashable')
        return member_type

    @override
    def _check_item(self, item: H) -> None:
        if not isinstance(item, Hashable):
            raise TypeError('expected Hashable type')
        super()._check_item(item)

    @override
    def _iter_items(self, value: Collection[H]) -> Iterable[H]:
        try:
            return sorted(value)  # type: ignore[type-var]
        except TypeError:
            return list(value)


class FrozenSetJsonType(SetJsonType[H]):
    """ Represents builtin `frozenset` values.
    """

    @override
    def _build(self, items: Iterable[H]) -> frozenset[H]:
        return frozenset(items)
