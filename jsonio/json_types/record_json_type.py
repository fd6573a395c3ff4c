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
Records are classes with a fixed list of typed fields, dataclasses and named tuples. Both are written as a JSON object
with one key per field, in the order the fields are declared:

    @dataclass
    class Layer:
        name: str
        weights: NDArray[np.float32]
        bias: float = 0.0

    {"name":"dense","weights":{...},"bias":0.0}

When reading, keys can come in any order and unknown keys are skipped. A missing field is an error, unless reading
without type checks and the field has a default value.
"""

from __future__ import annotations

import dataclasses
from abc import ABC
from typing import Any, Callable, TypeVar, get_type_hints

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.json_types.utils import is_namedtuple_class
from jsonio.serialization import JsonTypeError, ReadContext, WriteContext
from jsonio.serialization.compound_encoding.mapping import iter_object_keys, size_object, write_object

R = TypeVar('R')


class _RecordJsonType(JsonType[R], ABC):
    __slots__ = ('_class', '_fields', '_defaults')

    _class: type[R]
    _fields: dict[str, JsonType]
    # factories for the default value of the fields that have one
    _defaults: dict[str, Callable[[], Any]]

    def __init__(self, class_: type[R], fields_: dict[str, JsonType], defaults: dict[str, Callable[[], Any]]) -> None:
        self._class = class_
        self._fields = fields_
        self._defaults = defaults

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._class.__name__})'

    @classmethod
    def _field_json_types(cls, class_: type, names: list[str], *, type_map: JsonType.TypeMap) -> dict[str, JsonType]:
        # XXX: get_type_hints resolves annotations written as strings (`from __future__ import annotations`)
        hints = get_type_hints(class_)
        return {name: JsonType.from_type(hints[name], type_map=type_map) for name in names}

    @override
    def _check_value(self, value: R, /, *, deep: bool) -> None:
        if not isinstance(value, self._class):
            raise TypeError(f'expected {self._class.__name__} instance, got {type(value).__name__}')
        if deep:
            for name, field_json_type in self._fields.items():
                field_json_type._check_value(getattr(value, name), deep=True)

    def _items(self, value: R) -> list[tuple[str, tuple[JsonType, Any]]]:
        return [(name, (field_json_type, getattr(value, name))) for name, field_json_type in self._fields.items()]

    @override
    def _size(self, ctx: WriteContext, value: R, /) -> int:
        return size_object(ctx, self._items(value), lambda ctx, item: item[0].size(ctx, item[1]))

    @override
    def _write(self, ctx: WriteContext, value: R, /) -> None:
        write_object(ctx, self._items(value), lambda ctx, item: item[0].write(ctx, item[1]))

    @override
    def _read(self, ctx: ReadContext, /) -> R:
        ctx.skip_ws()
        start = ctx.pos
        kwargs: dict[str, Any] = {}
        for key in iter_object_keys(ctx):
            field_json_type = self._fields.get(key)
            if field_json_type is None:
                ctx.skip_value()
                continue
            if key in kwargs:
                raise ctx.type_error(f'duplicate field {key!r}')
            kwargs[key] = field_json_type.read(ctx)
        for name in self._fields:
            if name in kwargs:
                continue
            if ctx.no_type_check and name in self._defaults:
                kwargs[name] = self._defaults[name]()
            else:
                raise JsonTypeError(f'missing field {name!r} of {self._class.__name__}', pos=start)
        try:
            return self._class(**kwargs)
        except (TypeError, ValueError) as e:
            raise JsonTypeError(f'cannot build {self._class.__name__}: {e}', pos=start) from e


class DataclassJsonType(_RecordJsonType[R]):
    """ Represents instances of a dataclass, only the fields that are part of `__init__` are written.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if not isinstance(type_, type) or not dataclasses.is_dataclass(type_):
            raise TypeError('expected a dataclass')
        # XXX: the order is important, `fields` returns them in declaration order
        init_fields = [field for field in dataclasses.fields(type_) if field.init]
        defaults: dict[str, Callable[[], Any]] = {}
        for field in init_fields:
            if field.default is not dataclasses.MISSING:
                defaults[field.name] = (lambda default: lambda: default)(field.default)
            elif field.default_factory is not dataclasses.MISSING:
                defaults[field.name] = field.default_factory
        names = [field.name for field in init_fields]
        return cls(type_, cls._field_json_types(type_, names, type_map=type_map), defaults)


class NamedTupleJsonType(_RecordJsonType[R]):
    """ Represents instances of a `typing.NamedTuple` class.
    """

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_namedtuple_class(type_):
            raise TypeError('expected NamedTuple type')
        names = list(type_._fields)
        defaults: dict[str, Callable[[], Any]] = {
            name: (lambda default: lambda: default)(default)
            for name, default in type_._field_defaults.items()
        }
        return cls(type_, cls._field_json_types(type_, names, type_map=type_map), defaults)
