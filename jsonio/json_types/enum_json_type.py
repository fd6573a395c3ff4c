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

import json
from enum import Enum
from typing import Any, TypeVar

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import JsonTypeError, ReadContext, WriteContext
from jsonio.serialization.encoding.utf8 import read_string_token, size_utf8, write_utf8
from jsonio.utils.typing import is_subclass

E = TypeVar('E', bound=Enum)


class EnumJsonType(JsonType[E]):
    """ Represents members of an `Enum` subclass (including `IntEnum` and `StrEnum`), written as the member name.

    Without type checks the member value is accepted as well.
    """

    __slots__ = ('enum_class',)

    def __init__(self, enum_class: type[E]) -> None:
        self.enum_class = enum_class

    def __repr__(self) -> str:
        return f'EnumJsonType({self.enum_class.__name__})'

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, Enum):
            raise TypeError('expected Enum subclass')
        return cls(type_)

    @override
    def _check_value(self, value: E, /, *, deep: bool) -> None:
        if not isinstance(value, self.enum_class):
            raise TypeError(f'expected {self.enum_class.__name__}, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: E, /) -> int:
        return size_utf8(ctx, value.name)

    @override
    def _write(self, ctx: WriteContext, value: E, /) -> None:
        write_utf8(ctx, value.name)

    @override
    def _read(self, ctx: ReadContext, /) -> E:
        ctx.skip_ws()
        start = ctx.pos
        if not ctx.no_type_check:
            name = read_string_token(ctx)
            member = self.enum_class.__members__.get(name)
            if member is None:
                raise JsonTypeError(f'invalid {self.enum_class.__name__} name: {name!r}', pos=start)
            return member
        begin, end = ctx.skip_value()
        raw = json.loads(ctx.text[begin:end])
        if isinstance(raw, str) and raw in self.enum_class.__members__:
            return self.enum_class.__members__[raw]
        try:
            return self.enum_class(raw)
        except (ValueError, TypeError) as e:
            raise JsonTypeError(f'invalid {self.enum_class.__name__} name or value: {raw!r}', pos=start) from e
