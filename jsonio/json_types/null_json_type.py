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

from types import NoneType

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.consts import NULL_TEXT


class NullJsonType(JsonType[None]):
    """ Represents the `None` value, written as `null`.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[None], /, *, type_map: JsonType.TypeMap) -> Self:
        if type_ is not None and type_ is not NoneType:
            raise TypeError('expected None type')
        return cls()

    @override
    def _check_value(self, value: None, /, *, deep: bool) -> None:
        if value is not None:
            raise TypeError('expected None')

    @override
    def _size(self, ctx: WriteContext, value: None, /) -> int:
        return len(NULL_TEXT)

    @override
    def _write(self, ctx: WriteContext, value: None, /) -> None:
        ctx.write_bytes(NULL_TEXT)

    @override
    def _read(self, ctx: ReadContext, /) -> None:
        ctx.expect('null')
        return None
