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

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.encoding.utf8 import read_utf8, size_utf8, write_utf8
from jsonio.utils.typing import is_subclass


class StrJsonType(JsonType[str]):
    """ Represents builtin `str` values.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[str], /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, str):
            raise TypeError('expected str type')
        return cls()

    @override
    def _check_value(self, value: str, /, *, deep: bool) -> None:
        if not isinstance(value, str):
            raise TypeError(f'expected str, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: str, /) -> int:
        return size_utf8(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: str, /) -> None:
        write_utf8(ctx, value)

    @override
    def _read(self, ctx: ReadContext, /) -> str:
        return read_utf8(ctx)
