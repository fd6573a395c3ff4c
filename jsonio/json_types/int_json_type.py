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

import numpy as np
from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.encoding.number import read_int, size_int, write_int
from jsonio.utils.typing import is_subclass


class IntJsonType(JsonType[int]):
    """ Represents builtin `int` values, numpy integers are accepted when writing and read back as `int`.

    Booleans are not integers here, even though `bool` is a subclass of `int`.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[int], /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, (int, np.integer)) or is_subclass(type_, bool):
            raise TypeError('expected int type')
        return cls()

    @override
    def _check_value(self, value: int, /, *, deep: bool) -> None:
        if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
            raise TypeError(f'expected integer, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: int, /) -> int:
        return size_int(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: int, /) -> None:
        write_int(ctx, value)

    @override
    def _read(self, ctx: ReadContext, /) -> int:
        return read_int(ctx)
