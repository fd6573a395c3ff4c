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
from jsonio.serialization.encoding.number import read_float, size_float, write_float
from jsonio.utils.typing import is_subclass


class FloatJsonType(JsonType[float]):
    """ Represents builtin `float` values.

    Integers are accepted where a float is expected, both when writing (`3` is written as `3.0`) and when reading.
    NaN and infinities are written as `null`, which is read back as NaN.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[float], /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, (float, np.floating)):
            raise TypeError('expected float type')
        return cls()

    @override
    def _check_value(self, value: float, /, *, deep: bool) -> None:
        if not isinstance(value, (float, int, np.floating, np.integer)) or isinstance(value, bool):
            raise TypeError(f'expected a number, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: float, /) -> int:
        return size_float(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: float, /) -> None:
        write_float(ctx, value)

    @override
    def _read(self, ctx: ReadContext, /) -> float:
        return read_float(ctx)
