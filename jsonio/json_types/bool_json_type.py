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
from jsonio.serialization.encoding.bool import read_bool, size_bool, write_bool


class BoolJsonType(JsonType[bool]):
    """ Represents builtin `bool` values (and numpy booleans).
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[bool], /, *, type_map: JsonType.TypeMap) -> Self:
        if type_ is not bool and type_ is not np.bool_:
            raise TypeError('expected bool type')
        return cls()

    @override
    def _check_value(self, value: bool, /, *, deep: bool) -> None:
        if not isinstance(value, (bool, np.bool_)):
            raise TypeError('expected boolean')

    @override
    def _size(self, ctx: WriteContext, value: bool, /) -> int:
        return size_bool(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: bool, /) -> None:
        write_bool(ctx, value)

    @override
    def _read(self, ctx: ReadContext, /) -> bool:
        return read_bool(ctx)
