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

from typing import Any

from typing_extensions import Self, override

from jsonio.encoded import EncodedValue
from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.utils.typing import is_subclass


class EncodedJsonType(JsonType[EncodedValue]):
    """ Represents an already encoded value, its text is embedded as is.

    Blob handles inside the embedded text refer to the blob store of the embedded value, so it must be the same store
    the enclosing value is written with. When reading, the raw text of the value is captured and it shares the blob
    store of the enclosing value.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, EncodedValue):
            raise TypeError('expected EncodedValue type')
        return cls()

    @override
    def _check_value(self, value: EncodedValue, /, *, deep: bool) -> None:
        if not isinstance(value, EncodedValue):
            raise TypeError(f'expected EncodedValue, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: EncodedValue, /) -> int:
        if value.blobs is not None and value.blobs is not ctx.blobs:
            raise ValueError('embedded value uses a different blob store than the value being written')
        return len(value.text)

    @override
    def _write(self, ctx: WriteContext, value: EncodedValue, /) -> None:
        ctx.write_bytes(value.text)

    @override
    def _read(self, ctx: ReadContext, /) -> EncodedValue:
        start, end = ctx.skip_value()
        return EncodedValue(ctx.text[start:end].encode('utf-8'), ctx.blobs)
