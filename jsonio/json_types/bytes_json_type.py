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
Byte strings are written inline as base64 when they are small or when there is no blob store, otherwise the payload is
appended to the blob store and only its handle is written:

    "aGVsbG8="
    {"blob":[4096,70000]}
"""

from __future__ import annotations

from typing_extensions import Self, override

from jsonio.json_types.json_type import JsonType
from jsonio.serialization import ReadContext, WriteContext
from jsonio.serialization.compound_encoding.mapping import iter_object_keys, key_literal
from jsonio.serialization.consts import BLOB_KEY
from jsonio.serialization.encoding.blob import read_blob_handle, size_blob_handle, write_blob_handle
from jsonio.serialization.encoding.bytes import read_bytes, size_bytes, write_bytes
from jsonio.utils.typing import is_subclass

_BLOB_PREFIX = '{' + key_literal(BLOB_KEY)
_BLOB_SUFFIX = '}'


class BytesJsonType(JsonType[bytes]):
    """ Represents builtin `bytes` values, `bytearray` values are accepted when writing.
    """

    __slots__ = ()

    @override
    @classmethod
    def _from_type(cls, type_: type[bytes], /, *, type_map: JsonType.TypeMap) -> Self:
        if not is_subclass(type_, (bytes, bytearray)):
            raise TypeError('expected bytes type')
        return cls()

    @override
    def _check_value(self, value: bytes, /, *, deep: bool) -> None:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError(f'expected bytes, got {type(value).__name__}')

    @override
    def _size(self, ctx: WriteContext, value: bytes, /) -> int:
        if ctx.use_blob_for(len(value)):
            return len(_BLOB_PREFIX) + size_blob_handle(ctx, len(value)) + len(_BLOB_SUFFIX)
        return size_bytes(ctx, value)

    @override
    def _write(self, ctx: WriteContext, value: bytes, /) -> None:
        if ctx.use_blob_for(len(value)):
            ctx.write(_BLOB_PREFIX)
            write_blob_handle(ctx, value)
            ctx.write(_BLOB_SUFFIX)
        else:
            write_bytes(ctx, bytes(value))

    @override
    def _read(self, ctx: ReadContext, /) -> bytes:
        if ctx.peek() != '{':
            return read_bytes(ctx)
        return read_blob_object(ctx)


def read_blob_object(ctx: ReadContext) -> bytes:
    """ Read a `{"blob":[offset,length]}` object and resolve it against the blob store of the context.
    """
    data: bytes | None = None
    for key in iter_object_keys(ctx):
        if key != BLOB_KEY or data is not None:
            raise ctx.type_error(f'unexpected key {key!r} in blob reference')
        handle = read_blob_handle(ctx)
        data = ctx.read_blob(handle)
    if data is None:
        raise ctx.type_error('empty blob reference')
    return data
