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

r"""
Blob handles, the textual stand-in for a binary payload that lives in the blob store.

A handle is written as the 2-element array `[offset,length]`. The offset of a handle is only known once the payload is
appended, which happens in the writing pass, so the sizing pass predicts it from the current end of the blob store
(see `WriteContext.predict_blob`) and the writing pass checks the store agrees.

>>> from jsonio.blobs import BlobHandle, MemoryBlobStore
>>> from jsonio.serialization import ReadContext, WriteContext
>>> store = MemoryBlobStore()
>>> _ = store.append(b'0123456789')
>>> ctx = WriteContext(store)
>>> size_blob_handle(ctx, 1000)  # '[10,1000]'
9
>>> handle_literal(BlobHandle(10, 1000))
'[10,1000]'
>>> read_blob_handle(ReadContext('[10, 1000]'))
BlobHandle(offset=10, length=1000)
"""

from jsonio.blobs import BlobHandle
from jsonio.serialization.context import ReadContext, WriteContext
from jsonio.serialization.encoding.number import read_number


def handle_literal(handle: BlobHandle) -> str:
    return f'[{handle.offset},{handle.length}]'


def size_blob_handle(ctx: WriteContext, nbytes: int) -> int:
    return len(handle_literal(ctx.predict_blob(nbytes)))


def write_blob_handle(ctx: WriteContext, data: bytes | memoryview) -> BlobHandle:
    handle = ctx.append_blob(data)
    ctx.write(handle_literal(handle))
    return handle


def _read_non_negative(ctx: ReadContext) -> int:
    ctx.skip_ws()
    start = ctx.pos
    value = read_number(ctx)
    if not isinstance(value, int) or value < 0:
        ctx.pos = start
        raise ctx.type_error('blob handle fields must be non-negative integers')
    return value


def read_blob_handle(ctx: ReadContext) -> BlobHandle:
    ctx.expect('[')
    offset = _read_non_negative(ctx)
    ctx.expect(',')
    length = _read_non_negative(ctx)
    ctx.expect(']')
    return BlobHandle(offset, length)
