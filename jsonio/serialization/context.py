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
The two context objects that are threaded through every size/write/read call of the type dispatch tree.

A `WriteContext` is created once per top-level encode and serves both passes:

1. sizing: `JsonType.size` walks the value and returns the exact length; blob payloads that will be moved to the blob
   store are only *predicted* (`WriteContext.predict_blob`), the store itself is never touched;
2. writing: `to_json` allocates the target buffer with `EncodedValue.start_write`, attaches it with
   `WriteContext.begin` and `JsonType.write` fills it; blob payloads are now appended for real and the handle returned
   by the store must be the one that was predicted, since its textual length was already accounted for.

A `ReadContext` is created once per top-level decode, it holds the source text and a cursor into it, the blob store to
resolve handles against and the leniency flag.

Neither context is safe for concurrent use, each top-level call must own its own.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonio.serialization.consts import JSON_WHITESPACE
from jsonio.serialization.exceptions import (
    BlobError,
    JsonSyntaxError,
    JsonTypeError,
    MissingBlobStoreError,
    SizeMismatchError,
)

if TYPE_CHECKING:
    from jsonio.blobs import BlobHandle, BlobStore

_decoder = json.JSONDecoder()


class WriteContext:
    __slots__ = ('blobs', 'size', 'pos', 'blob_end', 'blob_threshold', 'check_sizes', '_buffer')

    blobs: BlobStore | None
    # total length computed by the sizing pass
    size: int
    # current write position, only meaningful during the writing pass
    pos: int
    # predicted (sizing pass) or actual (writing pass) end of the blob store
    blob_end: int
    blob_threshold: int
    check_sizes: bool

    def __init__(
        self,
        blobs: BlobStore | None = None,
        *,
        blob_threshold: int | None = None,
        check_sizes: bool | None = None,
    ) -> None:
        from jsonio.conf.get_settings import get_global_settings
        settings = get_global_settings()
        self.blobs = blobs
        self.size = 0
        self.pos = 0
        self.blob_threshold = settings.BLOB_THRESHOLD if blob_threshold is None else blob_threshold
        self.check_sizes = settings.SLOW_ASSERTS if check_sizes is None else check_sizes
        self._buffer: memoryview | None = None
        self.rewind_blobs()

    def rewind_blobs(self) -> None:
        """Reset the blob prediction to the current end of the blob store."""
        self.blob_end = self.blobs.end_offset() if self.blobs is not None else 0

    def use_blob_for(self, nbytes: int) -> bool:
        """Whether a binary payload of `nbytes` goes to the blob store instead of being inlined."""
        return self.blobs is not None and nbytes > self.blob_threshold

    def predict_blob(self, nbytes: int) -> BlobHandle:
        """Return the handle the next append of `nbytes` will produce, and account for it."""
        from jsonio.blobs import BlobHandle
        handle = BlobHandle(self.blob_end, nbytes)
        self.blob_end += nbytes
        return handle

    def begin(self, buffer: memoryview) -> None:
        """Attach the pre-sized output buffer, this starts the writing pass."""
        if len(buffer) != self.size:
            raise SizeMismatchError(f'buffer has {len(buffer)} bytes but {self.size} were computed')
        self._buffer = buffer
        self.pos = 0
        self.rewind_blobs()

    def write(self, text: str) -> None:
        self.write_bytes(text.encode('utf-8'))

    def write_bytes(self, data: bytes) -> None:
        if self._buffer is None:
            raise RuntimeError('writing pass was not started')
        end = self.pos + len(data)
        if end > self.size:
            raise SizeMismatchError(f'write past the end of the buffer ({end} > {self.size})')
        self._buffer[self.pos:end] = data
        self.pos = end

    def append_blob(self, data: bytes | memoryview) -> BlobHandle:
        """Append a payload to the blob store, checking the handle against the sizing pass prediction."""
        if self.blobs is None:
            raise RuntimeError('no blob store attached')
        expected = self.predict_blob(memoryview(data).nbytes)
        handle = self.blobs.append(data)
        if handle != expected:
            raise SizeMismatchError(f'blob store returned {handle}, expected {expected}')
        return handle


class ReadContext:
    __slots__ = ('text', 'pos', 'blobs', 'no_type_check')

    text: str
    pos: int
    blobs: BlobStore | None
    no_type_check: bool

    def __init__(self, text: str, *, blobs: BlobStore | None = None, no_type_check: bool = False) -> None:
        self.text = text
        self.pos = 0
        self.blobs = blobs
        self.no_type_check = no_type_check

    def syntax_error(self, message: str) -> JsonSyntaxError:
        return JsonSyntaxError(message, pos=self.pos)

    def type_error(self, message: str) -> JsonTypeError:
        return JsonTypeError(message, pos=self.pos)

    def skip_ws(self) -> None:
        text = self.text
        pos = self.pos
        end = len(text)
        while pos < end and text[pos] in JSON_WHITESPACE:
            pos += 1
        self.pos = pos

    def peek(self) -> str:
        """Skip whitespace and return the next character without consuming it, '' at the end of the text."""
        self.skip_ws()
        return self.text[self.pos:self.pos + 1]

    def consume(self, token: str) -> bool:
        """Skip whitespace and consume `token` if it comes next."""
        self.skip_ws()
        if self.text.startswith(token, self.pos):
            self.pos += len(token)
            return True
        return False

    def expect(self, token: str) -> None:
        if not self.consume(token):
            found = self.text[self.pos:self.pos + 1] or 'end of text'
            raise self.type_error(f'expected {token!r}, found {found!r}')

    def skip_value(self) -> tuple[int, int]:
        """Consume one complete JSON value of any kind and return its (start, end) span in the text."""
        self.skip_ws()
        start = self.pos
        try:
            _, end = _decoder.raw_decode(self.text, start)
        except json.JSONDecodeError as e:
            raise JsonSyntaxError(e.msg, pos=e.pos) from e
        self.pos = end
        return start, end

    def read_blob(self, handle: BlobHandle) -> bytes:
        if self.blobs is None:
            raise MissingBlobStoreError(f'cannot resolve {handle}, no blob store available', pos=self.pos)
        try:
            data = self.blobs.read(handle)
        except (IndexError, ValueError) as e:
            raise BlobError(f'cannot resolve {handle}: {e}', pos=self.pos) from e
        if len(data) != handle.length:
            raise BlobError(f'short read for {handle}', pos=self.pos)
        return data

    def finalize(self) -> None:
        """Check that only whitespace is left after the value that was read."""
        self.skip_ws()
        if self.pos != len(self.text):
            raise self.syntax_error('trailing data')
