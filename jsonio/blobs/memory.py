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

from structlog import get_logger

from .base import BlobHandle, BlobStore

logger = get_logger()


class MemoryBlobStore(BlobStore):
    """Blob store backed by a `bytearray`, mostly useful for tests and for values that are never persisted."""

    def __init__(self) -> None:
        self.log = logger.new()
        self._data = bytearray()

    def end_offset(self) -> int:
        return len(self._data)

    def append(self, data: bytes | memoryview) -> BlobHandle:
        handle = BlobHandle(len(self._data), memoryview(data).nbytes)
        self._data += data
        self.log.debug('blob appended', offset=handle.offset, length=handle.length)
        return handle

    def read(self, handle: BlobHandle) -> bytes:
        self._check_handle(handle)
        return bytes(self._data[handle.offset:handle.offset + handle.length])

    def __repr__(self) -> str:
        return f'MemoryBlobStore(size={len(self._data)})'
