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

import os
import tempfile
from typing import BinaryIO

from structlog import get_logger

from .base import BlobHandle, BlobStore

logger = get_logger()


class ChunkFileBlobStore(BlobStore):
    """ Blob store backed by a single append-only file.

    Payloads are written back to back, a handle is simply the byte range inside the file. The file is kept open for
    the lifetime of the store, use `close()` or a `with` block to release it.
    """

    def __init__(self, path: str | os.PathLike[str], *, readonly: bool = False) -> None:
        self.log = logger.new(path=os.fspath(path))
        self.path = os.fspath(path)
        self.readonly = readonly
        # We have to keep a reference to the TemporaryDirectory because it is cleaned up when garbage collected.
        self._temp_dir: tempfile.TemporaryDirectory | None = None
        mode = 'rb' if readonly else 'a+b'
        self._file: BinaryIO | None = open(self.path, mode)
        self._end = os.fstat(self._file.fileno()).st_size
        self.log.debug('open blob file', readonly=readonly, size=self._end)

    @staticmethod
    def create_temp() -> ChunkFileBlobStore:
        """Create a store in a temporary directory that is removed when the store is garbage collected."""
        temp_dir = tempfile.TemporaryDirectory()
        store = ChunkFileBlobStore(os.path.join(temp_dir.name, 'blobs.bin'))
        store._temp_dir = temp_dir
        return store

    def _get_file(self) -> BinaryIO:
        if self._file is None:
            raise ValueError(f'blob file {self.path} is closed')
        return self._file

    def end_offset(self) -> int:
        return self._end

    def append(self, data: bytes | memoryview) -> BlobHandle:
        if self.readonly:
            raise ValueError(f'blob file {self.path} was opened read-only')
        file = self._get_file()
        handle = BlobHandle(self._end, memoryview(data).nbytes)
        # XXX: the file is in append mode, writes always go to the end regardless of where the last read left it
        try:
            file.write(data)
            file.flush()
        except BaseException:
            # part of the payload may have reached the file, the next handles must start after it
            self._end = os.fstat(file.fileno()).st_size
            self.log.warn('blob append failed', offset=handle.offset, length=handle.length, size=self._end)
            raise
        self._end += handle.length
        self.log.debug('blob appended', offset=handle.offset, length=handle.length)
        return handle

    def read(self, handle: BlobHandle) -> bytes:
        self._check_handle(handle)
        file = self._get_file()
        file.seek(handle.offset)
        return file.read(handle.length)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self.log.debug('close blob file')

    def __repr__(self) -> str:
        return f'ChunkFileBlobStore({self.path!r}, size={self._end})'
