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

import abc
from typing import NamedTuple


class BlobHandle(NamedTuple):
    """Position of one payload inside a blob store."""
    offset: int
    length: int


class BlobStore(abc.ABC):
    """Append-only binary store.

    Appending must place the payload right at `end_offset()`, this is what allows the sizing pass of an encoder to
    predict the handles (and so the text length) of the payloads it will append. Only a single appender per store is
    supported, concurrent readers are fine.
    """

    @abc.abstractmethod
    def end_offset(self) -> int:
        """Offset at which the next payload will be appended."""
        raise NotImplementedError

    @abc.abstractmethod
    def append(self, data: bytes | memoryview) -> BlobHandle:
        raise NotImplementedError

    @abc.abstractmethod
    def read(self, handle: BlobHandle) -> bytes:
        """Read the payload of a handle, raises `ValueError` if the handle is not inside the store."""
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> BlobStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _check_handle(self, handle: BlobHandle) -> None:
        if handle.offset < 0 or handle.length < 0 or handle.offset + handle.length > self.end_offset():
            raise ValueError(f'{handle} is out of bounds, store has {self.end_offset()} bytes')
