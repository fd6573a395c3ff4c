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
`EncodedValue` holds the JSON text of an encoded value together with a reference to the blob store its large binary
payloads were appended to.

The text is built in place: the encoder computes the exact size first, asks for a buffer of that size with
`start_write`, fills it and commits it with `end_write`. Until `end_write` succeeds the previous text is still the one
observed, so a failed encode never leaves a partial text behind.
"""

from __future__ import annotations

import contextlib
import gzip
import os
import zlib
from typing import Any, Optional, Union

from structlog import get_logger

from jsonio.blobs import BlobStore, ChunkFileBlobStore
from jsonio.serialization.consts import GZIP_MAGIC, NULL_TEXT
from jsonio.serialization.encoding.utf8 import string_literal
from jsonio.serialization.exceptions import PersistenceError, SizeMismatchError

logger = get_logger()

#: suffix appended to the path of compressed files
GZIP_SUFFIX = '.gz'

_REPR_PREVIEW = 60

StrPath = Union[str, os.PathLike]


class EncodedValue:
    __slots__ = ('text', 'blobs', '_pending')

    # XXX: the text can be rewritten, so it can't be used as a dict key
    __hash__ = None  # type: ignore[assignment]

    text: bytes
    blobs: Optional[BlobStore]
    _pending: Optional[bytearray]

    def __init__(self, text: bytes = NULL_TEXT, blobs: Optional[BlobStore] = None) -> None:
        self.text = text
        self.blobs = blobs
        self._pending = None

    def start_write(self, size: int) -> memoryview:
        """ Allocate a buffer of exactly `size` bytes for the next text and return a writable view of it.
        """
        if size < 0:
            raise ValueError('size must be non-negative')
        self._pending = bytearray(size)
        return memoryview(self._pending)

    def end_write(self, pos: int) -> None:
        """ Commit the buffer allocated by `start_write`, `pos` is where the writer stopped and must be its end.
        """
        pending = self._pending
        self._pending = None
        if pending is None:
            raise SizeMismatchError('end_write called without start_write')
        if pos != len(pending):
            raise SizeMismatchError(f'wrote {pos} bytes, {len(pending)} were allocated')
        self.text = bytes(pending)

    def abort_write(self) -> None:
        """ Drop the buffer allocated by `start_write`, keeping the current text.
        """
        self._pending = None

    def use_blobs(self, target: Union[BlobStore, StrPath]) -> None:
        """ Attach a blob store, either an existing one or a file store at the given path.
        """
        if isinstance(target, BlobStore):
            self.blobs = target
        else:
            self.blobs = ChunkFileBlobStore(target)

    def set_null(self) -> None:
        self.text = NULL_TEXT

    def is_null(self) -> bool:
        return self.text.strip() == NULL_TEXT

    def is_string(self, token: str) -> bool:
        """ Whether the text is exactly the JSON string `token`, without decoding it.
        """
        return self.text.strip() == string_literal(token).encode('utf-8')

    def write_to_file(self, path: StrPath, enable_compression: Optional[bool] = None) -> str:
        """ Write the text to `path`, or to `path + '.gz'` gzip compressed, and return the path that was written.

        The file is first written to a temporary sibling and then renamed, so readers never see a partial file. The
        variant with the other compression is removed, so `read_from_file` can't pick an older version.
        """
        from jsonio.conf.get_settings import get_global_settings
        settings = get_global_settings()
        if enable_compression is None:
            enable_compression = settings.ENABLE_GZIP
        base = os.fspath(path)
        target = base + GZIP_SUFFIX if enable_compression else base
        stale = base if enable_compression else base + GZIP_SUFFIX
        tmp = f'{target}.tmp{os.getpid()}'
        log = logger.new(path=target)
        try:
            if enable_compression:
                with gzip.open(tmp, 'wb', compresslevel=settings.GZIP_COMPRESS_LEVEL) as gz_file:
                    gz_file.write(self.text)
            else:
                with open(tmp, 'wb') as file:
                    file.write(self.text)
            os.replace(tmp, target)
            if os.path.exists(stale):
                os.remove(stale)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.remove(tmp)
            raise PersistenceError(f'cannot write {target}: {e}') from e
        log.debug('wrote encoded value', size=len(self.text), compressed=enable_compression)
        return target

    def read_from_file(self, path: StrPath) -> bool:
        """ Replace the text with the contents of `path` or `path + '.gz'`, whichever exists, in that order.

        Returns `False` when neither exists, in which case nothing changes. Compression is detected from the contents.
        Other failures raise `PersistenceError`. The blob store is not changed.
        """
        base = os.fspath(path)
        for candidate in (base, base + GZIP_SUFFIX):
            try:
                with open(candidate, 'rb') as file:
                    data = file.read()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise PersistenceError(f'cannot read {candidate}: {e}') from e
            if data.startswith(GZIP_MAGIC):
                try:
                    data = gzip.decompress(data)
                except (OSError, EOFError, zlib.error) as e:
                    raise PersistenceError(f'cannot decompress {candidate}: {e}') from e
            self.text = data
            logger.debug('read encoded value', path=candidate, size=len(data))
            return True
        logger.debug('encoded value not found', path=base)
        return False

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, EncodedValue):
            return NotImplemented
        return self.text == other.text

    def __str__(self) -> str:
        return self.text.decode('utf-8')

    def __repr__(self) -> str:
        preview = self.text.decode('utf-8', errors='replace')
        if len(preview) > _REPR_PREVIEW:
            preview = preview[:_REPR_PREVIEW] + '...'
        return f'EncodedValue({preview!r})'
