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

from typing import Callable, TypeVar

from .context import ReadContext, WriteContext
from .exceptions import (
    BlobError,
    DecodeError,
    JsonSyntaxError,
    JsonTypeError,
    MissingBlobStoreError,
    PersistenceError,
    SerializationError,
    SizeMismatchError,
)

T = TypeVar('T')

__all__ = [
    'BlobError',
    'DecodeError',
    'JsonSyntaxError',
    'JsonTypeError',
    'MissingBlobStoreError',
    'PersistenceError',
    'ReadContext',
    'SerializationError',
    'SizeMismatchError',
    'WriteContext',
    'encode_to_bytes',
]


def encode_to_bytes(
    sizer: Callable[[WriteContext, T], int],
    writer: Callable[[WriteContext, T], None],
    value: T,
) -> bytes:
    """ Shortcut to run both passes with a sizer/writer pair and get the resulting bytes, without any blob store.

    Meant for quick checks of the low level encoders, `jsonio.api.to_json` is the real entry point.
    """
    ctx = WriteContext(None)
    ctx.size = sizer(ctx, value)
    buffer = bytearray(ctx.size)
    ctx.begin(memoryview(buffer))
    writer(ctx, value)
    if ctx.pos != ctx.size:
        raise SizeMismatchError(f'wrote {ctx.pos} bytes, {ctx.size} were computed')
    return bytes(buffer)
