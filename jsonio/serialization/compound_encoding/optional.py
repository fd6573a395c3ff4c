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
An optional value is either `null` or the encoding of the value itself.

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> from jsonio.serialization.encoding.utf8 import read_utf8, size_utf8, write_utf8
>>> encode_to_bytes(
...     lambda ctx, v: size_optional(ctx, v, size_utf8),
...     lambda ctx, v: write_optional(ctx, v, write_utf8),
...     None,
... )
b'null'
>>> read_optional(ReadContext('"foobar"'), read_utf8)
'foobar'
>>> str(read_optional(ReadContext(' null'), read_utf8))
'None'
"""

from typing import Optional, TypeVar

from jsonio.serialization.context import ReadContext, WriteContext

from . import Reader, Sizer, Writer

T = TypeVar('T')

_NULL = 'null'


def size_optional(ctx: WriteContext, value: Optional[T], sizer: Sizer[T]) -> int:
    if value is None:
        return len(_NULL)
    return sizer(ctx, value)


def write_optional(ctx: WriteContext, value: Optional[T], writer: Writer[T]) -> None:
    if value is None:
        ctx.write(_NULL)
    else:
        writer(ctx, value)


def read_optional(ctx: ReadContext, reader: Reader[T]) -> Optional[T]:
    if ctx.consume(_NULL):
        return None
    return reader(ctx)
