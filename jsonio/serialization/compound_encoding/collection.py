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
A collection is basically any value that has a known size and is iterable, it is written as a JSON array.

Layout: `[` value_0 `,` value_1 `,` ... value_N `]`

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> from jsonio.serialization.encoding.utf8 import read_utf8, size_utf8, write_utf8
>>> value = ['foobar', 'π', 'test']
>>> encode_to_bytes(
...     lambda ctx, v: size_array(ctx, v, size_utf8),
...     lambda ctx, v: write_array(ctx, v, write_utf8),
...     value,
... ).decode('utf-8')
'["foobar","π","test"]'

When decoding, the builder can be any compatible collection, it only matters that it can be initialized with an
`Iterable[T]`:

>>> read_array(ReadContext('[ "foobar", "π" , "test" ]'), read_utf8, tuple)
('foobar', 'π', 'test')
>>> read_array(ReadContext('[]'), read_utf8, list)
[]
"""

from collections.abc import Iterable, Iterator
from typing import Callable, TypeVar

from jsonio.serialization.context import ReadContext, WriteContext

from . import Reader, Sizer, Writer

T = TypeVar('T')
R = TypeVar('R')


def size_array(ctx: WriteContext, values: Iterable[T], sizer: Sizer[T]) -> int:
    total = 0
    count = 0
    for value in values:
        total += sizer(ctx, value)
        count += 1
    # brackets and the commas between items
    return total + 2 + max(count - 1, 0)


def write_array(ctx: WriteContext, values: Iterable[T], writer: Writer[T]) -> None:
    ctx.write_bytes(b'[')
    first = True
    for value in values:
        if not first:
            ctx.write_bytes(b',')
        writer(ctx, value)
        first = False
    ctx.write_bytes(b']')


def iter_array(ctx: ReadContext, reader: Reader[T]) -> Iterator[T]:
    ctx.expect('[')
    if ctx.consume(']'):
        return
    while True:
        yield reader(ctx)
        if ctx.consume(','):
            continue
        ctx.expect(']')
        return


def read_array(ctx: ReadContext, reader: Reader[T], builder: Callable[[Iterable[T]], R]) -> R:
    return builder(iter_array(ctx, reader))
