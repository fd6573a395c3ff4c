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
Mappings with string keys are written as JSON objects, in the iteration order of the mapping.

Layout: `{` key_0 `:` value_0 `,` ... key_N `:` value_N `}`

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> from jsonio.serialization.encoding.bool import read_bool, size_bool, write_bool
>>> value = {'foo': False, 'bar': True}
>>> encode_to_bytes(
...     lambda ctx, v: size_object(ctx, v.items(), size_bool),
...     lambda ctx, v: write_object(ctx, v.items(), write_bool),
...     value,
... )
b'{"foo":false,"bar":true}'
>>> read_mapping(ReadContext('{"foo": false, "bar": true}'), read_bool, dict)
{'foo': False, 'bar': True}

Readers that need to dispatch on the key (records, array descriptors) use `iter_object_keys` and read each value
themselves before asking for the next key:

>>> ctx = ReadContext('{"a": 1, "b": [2]}')
>>> for key in iter_object_keys(ctx):
...     print(key, ctx.skip_value())
a (6, 7)
b (14, 17)
"""

from collections.abc import Iterable, Iterator
from typing import Callable, TypeVar

from jsonio.serialization.context import ReadContext, WriteContext
from jsonio.serialization.encoding.utf8 import read_string_token, string_literal, utf8_size

from . import Reader, Sizer, Writer

V = TypeVar('V')
R = TypeVar('R')


def key_literal(key: str) -> str:
    """The text that precedes a value inside an object, the quoted key and the colon."""
    return string_literal(key) + ':'


def size_object(ctx: WriteContext, items: Iterable[tuple[str, V]], sizer: Sizer[V]) -> int:
    total = 0
    count = 0
    for key, value in items:
        if not isinstance(key, str):
            raise TypeError(f'object keys must be str, got {type(key).__name__}')
        total += utf8_size(key_literal(key)) + sizer(ctx, value)
        count += 1
    return total + 2 + max(count - 1, 0)


def write_object(ctx: WriteContext, items: Iterable[tuple[str, V]], writer: Writer[V]) -> None:
    ctx.write_bytes(b'{')
    first = True
    for key, value in items:
        if not first:
            ctx.write_bytes(b',')
        ctx.write(key_literal(key))
        writer(ctx, value)
        first = False
    ctx.write_bytes(b'}')


def iter_object_keys(ctx: ReadContext) -> Iterator[str]:
    ctx.expect('{')
    if ctx.consume('}'):
        return
    while True:
        key = read_string_token(ctx)
        ctx.expect(':')
        # the caller reads the value before resuming
        yield key
        if ctx.consume(','):
            continue
        ctx.expect('}')
        return


def read_mapping(ctx: ReadContext, reader: Reader[V], builder: Callable[[Iterable[tuple[str, V]]], R]) -> R:
    return builder((key, reader(ctx)) for key in iter_object_keys(ctx))
