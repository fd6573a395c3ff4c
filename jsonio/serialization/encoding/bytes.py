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
Byte strings that are small enough to be inlined are written as a base64 JSON string.

The size is known without encoding anything: every 3 bytes (or fraction of) take 4 characters, plus the quotes.

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> encode_to_bytes(size_bytes, write_bytes, b'test')
b'"dGVzdA=="'
>>> size_bytes(None, b'')
2
>>> read_bytes(ReadContext('"dGVzdA=="'))
b'test'
"""

import base64
import binascii

from jsonio.serialization.context import ReadContext, WriteContext
from jsonio.serialization.encoding.utf8 import read_string_token
from jsonio.serialization.exceptions import JsonTypeError


def base64_size(nbytes: int) -> int:
    return (nbytes + 2) // 3 * 4


def size_bytes(ctx: WriteContext | None, data: bytes) -> int:
    return base64_size(len(data)) + 2


def write_bytes(ctx: WriteContext, data: bytes) -> None:
    ctx.write_bytes(b'"' + base64.b64encode(data) + b'"')


def read_bytes(ctx: ReadContext) -> bytes:
    ctx.skip_ws()
    start = ctx.pos
    text = read_string_token(ctx)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise JsonTypeError(f'invalid base64 data: {e}', pos=start) from e
