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
JSON strings.

Strings are written with the escaping of the builtin `json` module, non-ASCII characters are kept as they are and take
their UTF-8 length in the output, which is what the size functions account for.

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> encode_to_bytes(size_utf8, write_utf8, 'foo "bar"')
b'"foo \\"bar\\""'
>>> size_utf8(None, 'π')  # 2 quotes + 2 bytes
4
>>> encode_to_bytes(size_utf8, write_utf8, 'π').decode('utf-8')
'"π"'

>>> read_utf8(ReadContext('"caf\\u00e9"'))
'café'

Lenient readers take numbers and booleans as their JSON text:

>>> read_utf8(ReadContext('12.50', no_type_check=True))
'12.50'
>>> read_utf8(ReadContext('true', no_type_check=True))
'true'
"""

import json
from json.decoder import scanstring
from json.encoder import encode_basestring

from jsonio.serialization.context import ReadContext, WriteContext
from jsonio.serialization.exceptions import JsonSyntaxError


def string_literal(value: str) -> str:
    return encode_basestring(value)


def utf8_size(text: str) -> int:
    """Number of bytes of `text` encoded as UTF-8."""
    if text.isascii():
        return len(text)
    return len(text.encode('utf-8'))


def size_utf8(ctx: WriteContext | None, value: str) -> int:
    return utf8_size(string_literal(value))


def write_utf8(ctx: WriteContext, value: str) -> None:
    ctx.write(string_literal(value))


def read_string_token(ctx: ReadContext) -> str:
    """Read a JSON string, never coercing anything else into one."""
    if ctx.peek() != '"':
        raise ctx.type_error('expected a string')
    try:
        value, end = scanstring(ctx.text, ctx.pos + 1)
    except json.JSONDecodeError as e:
        raise JsonSyntaxError(e.msg, pos=e.pos) from e
    ctx.pos = end
    return value


def read_utf8(ctx: ReadContext) -> str:
    if ctx.no_type_check and ctx.peek() != '"':
        from jsonio.serialization.encoding.number import NUMBER_RE
        for literal in ('true', 'false'):
            if ctx.consume(literal):
                return literal
        match = NUMBER_RE.match(ctx.text, ctx.pos)
        if match is not None:
            ctx.pos = match.end()
            return match.group(0)
    return read_string_token(ctx)
