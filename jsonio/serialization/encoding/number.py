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
JSON numbers.

Integers are written with `int.__repr__` and floats with `float.__repr__`, which is the shortest text that reads
back to the exact same float. JSON has no representation for NaN and infinities, those are written as `null`
and `null` is read back as NaN.

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> encode_to_bytes(size_int, write_int, -42)
b'-42'
>>> encode_to_bytes(size_float, write_float, 0.1)
b'0.1'
>>> encode_to_bytes(size_float, write_float, float('inf'))
b'null'

>>> ctx = ReadContext(' 12, 1.5e3')
>>> read_int(ctx)
12
>>> ctx.expect(',')
>>> read_float(ctx)
1500.0

Numbers inside strings are only accepted by lenient readers:

>>> try:
...     read_int(ReadContext('"7"'))
... except JsonTypeError as e:
...     print(e)
expected a number (at position 0)
>>> read_int(ReadContext('"7"', no_type_check=True))
7
"""

import math
import re

from jsonio.serialization.context import ReadContext, WriteContext
from jsonio.serialization.exceptions import JsonTypeError

NUMBER_RE = re.compile(r'(-?(?:0|[1-9][0-9]*))(\.[0-9]+)?([eE][-+]?[0-9]+)?')


def int_literal(value: int) -> str:
    # XXX: int.__repr__ so that IntEnum and numpy integers are printed as plain numbers
    return int.__repr__(int(value))


def float_literal(value: float) -> str:
    value = float(value)
    if not math.isfinite(value):
        return 'null'
    return float.__repr__(value)


def size_int(ctx: WriteContext, value: int) -> int:
    return len(int_literal(value))


def write_int(ctx: WriteContext, value: int) -> None:
    ctx.write(int_literal(value))


def size_float(ctx: WriteContext, value: float) -> int:
    return len(float_literal(value))


def write_float(ctx: WriteContext, value: float) -> None:
    ctx.write(float_literal(value))


def _number_from_match(match: re.Match) -> int | float:
    integer, frac, exp = match.groups()
    if frac is None and exp is None:
        return int(integer)
    return float(match.group(0))


def parse_number(text: str) -> int | float | None:
    """Parse a whole string as a JSON number, `None` if it isn't one."""
    match = NUMBER_RE.fullmatch(text.strip())
    if match is None:
        return None
    return _number_from_match(match)


def read_number(ctx: ReadContext, *, allow_string: bool = False) -> int | float:
    """Read a JSON number, with `allow_string` a string holding a number is accepted as well."""
    from jsonio.serialization.encoding.utf8 import read_string_token
    ctx.skip_ws()
    start = ctx.pos
    if allow_string and ctx.peek() == '"':
        text = read_string_token(ctx)
        number = parse_number(text)
        if number is None:
            raise JsonTypeError(f'{text!r} is not a number', pos=start)
        return number
    match = NUMBER_RE.match(ctx.text, start)
    if match is None:
        raise ctx.type_error('expected a number')
    ctx.pos = match.end()
    return _number_from_match(match)


def read_int(ctx: ReadContext) -> int:
    ctx.skip_ws()
    start = ctx.pos
    value = read_number(ctx, allow_string=ctx.no_type_check)
    if isinstance(value, float):
        if ctx.no_type_check and value.is_integer():
            return int(value)
        raise JsonTypeError('expected an integer', pos=start)
    return value


def read_float(ctx: ReadContext) -> float:
    if ctx.consume('null'):
        return math.nan
    return float(read_number(ctx, allow_string=ctx.no_type_check))
