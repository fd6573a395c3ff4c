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
JSON booleans.

>>> from jsonio.serialization import ReadContext, encode_to_bytes
>>> encode_to_bytes(size_bool, write_bool, True)
b'true'
>>> read_bool(ReadContext('false'))
False

A lenient reader accepts numbers, zero is `False` and everything else is `True`:

>>> read_bool(ReadContext('0', no_type_check=True))
False
>>> read_bool(ReadContext('2.5', no_type_check=True))
True
"""

from jsonio.serialization.context import ReadContext, WriteContext


def bool_literal(value: bool) -> str:
    return 'true' if value else 'false'


def size_bool(ctx: WriteContext, value: bool) -> int:
    return len(bool_literal(value))


def write_bool(ctx: WriteContext, value: bool) -> None:
    ctx.write(bool_literal(value))


def read_bool(ctx: ReadContext) -> bool:
    if ctx.consume('true'):
        return True
    if ctx.consume('false'):
        return False
    if ctx.no_type_check:
        from jsonio.serialization.encoding.number import read_number
        return read_number(ctx) != 0
    raise ctx.type_error('expected a boolean')
