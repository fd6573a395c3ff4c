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
Entry points to encode values into an `EncodedValue` and to decode them back.

>>> from dataclasses import dataclass
>>> @dataclass
... class Point:
...     x: int
...     y: float
>>> encoded = as_json(Point(1, 2.5), Point)
>>> str(encoded)
'{"x":1,"y":2.5}'
>>> from_json(encoded, Point)
Ok(Point(x=1, y=2.5))
>>> from_json('{"x": "1", "y": 2}', Point).is_err()
True
>>> from_json('{"x": "1", "y": 2}', Point, no_type_check=True)
Ok(Point(x=1, y=2.0))
"""

from typing import Any, Optional, TypeVar, Union

from jsonio.blobs import BlobStore
from jsonio.encoded import EncodedValue, StrPath
from jsonio.json_types import JsonType, make_json_type
from jsonio.serialization import DecodeError, JsonSyntaxError, ReadContext, WriteContext
from jsonio.utils.result import Result, as_result

T = TypeVar('T')


def to_json(ret: EncodedValue, value: Any, type_: Any = None) -> None:
    """ Encode `value` into `ret`, appending large binary payloads to the blob store of `ret`.

    The value is encoded according to `type_`, or according to its runtime type when `type_` is `None`. A value that
    doesn't match its type raises `TypeError` and `ret` is left unchanged, although payloads may already have been
    appended to the blob store.
    """
    json_type = make_json_type(Any if type_ is None else type_)
    ctx = WriteContext(ret.blobs)
    ctx.size = json_type.size(ctx, value)
    buffer = ret.start_write(ctx.size)
    try:
        ctx.begin(buffer)
        json_type.write(ctx, value)
    except BaseException:
        ret.abort_write()
        raise
    finally:
        buffer.release()
    ret.end_write(ctx.pos)


def as_json(value: Any, type_: Any = None, *, blobs: Union[BlobStore, StrPath, None] = None) -> EncodedValue:
    """ Like `to_json`, but returns a new `EncodedValue`, using the given blob store when there is one.
    """
    ret = EncodedValue()
    if blobs is not None:
        ret.use_blobs(blobs)
    to_json(ret, value, type_)
    return ret


def from_json(
    source: Union[EncodedValue, str, bytes],
    type_: Any,
    *,
    blobs: Optional[BlobStore] = None,
    no_type_check: bool = False,
) -> Result[Any, DecodeError]:
    """ Decode one value of type `type_` from `source`, which must hold nothing else.

    The source is either an `EncodedValue`, whose blob store is used unless `blobs` is given, or the JSON text itself.
    Blob handles can only be resolved when there is a blob store. A structural mismatch is returned as an `Err` with a
    `DecodeError`, while a type that is not supported at all raises `TypeError`.
    """
    json_type = make_json_type(type_)
    if isinstance(source, EncodedValue):
        raw: Union[str, bytes] = source.text
        if blobs is None:
            blobs = source.blobs
    else:
        raw = source
    return _decode(json_type, raw, blobs, no_type_check)


@as_result(DecodeError)
def _decode(json_type: JsonType, raw: Union[str, bytes], blobs: Optional[BlobStore], no_type_check: bool) -> Any:
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise JsonSyntaxError(f'invalid utf-8: {e.reason}', pos=e.start) from e
    else:
        text = raw
    ctx = ReadContext(text, blobs=blobs, no_type_check=no_type_check)
    value = json_type.read(ctx)
    ctx.finalize()
    return value
