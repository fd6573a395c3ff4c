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

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, NamedTuple, TypeVar, final

from typing_extensions import Self

from jsonio.json_types.utils import TypeAliasMap, TypeToJsonTypeMap, get_usable_origin_type
from jsonio.serialization import ReadContext, SizeMismatchError, WriteContext

T = TypeVar('T')


class JsonType(ABC, Generic[T]):
    """ This class is used to model a type with a known type signature and how it will be encoded to JSON.

    Each subclass implements the triplet `_size`, `_write` and `_read`, which must agree exactly: for any context and
    value, `_write` emits exactly the number of bytes `_size` computed. The public `size`, `write` and `read` are
    final and must be used to recurse into the constituents of a compound value, never the underscored methods.
    """

    class TypeMap(NamedTuple):
        alias_map: TypeAliasMap
        json_types_map: TypeToJsonTypeMap

    # XXX: subclasses must override this if they need any properties
    __slots__ = ()

    @final
    @staticmethod
    def from_type(type_: Any, /, *, type_map: TypeMap) -> JsonType:
        """ Instantiate a JsonType instance from a type signature using the given maps.

        A `json_types_map` associates concrete types to concrete JsonType classes, while an `alias_map` associates
        types with substitute types to look up instead.
        """
        usable_origin = get_usable_origin_type(type_, type_map=type_map)
        json_type = type_map.json_types_map[usable_origin]
        return json_type._from_type(type_, type_map=type_map)

    @classmethod
    def _from_type(cls, type_: Any, /, *, type_map: TypeMap) -> Self:
        """ Instantiate a JsonType instance from a type signature.

        The implementation is expected to inspect the given type's origin and args to check for compatibility and to
        use `JsonType.from_type` with the given `type_map` to instantiate the JsonType of its constituents.
        """
        # XXX: a JsonType that is only meant for local use does not need to implement _from_type
        raise TypeError(f'{cls.__name__} is not compatible with use in a JsonType.TypeMap')

    @final
    def check_value(self, value: T, /) -> None:
        """ Raise a TypeError if the value is not compatible, recursing into compound values.
        """
        # XXX: subclasses must implement JsonType._check_value, not JsonType.check_value
        self._check_value(value, deep=True)

    @final
    def size(self, ctx: WriteContext, value: T, /) -> int:
        """ Exact number of bytes `write` will emit for this value in this context.

        Blob payloads are not appended, only accounted for in `ctx.blob_end`.
        """
        self._check_value(value, deep=False)
        return self._size(ctx, value)

    @final
    def write(self, ctx: WriteContext, value: T, /) -> None:
        """ Write the value at the current position of the context.

        When `ctx.check_sizes` is set every value is sized again right before being written, and the number of bytes
        actually written is compared against it.
        """
        self._check_value(value, deep=False)
        if not ctx.check_sizes:
            self._write(ctx, value)
            return
        blob_end = ctx.blob_end
        expected = self._size(ctx, value)
        ctx.blob_end = blob_end
        start = ctx.pos
        self._write(ctx, value)
        written = ctx.pos - start
        if written != expected:
            raise SizeMismatchError(f'{self!r} wrote {written} bytes but its size was computed as {expected}')

    @final
    def read(self, ctx: ReadContext, /) -> T:
        """ Read exactly one encoding of this type at the current position of the context.

        Failures raise a `DecodeError` subclass pointing at the position where the problem was found.
        """
        # XXX: subclasses must implement JsonType._read, not JsonType.read
        return self._read(ctx)

    @final
    def to_text(self, value: T, /) -> str:
        """ Shortcut to quickly encode a value without a blob store, mostly useful in tests.
        """
        ctx = WriteContext(None)
        ctx.size = self.size(ctx, value)
        buffer = bytearray(ctx.size)
        ctx.begin(memoryview(buffer))
        self.write(ctx, value)
        if ctx.pos != ctx.size:
            raise SizeMismatchError(f'wrote {ctx.pos} bytes, {ctx.size} were computed')
        return buffer.decode('utf-8')

    @final
    def from_text(self, text: str, /, *, no_type_check: bool = False) -> T:
        """ Shortcut to quickly decode a value without a blob store, raises the `DecodeError` on failure.
        """
        ctx = ReadContext(text, no_type_check=no_type_check)
        value = self.read(ctx)
        ctx.finalize()
        return value

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'

    @abstractmethod
    def _check_value(self, value: T, /, *, deep: bool) -> None:
        """ Inner implementation of `JsonType.check_value`, should raise a TypeError when the value is not valid.

        Compound values should use `JsonType._check_value` on the inner type(s) and pass the appropriate deep argument.
        """
        raise NotImplementedError

    @abstractmethod
    def _size(self, ctx: WriteContext, value: T, /) -> int:
        """ Inner implementation of `size`, you can assume that the given value has been "shallow checked".
        """
        raise NotImplementedError

    @abstractmethod
    def _write(self, ctx: WriteContext, value: T, /) -> None:
        """ Inner implementation of `write`, it must emit exactly `_size(ctx, value)` bytes.

        Compound types should pass `JsonType.write` of their constituents as a `Writer`, so each of them is checked.
        """
        raise NotImplementedError

    @abstractmethod
    def _read(self, ctx: ReadContext, /) -> T:
        """ Inner implementation of `read`.
        """
        raise NotImplementedError
