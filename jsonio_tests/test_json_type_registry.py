from decimal import Decimal
from enum import Enum, IntEnum, StrEnum
from typing import Any, Optional
from unittest import TestCase

import numpy as np
import numpy.typing as npt

from jsonio import EncodedValue, as_json, make_json_type, register_json_type, to_json
from jsonio.json_types import (
    TYPE_TO_JSON_TYPE_MAP,
    BytesJsonType,
    EnumJsonType,
    IntJsonType,
    JsonType,
    NDArrayJsonType,
    StrJsonType,
    _make_default_json_type,
)
from jsonio.serialization import ReadContext, SizeMismatchError, WriteContext
from jsonio.serialization.encoding.utf8 import read_string_token, size_utf8, write_utf8


class Token:
    def __init__(self, name: str) -> None:
        self.name = name


class BrokenTokenJsonType(JsonType[Token]):
    """ Computes a size that is one byte short of what it writes. """

    @classmethod
    def _from_type(cls, type_, /, *, type_map):
        return cls()

    def _check_value(self, value, /, *, deep):
        if not isinstance(value, Token):
            raise TypeError('expected Token')

    def _size(self, ctx, value, /):
        return size_utf8(ctx, value.name) - 1

    def _write(self, ctx, value, /):
        write_utf8(ctx, value.name)

    def _read(self, ctx, /):
        return Token(read_string_token(ctx))


class DecimalJsonType(JsonType[Decimal]):
    """ Writes decimals as strings, so no precision is lost. """

    @classmethod
    def _from_type(cls, type_, /, *, type_map):
        return cls()

    def _check_value(self, value, /, *, deep):
        if not isinstance(value, Decimal):
            raise TypeError('expected Decimal')

    def _size(self, ctx: WriteContext, value: Decimal, /) -> int:
        return size_utf8(ctx, str(value))

    def _write(self, ctx: WriteContext, value: Decimal, /) -> None:
        write_utf8(ctx, str(value))

    def _read(self, ctx: ReadContext, /) -> Decimal:
        return Decimal(read_string_token(ctx))


class Mode(StrEnum):
    FAST = 'fast'
    SLOW = 'slow'


class Priority(IntEnum):
    LOW = 1
    HIGH = 2


class Shape(str, Enum):
    SQUARE = 'sq'


class Image(np.ndarray):
    pass


class RegistryTestCase(TestCase):
    def tearDown(self) -> None:
        for type_ in (Decimal, Token):
            if type_ in TYPE_TO_JSON_TYPE_MAP:
                del TYPE_TO_JSON_TYPE_MAP[type_]
        _make_default_json_type.cache_clear()

    def test_register(self) -> None:
        with self.assertRaises(TypeError):
            make_json_type(Decimal)
        register_json_type(Decimal)(DecimalJsonType)
        json_type = make_json_type(dict[str, Decimal])
        text = json_type.to_text({'price': Decimal('1.10')})
        self.assertEqual(text, '{"price":"1.10"}')
        self.assertEqual(json_type.from_text(text), {'price': Decimal('1.10')})
        # runtime dispatch uses the same map
        self.assertEqual(str(as_json([Decimal('0.5')])), '["0.5"]')

    def test_register_not_a_json_type(self) -> None:
        with self.assertRaises(TypeError):
            register_json_type(Decimal)(Decimal)

    def test_extra_json_types_map(self) -> None:
        json_type = make_json_type(list[Decimal], extra_json_types_map={Decimal: DecimalJsonType})
        self.assertEqual(json_type.to_text([Decimal('2')]), '["2"]')
        # the default map is not changed
        with self.assertRaises(TypeError):
            make_json_type(list[Decimal])

    def test_enum_mixins(self) -> None:
        for enum_class in (Mode, Priority, Shape):
            json_type = make_json_type(enum_class)
            self.assertIsInstance(json_type, EnumJsonType)
        self.assertEqual(make_json_type(Mode).to_text(Mode.FAST), '"FAST"')
        self.assertEqual(make_json_type(Priority).to_text(Priority.HIGH), '"HIGH"')
        self.assertEqual(make_json_type(Shape).from_text('"SQUARE"'), Shape.SQUARE)
        # as a plain int, an IntEnum member is still an integer
        self.assertEqual(make_json_type(int).to_text(Priority.HIGH), '2')

    def test_subclasses(self) -> None:
        self.assertIsInstance(make_json_type(Image), NDArrayJsonType)
        self.assertIsInstance(make_json_type(np.int8), IntJsonType)
        self.assertIsInstance(make_json_type(bytearray), BytesJsonType)

        class Name(str):
            pass

        self.assertIsInstance(make_json_type(Name), StrJsonType)

    def test_array_annotations(self) -> None:
        self.assertEqual(repr(make_json_type(np.ndarray)), 'NDArrayJsonType()')
        self.assertEqual(repr(make_json_type(npt.NDArray[np.float32])), 'NDArrayJsonType(float32)')
        self.assertEqual(repr(make_json_type(npt.NDArray[Any])), 'NDArrayJsonType()')
        with self.assertRaises(TypeError):
            make_json_type(npt.NDArray[np.str_])

    def test_repr(self) -> None:
        self.assertEqual(
            repr(make_json_type(Optional[list[float]])),
            'OptionalJsonType(ListJsonType(FloatJsonType()))',
        )
        self.assertEqual(repr(make_json_type(tuple[int, ...])), 'TupleJsonType(IntJsonType(), ...)')
        self.assertEqual(repr(make_json_type(tuple[int, str])), 'TupleJsonType(IntJsonType(), StrJsonType())')

    def test_string_annotation(self) -> None:
        with self.assertRaises(NotImplementedError):
            make_json_type('int')

    def test_size_mismatch_is_detected(self) -> None:
        json_type = make_json_type(list[Token], extra_json_types_map={Token: BrokenTokenJsonType})
        with self.assertRaises(SizeMismatchError):
            json_type.to_text([Token('a')])

    def test_size_mismatch_without_slow_asserts(self) -> None:
        json_type = make_json_type(Token, extra_json_types_map={Token: BrokenTokenJsonType})
        ctx = WriteContext(None, check_sizes=False)
        ctx.size = json_type.size(ctx, Token('abc'))
        ctx.begin(memoryview(bytearray(ctx.size)))
        # the buffer is one byte too short
        with self.assertRaises(SizeMismatchError):
            json_type.write(ctx, Token('abc'))

    def test_failed_encode_keeps_previous_text(self) -> None:
        register_json_type(Token)(BrokenTokenJsonType)
        encoded = as_json([1, 2], list[int])
        with self.assertRaises(SizeMismatchError):
            to_json(encoded, [Token('x')], list[Token])
        self.assertEqual(str(encoded), '[1,2]')
        with self.assertRaises(TypeError):
            to_json(encoded, ['x'], list[int])
        self.assertEqual(str(encoded), '[1,2]')
        self.assertIsInstance(encoded, EncodedValue)
