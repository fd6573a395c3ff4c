from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple

import numpy as np
import numpy.typing as npt
import pytest

from jsonio import from_json, make_json_type
from jsonio.serialization import JsonTypeError


class Color(Enum):
    RED = 1
    GREEN = 2


class Point(NamedTuple):
    x: int
    y: int = 0


@dataclass
class Config:
    name: str
    tags: list[str] = field(default_factory=list)


LENIENT_CASES: list[tuple[Any, str, Any]] = [
    (int, '"7"', 7),
    (int, '3.0', 3),
    (float, '"2.5"', 2.5),
    (float, '" 1e3 "', 1000.0),
    (bool, '1', True),
    (bool, '0', False),
    (str, '12', '12'),
    (str, '-1.5e3', '-1.5e3'),
    (str, 'false', 'false'),
    (Color, '1', Color.RED),
    (Color, '"GREEN"', Color.GREEN),
    (Point, '{"x":1}', Point(1, 0)),
    (Config, '{"name":"c"}', Config('c')),
    (list[int], '["1", 2, 3.0]', [1, 2, 3]),
]


@pytest.mark.parametrize('type_,text,expected', LENIENT_CASES)
def test_lenient_read(type_: Any, text: str, expected: Any) -> None:
    json_type = make_json_type(type_)
    assert json_type.from_text(text, no_type_check=True) == expected


@pytest.mark.parametrize('type_,text,expected', [case for case in LENIENT_CASES if case[1] != '"GREEN"'])
def test_strict_read(type_: Any, text: str, expected: Any) -> None:
    json_type = make_json_type(type_)
    with pytest.raises(JsonTypeError):
        json_type.from_text(text)


@pytest.mark.parametrize('no_type_check', [False, True])
def test_exact_matches_are_read_either_way(no_type_check: bool) -> None:
    json_type = make_json_type(dict[str, Any])
    text = '{"a":1,"b":[true,null,"x"],"c":2.5}'
    assert json_type.from_text(text, no_type_check=no_type_check) == {'a': 1, 'b': [True, None, 'x'], 'c': 2.5}


@pytest.mark.parametrize('no_type_check', [False, True])
def test_malformed_is_always_an_error(no_type_check: bool) -> None:
    for type_, text in [(int, '"x"'), (bool, '"yes"'), (Color, '3'), (list[int], '{}'), (str, 'nul')]:
        with pytest.raises(JsonTypeError):
            make_json_type(type_).from_text(text, no_type_check=no_type_check)


def test_lenient_array_cast() -> None:
    json_type = make_json_type(npt.NDArray[np.float64])
    text = '{"dtype":"<i4","shape":[2],"data":[1,2]}'
    with pytest.raises(JsonTypeError):
        json_type.from_text(text)
    array = json_type.from_text(text, no_type_check=True)
    assert array.dtype == np.float64
    np.testing.assert_array_equal(array, [1.0, 2.0])


def test_from_json_no_type_check() -> None:
    assert from_json('{"x":"1"}', Point).is_err()
    assert from_json('{"x":"1"}', Point, no_type_check=True).unwrap() == Point(1, 0)
