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
Type dispatch: one `JsonType` class per supported type, each implementing the size/write/read triplet, and the maps
used to resolve a type annotation to an instance of the right class.

>>> make_json_type(dict[str, list[int]])
DictJsonType(ListJsonType(IntJsonType()))
>>> make_json_type(tuple[str, float | None]).to_text(('x', None))
'["x",null]'
"""

from collections import OrderedDict, deque
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import NoneType, UnionType
from typing import Any, Callable, NamedTuple, Optional, TypeVar, Union

import numpy as np

from jsonio.encoded import EncodedValue
from jsonio.json_types.any_json_type import AnyJsonType
from jsonio.json_types.bool_json_type import BoolJsonType
from jsonio.json_types.bytes_json_type import BytesJsonType
from jsonio.json_types.collection_json_type import DequeJsonType, FrozenSetJsonType, ListJsonType, SetJsonType
from jsonio.json_types.encoded_json_type import EncodedJsonType
from jsonio.json_types.enum_json_type import EnumJsonType
from jsonio.json_types.float_json_type import FloatJsonType
from jsonio.json_types.int_json_type import IntJsonType
from jsonio.json_types.json_type import JsonType
from jsonio.json_types.map_json_type import DictJsonType, OrderedDictJsonType
from jsonio.json_types.ndarray_json_type import NDArrayJsonType
from jsonio.json_types.null_json_type import NullJsonType
from jsonio.json_types.optional_json_type import OptionalJsonType
from jsonio.json_types.record_json_type import DataclassJsonType, NamedTupleJsonType
from jsonio.json_types.str_json_type import StrJsonType
from jsonio.json_types.tuple_json_type import TupleJsonType
from jsonio.json_types.utils import TypeAliasMap, TypeToJsonTypeMap

__all__ = [
    'DEFAULT_TYPE_ALIAS_MAP',
    'DEFAULT_TYPE_MAP',
    'TYPE_TO_JSON_TYPE_MAP',
    'AnyJsonType',
    'BoolJsonType',
    'BytesJsonType',
    'DataclassJsonType',
    'DequeJsonType',
    'DictJsonType',
    'EncodedJsonType',
    'EnumJsonType',
    'FloatJsonType',
    'FrozenSetJsonType',
    'IntJsonType',
    'JsonType',
    'ListJsonType',
    'NDArrayJsonType',
    'NamedTupleJsonType',
    'NullJsonType',
    'OptionalJsonType',
    'OrderedDictJsonType',
    'SetJsonType',
    'StrJsonType',
    'TupleJsonType',
    'TypeAliasMap',
    'TypeToJsonTypeMap',
    'make_json_type',
    'register_json_type',
]

T = TypeVar('T')
J = TypeVar('J', bound=type[JsonType])

# types that are looked up as another type when they are not in the map themselves
DEFAULT_TYPE_ALIAS_MAP: TypeAliasMap = {
    # XXX: technically typing.Union is not a type, but for our purposes it is
    Union: UnionType,
    bytearray: bytes,
}

# Mapping between types and JsonType classes.
TYPE_TO_JSON_TYPE_MAP: dict[Any, type[JsonType]] = {
    # builtin types:
    None: NullJsonType,
    NoneType: NullJsonType,
    bool: BoolJsonType,
    bytes: BytesJsonType,
    dict: DictJsonType,
    float: FloatJsonType,
    frozenset: FrozenSetJsonType,
    int: IntJsonType,
    list: ListJsonType,
    set: SetJsonType,
    str: StrJsonType,
    tuple: TupleJsonType,
    # other Python types:
    Any: AnyJsonType,
    OrderedDict: OrderedDictJsonType,
    UnionType: OptionalJsonType,
    deque: DequeJsonType,
    NamedTuple: NamedTupleJsonType,
    dataclass: DataclassJsonType,
    Enum: EnumJsonType,
    # numpy types:
    np.ndarray: NDArrayJsonType,
    np.bool_: BoolJsonType,
    np.integer: IntJsonType,
    np.floating: FloatJsonType,
    # jsonio types:
    EncodedValue: EncodedJsonType,
}

DEFAULT_TYPE_MAP = JsonType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, TYPE_TO_JSON_TYPE_MAP)


def register_json_type(type_: Any) -> Callable[[J], J]:
    """ Class decorator that adds a JsonType class to the default map, to support a new type everywhere.

        @register_json_type(Decimal)
        class DecimalJsonType(JsonType[Decimal]):
            ...

    Subclasses of `type_` are supported as well, unless they have their own entry.
    """
    def decorator(json_type_class: J) -> J:
        if not issubclass(json_type_class, JsonType):
            raise TypeError(f'{json_type_class} is not a JsonType subclass')
        TYPE_TO_JSON_TYPE_MAP[type_] = json_type_class
        _make_default_json_type.cache_clear()
        return json_type_class
    return decorator


def make_json_type(type_: Any, /, *, extra_json_types_map: Optional[TypeToJsonTypeMap] = None) -> JsonType:
    """ Like JsonType.from_type, but with the default maps.

    Types in `extra_json_types_map` take precedence over the default ones. If you need to fully customize the mapping
    use `JsonType.from_type` instead.
    """
    if not extra_json_types_map:
        return _make_default_json_type(type_)
    type_map = JsonType.TypeMap(DEFAULT_TYPE_ALIAS_MAP, {**TYPE_TO_JSON_TYPE_MAP, **extra_json_types_map})
    return JsonType.from_type(type_, type_map=type_map)


@lru_cache(maxsize=1024)
def _make_default_json_type(type_: Any) -> JsonType:
    return JsonType.from_type(type_, type_map=DEFAULT_TYPE_MAP)
