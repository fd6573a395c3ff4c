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

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, is_dataclass
from enum import Enum
from types import MappingProxyType as mappingproxy, NoneType, UnionType
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple, TypeAlias, TypeVar, Union, get_origin

from structlog import get_logger

from jsonio.utils.typing import get_args, is_subclass

if TYPE_CHECKING:
    from jsonio.json_types import JsonType


logger = get_logger()

T = TypeVar('T')
TypeAliasMap: TypeAlias = Mapping[Any, Any]
TypeToJsonTypeMap: TypeAlias = Mapping[Any, type['JsonType']]


def get_origin_classes(type_: Any) -> Iterator[type]:
    """ This util function is useful to generalize over a type T and unions A | B.

    A simple type T would be yielded directly, and an union will yield each type in it. Only origin types are yielded,
    arguments are discarded.

    >>> list(get_origin_classes(int))
    [<class 'int'>]
    >>> list(get_origin_classes(int | str))
    [<class 'int'>, <class 'str'>]
    >>> list(get_origin_classes(set[int] | dict[int, str]))
    [<class 'set'>, <class 'dict'>]
    """
    origin_type = get_origin(type_) or type_
    if origin_type is UnionType or origin_type is Union:
        for arg_type in get_args(type_) or tuple():
            yield get_origin(arg_type) or arg_type
    else:
        yield origin_type


def is_origin_hashable(type_: Any) -> bool:
    """ Checks whether the given type signature satisfies `collections.abc.Hashable`.

    This check ignores type arguments, but takes into account all types of an union.

    >>> is_origin_hashable(int | str | bytes)
    True
    >>> is_origin_hashable(int | str | bytes | set)
    False
    >>> is_origin_hashable(frozenset[int])
    True
    >>> is_origin_hashable(dict)
    False
    >>> is_origin_hashable(tuple)
    True

    Even though list is not hashable, a frozenset[list] is, simply because arguments are ignored:
    >>> is_origin_hashable(frozenset[list])
    True
    """
    return all(_is_origin_hashable(origin_class) for origin_class in get_origin_classes(type_))


def _is_origin_hashable(origin_class: type) -> bool:
    # XXX: hash(mapping_proxy_instance) fails with a TypeError, even though 3.12 reports it as Hashable
    if origin_class is mappingproxy:
        return False
    if origin_class is NoneType or origin_class is None:
        return True
    return is_subclass(origin_class, Hashable)


def pretty_type(type_: Any) -> str:
    """ Shows a cleaner string representation for a type.

    >>> pretty_type(None)
    'None'
    >>> pretty_type(int)
    'int'
    >>> pretty_type(list[int])
    'list[int]'
    """
    if type_ is NoneType or type_ is None:
        return 'None'
    elif hasattr(type_, '__args__') or not hasattr(type_, '__name__'):
        return str(type_)
    else:
        return type_.__name__


def is_namedtuple_class(type_: Any) -> bool:
    """
    >>> class Point(NamedTuple):
    ...     x: int
    ...     y: int
    >>> is_namedtuple_class(Point)
    True
    >>> is_namedtuple_class(tuple)
    False
    """
    return is_subclass(type_, tuple) and hasattr(type_, '_fields')


def get_usable_origin_type(type_: Any, /, *, type_map: 'JsonType.TypeMap') -> Any:
    """ The purpose of this function is to map a given type into a key that is usable in a `JsonType.TypeMap`.

    The returned key is guaranteed to exist in `type_map.json_types_map`, it is looked up in this order:

    1. the origin of the type itself, `dict` for `dict[str, int]`;
    2. the alias of the origin, according to `type_map.alias_map`;
    3. `NamedTuple` for named tuple classes;
    4. `dataclasses.dataclass` for dataclasses;
    5. `enum.Enum` for enums, mixed-in enums like `IntEnum` are still enums first;
    6. each class in the MRO of the origin, so subclasses of a supported class are supported as well.

    A `TypeError` is raised when none of the above is in the map:

    >>> from jsonio.json_types import DEFAULT_TYPE_MAP
    >>> get_usable_origin_type(dict[str, int], type_map=DEFAULT_TYPE_MAP)
    <class 'dict'>
    >>> class Tags(dict):
    ...     pass
    >>> get_usable_origin_type(Tags, type_map=DEFAULT_TYPE_MAP)
    <class 'dict'>
    >>> get_usable_origin_type(complex, type_map=DEFAULT_TYPE_MAP)
    Traceback (most recent call last):
    ...
    TypeError: type complex is not supported by any JsonType class
    """
    if isinstance(type_, str):
        raise NotImplementedError('string annotations are not currently supported')

    json_types_map = type_map.json_types_map
    origin_type = get_origin(type_) or type_

    if _in_map(origin_type, json_types_map):
        return origin_type

    aliased = type_map.alias_map.get(origin_type) if _is_hashable_key(origin_type) else None
    if aliased is not None and _in_map(aliased, json_types_map):
        logger.debug('type replaced', old=pretty_type(origin_type), new=pretty_type(aliased))
        return aliased

    if NamedTuple in json_types_map and is_namedtuple_class(origin_type):
        return NamedTuple

    if dataclass in json_types_map and isinstance(origin_type, type) and is_dataclass(origin_type):
        return dataclass

    if Enum in json_types_map and is_subclass(origin_type, Enum):
        return Enum

    if isinstance(origin_type, type):
        for base in origin_type.__mro__[1:]:
            if base is object:
                break
            if base in json_types_map:
                return base

    raise TypeError(f'type {pretty_type(type_)} is not supported by any JsonType class')


def _is_hashable_key(key: Any) -> bool:
    try:
        hash(key)
    except TypeError:
        return False
    return True


def _in_map(key: Any, json_types_map: TypeToJsonTypeMap) -> bool:
    return _is_hashable_key(key) and key in json_types_map

