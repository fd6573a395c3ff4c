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

from typing import Any, get_args as _typing_get_args


def get_args(type_: Any) -> tuple[Any, ...] | None:
    """Like `typing.get_args`, but returns `None` instead of `()` when the type was not parametrized at all.

    >>> get_args(list[int])
    (<class 'int'>,)
    >>> get_args(tuple[()])
    ()
    >>> print(get_args(list))
    None
    """
    if not hasattr(type_, '__args__'):
        return None
    return _typing_get_args(type_)


def is_subclass(type_: Any, class_or_tuple: type | tuple[type, ...]) -> bool:
    """Like `issubclass`, but returns `False` for things that are not classes, like `list[int]` or `int | None`.

    >>> is_subclass(bool, int)
    True
    >>> is_subclass(list[int], list)
    False
    >>> is_subclass(None, object)
    False
    """
    return isinstance(type_, type) and not _typing_get_args(type_) and issubclass(type_, class_or_tuple)
