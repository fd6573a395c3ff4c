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
This module was made to hold compound encoding implementations.

Compound encoders are encoders that are generic in some way and will delegate the encoding of some portion to another
encoder. For example an array encoder writes the brackets and commas and delegates each element to an encoder that
knows how to encode `T`.

The general organization should be that each submodule `x` deals with a single kind of value and look like this:

    def size_x(ctx: WriteContext, value: ValueType, sizer: Sizer[T], ...config params...) -> int:
        ...

    def write_x(ctx: WriteContext, value: ValueType, writer: Writer[T], ...config params...) -> None:
        ...

    def read_x(ctx: ReadContext, reader: Reader[T], ...config params...) -> ValueType:
        ...

The "config params" are optional and specific to each encoder. Submodules should not have to take into consideration
how types are mapped to encoders.
"""

from typing import Protocol, TypeVar

from jsonio.serialization.context import ReadContext, WriteContext

T_co = TypeVar('T_co', covariant=True)
T_contra = TypeVar('T_contra', contravariant=True)


class Reader(Protocol[T_co]):
    def __call__(self, ctx: ReadContext, /) -> T_co:
        ...


class Sizer(Protocol[T_contra]):
    def __call__(self, ctx: WriteContext, value: T_contra, /) -> int:
        ...


class Writer(Protocol[T_contra]):
    def __call__(self, ctx: WriteContext, value: T_contra, /) -> None:
        ...
