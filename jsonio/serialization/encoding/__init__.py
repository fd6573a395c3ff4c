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
This module was made to hold simple encoding implementations, that is, the JSON literals: numbers, strings, booleans,
base64 byte strings and blob handles.

Simple in this context means "not compound". For compound values (arrays, objects, optionals, ...) the encoder should
be in the `compound_encoding` module.

The general organization should be that each submodule `x` deals with a single kind of literal and look like this:

    def size_x(ctx: WriteContext, value: ValueType, ...config params...) -> int:
        ...

    def write_x(ctx: WriteContext, value: ValueType, ...config params...) -> None:
        ...

    def read_x(ctx: ReadContext, ...config params...) -> ValueType:
        ...

`size_x` must return exactly the number of bytes `write_x` writes for the same value. Submodules should not have to
take into consideration how types are mapped to encoders.
"""
