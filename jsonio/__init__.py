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
This module exports the main API: encoding values to JSON with large binary payloads off-loaded to a blob store, and
decoding them back according to a type annotation.
"""

from jsonio.api import as_json, from_json, to_json
from jsonio.blobs import BlobHandle, BlobStore, ChunkFileBlobStore, MemoryBlobStore
from jsonio.encoded import EncodedValue
from jsonio.json_types import JsonType, make_json_type, register_json_type
from jsonio.numeric import ShapeMismatchError, add_gradient, interpolate
from jsonio.serialization import (
    BlobError,
    DecodeError,
    JsonSyntaxError,
    JsonTypeError,
    MissingBlobStoreError,
    PersistenceError,
    SerializationError,
    SizeMismatchError,
)
from jsonio.version import __version__

__all__ = [
    'BlobError',
    'BlobHandle',
    'BlobStore',
    'ChunkFileBlobStore',
    'DecodeError',
    'EncodedValue',
    'JsonSyntaxError',
    'JsonType',
    'JsonTypeError',
    'MemoryBlobStore',
    'MissingBlobStoreError',
    'PersistenceError',
    'SerializationError',
    'ShapeMismatchError',
    'SizeMismatchError',
    '__version__',
    'add_gradient',
    'as_json',
    'from_json',
    'interpolate',
    'make_json_type',
    'register_json_type',
    'to_json',
]
