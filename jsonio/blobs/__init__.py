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
Blob stores: append-only binary side stores, addressed by `BlobHandle`.

Encoded values keep a (shared) reference to the store their large payloads were appended to, the textual encoding only
holds the handles. Two implementations are provided, `MemoryBlobStore` and `ChunkFileBlobStore`, users can provide
their own by subclassing `BlobStore`.
"""

from .base import BlobHandle, BlobStore
from .chunk_file import ChunkFileBlobStore
from .memory import MemoryBlobStore

__all__ = ['BlobHandle', 'BlobStore', 'ChunkFileBlobStore', 'MemoryBlobStore']
