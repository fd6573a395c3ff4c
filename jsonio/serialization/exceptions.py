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

class SerializationError(Exception):
    pass


class DecodeError(SerializationError, ValueError):
    """Base class for every recoverable failure while reading an encoding.

    `pos` is the offset in the source text where the reader was when the problem was detected, or `None` when the
    failure is not tied to a position.
    """

    def __init__(self, message: str, *, pos: int | None = None) -> None:
        super().__init__(message if pos is None else f'{message} (at position {pos})')
        self.pos = pos


class JsonSyntaxError(DecodeError):
    """The text is not valid JSON at the given position."""


class JsonTypeError(DecodeError):
    """The text is valid JSON but it does not have the shape expected by the type being read."""


class MissingBlobStoreError(DecodeError):
    """A blob handle was found but there is no blob store to resolve it against."""


class BlobError(DecodeError):
    """A blob handle could not be resolved, or the payload it points to has an unexpected length."""


class SizeMismatchError(SerializationError, AssertionError):
    """The writing pass did not produce exactly the number of bytes predicted by the sizing pass.

    This is always a bug in the size/write implementation of some type and the buffer being written must be discarded.
    """


class PersistenceError(SerializationError, OSError):
    """Reading or writing an encoded value from/to a file failed for a reason other than the file not existing."""
