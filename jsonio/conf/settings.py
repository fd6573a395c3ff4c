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

from pathlib import Path
from typing import Union

from pydantic import Field, field_validator

from jsonio.utils import pydantic
from jsonio.utils.yaml import dict_from_yaml


class JsonIOSettings(pydantic.BaseModel):
    # Binary payloads (bytes values, array buffers) larger than this many bytes are moved to the blob store, when one
    # is attached. Smaller payloads are always inlined.
    BLOB_THRESHOLD: int = Field(default=1024, ge=0)

    # Whether `EncodedValue.write_to_file` compresses by default.
    ENABLE_GZIP: bool = True

    GZIP_COMPRESS_LEVEL: int = 6

    # Re-run the sizing of every nested value while writing and fail on the first divergence. This is slow and meant
    # for tests and for debugging new json types.
    SLOW_ASSERTS: bool = False

    @field_validator('GZIP_COMPRESS_LEVEL')
    @classmethod
    def _validate_compress_level(cls, level: int) -> int:
        if not 0 <= level <= 9:
            raise ValueError(f'GZIP_COMPRESS_LEVEL must be between 0 and 9, got {level}')
        return level

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'JsonIOSettings':
        """Takes a filepath to a yaml file and returns a validated JsonIOSettings instance."""
        settings_dict = dict_from_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
