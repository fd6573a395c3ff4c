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

#: key used inside an object to hold a blob handle in place of inline data
BLOB_KEY = 'blob'

#: the text of an empty/unset value
NULL_TEXT = b'null'

#: characters JSON allows between tokens
JSON_WHITESPACE = ' \t\n\r'

#: first bytes of a gzip stream
GZIP_MAGIC = b'\x1f\x8b'
