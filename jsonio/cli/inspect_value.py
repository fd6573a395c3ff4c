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

""" Prints a persisted encoded value and, when a blob file is given, checks every blob handle it holds.
"""

import json
from typing import Any, Iterator, Optional

from jsonio.blobs import BlobHandle, BlobStore
from jsonio.serialization.consts import BLOB_KEY


def iter_blob_handles(tree: Any) -> Iterator[BlobHandle]:
    """Yield the handle of every `"blob":[offset,length]` entry found in a parsed JSON tree."""
    if isinstance(tree, dict):
        for key, value in tree.items():
            if key == BLOB_KEY and _is_handle(value):
                yield BlobHandle(*value)
            else:
                yield from iter_blob_handles(value)
    elif isinstance(tree, list):
        for item in tree:
            yield from iter_blob_handles(item)


def _is_handle(value: Any) -> bool:
    return isinstance(value, list) and len(value) == 2 and all(type(i) is int and i >= 0 for i in value)


def check_handle(blobs: BlobStore, handle: BlobHandle) -> Optional[str]:
    """Return why a handle can't be resolved, or `None` if it can."""
    try:
        blobs.read(handle)
    except ValueError as e:
        return str(e)
    return None


def main(argv: list[str], prog: Optional[str] = None) -> int:
    from structlog import get_logger

    from jsonio.api import from_json
    from jsonio.cli.util import (
        EXIT_FAILURE,
        EXIT_NOT_FOUND,
        EXIT_OK,
        add_blobs_argument,
        create_parser,
        load_encoded_value,
        open_blobs,
    )

    logger = get_logger()

    parser = create_parser(prog=prog)
    parser.add_argument('file', help='Path of the persisted value, ".gz" is tried as well')
    add_blobs_argument(parser)
    parser.add_argument('--type-check', action='store_true', help='Decode the whole value and report any error')
    args = parser.parse_args(argv)

    blobs = open_blobs(args.blobs, readonly=True)
    try:
        value = load_encoded_value(args.file, blobs)
        if value is None:
            return EXIT_NOT_FOUND

        print(str(value))
        exit_code = EXIT_OK

        if blobs is not None:
            try:
                tree = json.loads(value.text)
            except ValueError as e:
                logger.error('value is not valid JSON', path=args.file, error=str(e))
                return EXIT_FAILURE
            for handle in iter_blob_handles(tree):
                problem = check_handle(blobs, handle)
                if problem is None:
                    print(f'blob [{handle.offset},{handle.length}] ok')
                else:
                    print(f'blob [{handle.offset},{handle.length}] unresolved: {problem}')
                    exit_code = EXIT_FAILURE

        if args.type_check:
            result = from_json(value, Any)
            if result.is_err():
                logger.error('value does not decode', path=args.file, error=str(result.err()))
                exit_code = EXIT_FAILURE
            else:
                print('decode ok')

        return exit_code
    finally:
        if blobs is not None:
            blobs.close()
