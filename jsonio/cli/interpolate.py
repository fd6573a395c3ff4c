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

""" Writes the interpolation of two persisted values, `(1 - t) * a + t * b` on every numeric leaf.
"""

from typing import Optional


def main(argv: list[str], prog: Optional[str] = None) -> int:
    from jsonio.cli.util import add_blobs_argument, create_parser, run_combinator
    from jsonio.numeric import interpolate

    parser = create_parser(prog=prog)
    parser.add_argument('a', help='Path of the value at t=0')
    parser.add_argument('b', help='Path of the value at t=1')
    parser.add_argument('t', type=float, help='Interpolation factor')
    parser.add_argument('out', help='Path of the result')
    add_blobs_argument(parser)
    parser.add_argument('--no-gzip', action='store_true', help='Write the result uncompressed')
    args = parser.parse_args(argv)

    return run_combinator(args, args.a, args.b, lambda a, b: interpolate(a, b, args.t))
