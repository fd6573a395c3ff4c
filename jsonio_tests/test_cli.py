import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO

import numpy as np
from structlog.testing import capture_logs

from jsonio import ChunkFileBlobStore, EncodedValue, as_json, from_json
from jsonio.cli import add_gradient, inspect_value, interpolate, main
from jsonio.cli.util import EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_OK


class CliMainTest(unittest.TestCase):
    def test_init(self):
        cli = main.CliManager()

        f = StringIO()
        with capture_logs():
            with redirect_stdout(f):
                cli.help()
        output = f.getvalue()

        self.assertIn('[files]', output)
        self.assertIn('[numeric]', output)
        for cmd in ('inspect', 'interpolate', 'add_gradient'):
            self.assertIn(cmd, output)

    def test_no_command(self):
        f = StringIO()
        with redirect_stdout(f):
            self.assertEqual(main.CliManager().execute_from_command_line([]), 0)
        self.assertIn('Available subcommands', f.getvalue())

    def test_unknown_command(self):
        f = StringIO()
        with redirect_stdout(f):
            exit_code = main.CliManager().execute_from_command_line(['frobnicate'])
        self.assertEqual(exit_code, EXIT_FAILURE)
        self.assertIn('Unknown command: "frobnicate"', f.getvalue())


class _CliFilesTest(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name: str) -> str:
        return os.path.join(self.tmpdir.name, name)

    def run_cmd(self, module, argv: list[str]) -> tuple[int, str, str, list]:
        out = StringIO()
        err = StringIO()
        with capture_logs() as logs:
            with redirect_stdout(out), redirect_stderr(err):
                exit_code = module.main(argv)
        return exit_code, out.getvalue(), err.getvalue(), logs


class InspectTest(_CliFilesTest):
    def test_inspect(self):
        with ChunkFileBlobStore(self.path('blobs.bin')) as store:
            value = as_json({'raw': b'r' * 100, 'n': 1}, blobs=store)
            value.write_to_file(self.path('value.json'))

        exit_code, out, _, _ = self.run_cmd(
            inspect_value,
            [self.path('value.json'), '--blobs', self.path('blobs.bin'), '--type-check'],
        )

        self.assertEqual(exit_code, EXIT_OK)
        self.assertEqual(out.splitlines(), [
            '{"raw":{"blob":[0,100]},"n":1}',
            'blob [0,100] ok',
            'decode ok',
        ])

    def test_inspect_without_blobs(self):
        as_json([1, 2]).write_to_file(self.path('value.json'), enable_compression=False)
        exit_code, out, _, _ = self.run_cmd(inspect_value, [self.path('value.json')])
        self.assertEqual(exit_code, EXIT_OK)
        self.assertEqual(out, '[1,2]\n')

    def test_inspect_not_found(self):
        exit_code, out, err, _ = self.run_cmd(inspect_value, [self.path('missing.json')])
        self.assertEqual(exit_code, EXIT_NOT_FOUND)
        self.assertEqual(out, '')
        self.assertIn('not found', err)

    def test_inspect_unresolved_blob(self):
        open(self.path('blobs.bin'), 'wb').close()
        EncodedValue(b'{"blob":[0,100]}').write_to_file(self.path('value.json'))

        exit_code, out, _, _ = self.run_cmd(
            inspect_value,
            [self.path('value.json'), '--blobs', self.path('blobs.bin')],
        )

        self.assertEqual(exit_code, EXIT_FAILURE)
        self.assertIn('blob [0,100] unresolved', out)

    def test_inspect_type_check_failure(self):
        EncodedValue(b'{"blob":[0,100]}').write_to_file(self.path('value.json'))
        exit_code, _, _, logs = self.run_cmd(inspect_value, [self.path('value.json'), '--type-check'])
        self.assertEqual(exit_code, EXIT_FAILURE)
        self.assertEqual([log['event'] for log in logs], ['value does not decode'])
        self.assertEqual(logs[0]['log_level'], 'error')


class CombinatorsTest(_CliFilesTest):
    def test_interpolate(self):
        as_json({'w': [0.0, 10.0], 'n': 2}).write_to_file(self.path('a.json'))
        as_json({'w': [1.0, 20.0], 'n': 4}).write_to_file(self.path('b.json'), enable_compression=False)

        exit_code, _, _, logs = self.run_cmd(
            interpolate,
            [self.path('a.json'), self.path('b.json'), '0.5', self.path('out.json'), '--no-gzip'],
        )

        self.assertEqual(exit_code, EXIT_OK)
        self.assertEqual([log['event'] for log in logs], ['result written'])
        with open(self.path('out.json'), 'rb') as file:
            self.assertEqual(file.read(), b'{"w":[0.5,15.0],"n":3}')

    def test_add_gradient_with_blobs(self):
        with ChunkFileBlobStore(self.path('blobs.bin')) as store:
            as_json({'w': np.ones(16)}, blobs=store).write_to_file(self.path('a.json'))
            as_json({'w': np.full(16, 2.0)}, blobs=store).write_to_file(self.path('g.json'))

        exit_code, _, _, _ = self.run_cmd(
            add_gradient,
            [self.path('a.json'), self.path('g.json'), '-0.5', self.path('out.json'),
             '--blobs', self.path('blobs.bin')],
        )

        self.assertEqual(exit_code, EXIT_OK)
        # compression is enabled in the test settings
        self.assertTrue(os.path.exists(self.path('out.json.gz')))
        result = EncodedValue()
        self.assertTrue(result.read_from_file(self.path('out.json')))
        self.assertEqual(str(result), '{"w":{"dtype":"<f8","shape":[16],"blob":[256,128]}}')
        with ChunkFileBlobStore(self.path('blobs.bin'), readonly=True) as store:
            tree = from_json(result, dict[str, np.ndarray], blobs=store).unwrap()
        np.testing.assert_array_equal(tree['w'], np.zeros(16))

    def test_shape_mismatch(self):
        as_json({'w': [1.0]}).write_to_file(self.path('a.json'))
        as_json({'w': [1.0, 2.0]}).write_to_file(self.path('g.json'))

        exit_code, _, _, logs = self.run_cmd(
            add_gradient,
            [self.path('a.json'), self.path('g.json'), '1', self.path('out.json')],
        )

        self.assertEqual(exit_code, EXIT_FAILURE)
        self.assertEqual(logs[0]['event'], 'cannot combine values')
        self.assertIn('w: length 1 does not match 2', logs[0]['error'])
        self.assertFalse(os.path.exists(self.path('out.json.gz')))

    def test_missing_operand(self):
        as_json(1).write_to_file(self.path('a.json'))
        exit_code, _, err, _ = self.run_cmd(
            interpolate,
            [self.path('a.json'), self.path('b.json'), '0.5', self.path('out.json')],
        )
        self.assertEqual(exit_code, EXIT_NOT_FOUND)
        self.assertIn('not found', err)
