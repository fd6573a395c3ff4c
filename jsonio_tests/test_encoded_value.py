import gzip
import os
import tempfile
from unittest import TestCase

from jsonio import EncodedValue, MemoryBlobStore, PersistenceError, SizeMismatchError, as_json
from jsonio.blobs import ChunkFileBlobStore


class EncodedValueTestCase(TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, 'value.json')

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_default_is_null(self) -> None:
        value = EncodedValue()
        self.assertTrue(value.is_null())
        self.assertEqual(str(value), 'null')
        self.assertIsNone(value.blobs)

    def test_is_null_and_is_string(self) -> None:
        value = as_json('done')
        self.assertFalse(value.is_null())
        self.assertTrue(value.is_string('done'))
        self.assertFalse(value.is_string('don'))
        self.assertTrue(EncodedValue(b' "a\\"b" ').is_string('a"b'))
        value.set_null()
        self.assertTrue(value.is_null())
        self.assertFalse(value.is_string('null'))

    def test_equality(self) -> None:
        self.assertEqual(as_json([1, 2]), EncodedValue(b'[1,2]'))
        self.assertNotEqual(as_json([1, 2]), EncodedValue(b'[1, 2]'))
        # the blob store does not take part
        self.assertEqual(EncodedValue(b'1', MemoryBlobStore()), EncodedValue(b'1'))
        with self.assertRaises(TypeError):
            hash(EncodedValue())

    def test_repr(self) -> None:
        self.assertEqual(repr(EncodedValue(b'[1]')), "EncodedValue('[1]')")
        long_value = as_json(list(range(100)))
        self.assertTrue(repr(long_value).endswith("...')"))

    def test_write_protocol(self) -> None:
        value = EncodedValue(b'1')
        buffer = value.start_write(2)
        buffer[:] = b'42'
        # nothing changes until the write is committed
        self.assertEqual(value.text, b'1')
        value.end_write(2)
        self.assertEqual(value.text, b'42')

    def test_write_protocol_errors(self) -> None:
        value = EncodedValue(b'1')
        value.start_write(3)
        with self.assertRaises(SizeMismatchError):
            value.end_write(2)
        self.assertEqual(value.text, b'1')
        with self.assertRaises(SizeMismatchError):
            value.end_write(0)
        value.start_write(1)
        value.abort_write()
        with self.assertRaises(SizeMismatchError):
            value.end_write(1)
        with self.assertRaises(ValueError):
            value.start_write(-1)

    def test_use_blobs(self) -> None:
        value = EncodedValue()
        store = MemoryBlobStore()
        value.use_blobs(store)
        self.assertIs(value.blobs, store)
        value.use_blobs(os.path.join(self.tmpdir.name, 'blobs.bin'))
        self.assertIsInstance(value.blobs, ChunkFileBlobStore)
        value.blobs.close()

    def test_write_and_read_compressed(self) -> None:
        value = as_json({'a': [1.5, 2.5]})
        written = value.write_to_file(self.path)
        # compression is enabled in the test settings
        self.assertEqual(written, self.path + '.gz')
        self.assertFalse(os.path.exists(self.path))
        with gzip.open(written, 'rb') as file:
            self.assertEqual(file.read(), value.text)

        loaded = EncodedValue()
        self.assertTrue(loaded.read_from_file(self.path))
        self.assertEqual(loaded, value)

    def test_write_and_read_plain(self) -> None:
        value = as_json('plain')
        written = value.write_to_file(self.path, enable_compression=False)
        self.assertEqual(written, self.path)
        with open(self.path, 'rb') as file:
            self.assertEqual(file.read(), b'"plain"')
        loaded = EncodedValue()
        self.assertTrue(loaded.read_from_file(self.path))
        self.assertTrue(loaded.is_string('plain'))

    def test_rewrite_removes_other_variant(self) -> None:
        as_json(1).write_to_file(self.path, enable_compression=True)
        as_json(2).write_to_file(self.path, enable_compression=False)
        self.assertFalse(os.path.exists(self.path + '.gz'))
        as_json(3).write_to_file(self.path, enable_compression=True)
        self.assertFalse(os.path.exists(self.path))
        loaded = EncodedValue()
        loaded.read_from_file(self.path)
        self.assertEqual(str(loaded), '3')
        self.assertEqual(os.listdir(self.tmpdir.name), ['value.json.gz'])

    def test_compression_is_detected_from_contents(self) -> None:
        with open(self.path, 'wb') as file:
            file.write(gzip.compress(b'[true]'))
        loaded = EncodedValue()
        self.assertTrue(loaded.read_from_file(self.path))
        self.assertEqual(str(loaded), '[true]')

    def test_read_not_found(self) -> None:
        loaded = EncodedValue(b'7')
        self.assertFalse(loaded.read_from_file(self.path))
        self.assertEqual(str(loaded), '7')

    def test_read_keeps_blobs(self) -> None:
        store = MemoryBlobStore()
        as_json(1).write_to_file(self.path)
        loaded = EncodedValue(blobs=store)
        loaded.read_from_file(self.path)
        self.assertIs(loaded.blobs, store)

    def test_read_corrupt_gzip(self) -> None:
        with open(self.path + '.gz', 'wb') as file:
            file.write(gzip.compress(b'[1,2,3]')[:-6])
        with self.assertRaises(PersistenceError):
            EncodedValue().read_from_file(self.path)

    def test_read_directory(self) -> None:
        os.mkdir(self.path)
        with self.assertRaises(PersistenceError):
            EncodedValue().read_from_file(self.path)

    def test_write_to_missing_directory(self) -> None:
        path = os.path.join(self.tmpdir.name, 'missing', 'value.json')
        with self.assertRaises(PersistenceError):
            as_json(1).write_to_file(path)
        self.assertEqual(os.listdir(self.tmpdir.name), [])
