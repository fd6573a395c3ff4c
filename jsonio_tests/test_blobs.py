import os
import tempfile
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import pytest

from jsonio import (
    BlobError,
    BlobHandle,
    ChunkFileBlobStore,
    EncodedValue,
    MemoryBlobStore,
    MissingBlobStoreError,
    as_json,
    from_json,
    make_json_type,
)
from jsonio.json_types import EncodedJsonType


@dataclass
class Checkpoint:
    step: int
    weights: npt.NDArray[np.float32]
    raw: bytes


def _make_checkpoint(size: int) -> Checkpoint:
    return Checkpoint(
        step=7,
        weights=np.arange(size, dtype=np.float32).reshape(-1, 4),
        raw=bytes(range(256)) * (size // 64),
    )


@pytest.fixture(params=['memory', 'file'])
def blobs(request):
    if request.param == 'memory':
        yield MemoryBlobStore()
    else:
        store = ChunkFileBlobStore.create_temp()
        yield store
        store.close()


def test_memory_store() -> None:
    store = MemoryBlobStore()
    assert store.end_offset() == 0
    assert store.append(b'abc') == BlobHandle(0, 3)
    assert store.append(memoryview(b'de')) == BlobHandle(3, 2)
    assert store.read(BlobHandle(1, 3)) == b'bcd'
    assert store.read(BlobHandle(5, 0)) == b''
    with pytest.raises(ValueError):
        store.read(BlobHandle(4, 2))


def test_file_store_reopen() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        path = os.path.join(tmpdir, 'blobs.bin')
        with ChunkFileBlobStore(path) as store:
            handle = store.append(b'first')
            store.append(b'second')
            # reads and appends can be interleaved
            assert store.read(handle) == b'first'
            assert store.append(b'third') == BlobHandle(11, 5)
        with ChunkFileBlobStore(path, readonly=True) as store:
            assert store.end_offset() == 16
            assert store.read(BlobHandle(5, 6)) == b'second'
            with pytest.raises(ValueError):
                store.append(b'x')
        with ChunkFileBlobStore(path) as store:
            assert store.append(b'!') == BlobHandle(16, 1)


class _ShortWriteFile:
    """Writes the first two bytes of every payload and then fails, like a full disk."""

    def __init__(self, file: Any) -> None:
        self._file = file

    def write(self, data: bytes) -> int:
        self._file.write(bytes(data[:2]))
        self._file.flush()
        raise OSError('no space left on device')

    def __getattr__(self, name: str) -> Any:
        return getattr(self._file, name)


def test_file_store_partial_append() -> None:
    store = ChunkFileBlobStore.create_temp()
    try:
        store.append(b'abc')
        file = store._file
        store._file = _ShortWriteFile(file)  # type: ignore[assignment]
        with pytest.raises(OSError):
            store.append(b'defgh')
        store._file = file
        # the two bytes that did reach the file are skipped by the next handle
        assert store.end_offset() == 5
        assert store.append(b'xyz') == BlobHandle(5, 3)
        assert store.read(BlobHandle(5, 3)) == b'xyz'
    finally:
        store.close()


def test_file_store_closed() -> None:
    store = ChunkFileBlobStore.create_temp()
    handle = store.append(b'x')
    store.close()
    store.close()
    with pytest.raises(ValueError):
        store.read(handle)


def test_large_payloads_go_to_the_store(blobs) -> None:
    checkpoint = _make_checkpoint(1024)
    encoded = as_json(checkpoint, Checkpoint, blobs=blobs)
    assert encoded.blobs is blobs
    text = str(encoded)
    assert text == (
        '{"step":7,"weights":{"dtype":"<f4","shape":[256,4],"blob":[0,4096]},'
        '"raw":{"blob":[4096,4096]}}'
    )
    assert blobs.end_offset() == 8192
    decoded = from_json(encoded, Checkpoint).unwrap()
    assert decoded.step == 7
    assert decoded.raw == checkpoint.raw
    assert decoded.weights.dtype == np.float32
    np.testing.assert_array_equal(decoded.weights, checkpoint.weights)


def test_small_payloads_are_inlined(blobs) -> None:
    encoded = as_json({'a': b'tiny', 'b': np.zeros(2, dtype=np.uint8)}, blobs=blobs)
    assert str(encoded) == '{"a":"dGlueQ==","b":{"dtype":"|u1","shape":[2],"data":[0,0]}}'
    assert blobs.end_offset() == 0


def test_appends_accumulate(blobs) -> None:
    first = as_json(b'a' * 100, bytes, blobs=blobs)
    second = as_json(b'b' * 100, bytes, blobs=blobs)
    assert str(first) == '{"blob":[0,100]}'
    assert str(second) == '{"blob":[100,100]}'
    assert from_json(first, bytes).unwrap() == b'a' * 100
    assert from_json(second, bytes).unwrap() == b'b' * 100


def test_without_a_store_everything_is_inlined() -> None:
    checkpoint = _make_checkpoint(64)
    encoded = as_json(checkpoint, Checkpoint)
    assert '"blob"' not in str(encoded)
    decoded = from_json(str(encoded), Checkpoint).unwrap()
    assert decoded.raw == checkpoint.raw


def test_any_reads_blobs(blobs) -> None:
    value = {'payload': b'x' * 200, 'array': np.ones((10, 10))}
    encoded = as_json(value, blobs=blobs)
    decoded = from_json(encoded, Any).unwrap()
    assert decoded['payload'] == b'x' * 200
    np.testing.assert_array_equal(decoded['array'], np.ones((10, 10)))


def test_missing_store() -> None:
    encoded = as_json(b'z' * 100, bytes, blobs=MemoryBlobStore())
    err = from_json(str(encoded), bytes).unwrap_err()
    assert isinstance(err, MissingBlobStoreError)
    err = from_json(str(encoded), Any).unwrap_err()
    assert isinstance(err, MissingBlobStoreError)


def test_unresolved_handle() -> None:
    store = MemoryBlobStore()
    store.append(b'12345')
    err = from_json('{"blob":[3,10]}', bytes, blobs=store).unwrap_err()
    assert isinstance(err, BlobError)
    text = '{"dtype":"<f8","shape":[1],"blob":[0,5]}'
    err = from_json(text, np.ndarray, blobs=store).unwrap_err()
    assert 'expected 8' in str(err)


def test_explicit_store_overrides() -> None:
    store = MemoryBlobStore()
    encoded = as_json(b'q' * 100, bytes, blobs=store)
    other = MemoryBlobStore()
    other.append(b'w' * 100)
    assert from_json(encoded, bytes, blobs=other).unwrap() == b'w' * 100


def test_embedded_encoded_value(blobs) -> None:
    inner = as_json({'data': b'i' * 100}, blobs=blobs)
    outer = as_json({'inner': inner, 'extra': b'o' * 100}, dict[str, Any], blobs=blobs)
    assert str(outer) == '{"inner":{"data":{"blob":[0,100]}},"extra":{"blob":[100,100]}}'

    json_type = make_json_type(dict[str, EncodedValue])
    decoded = from_json(outer, dict[str, EncodedValue]).unwrap()
    assert decoded['inner'] == inner
    assert decoded['inner'].blobs is blobs
    assert isinstance(json_type._value, EncodedJsonType)
    assert from_json(decoded['extra'], bytes).unwrap() == b'o' * 100


def test_embedded_value_with_other_store() -> None:
    inner = as_json(b'i' * 100, bytes, blobs=MemoryBlobStore())
    with pytest.raises(ValueError):
        as_json([inner], list[EncodedValue], blobs=MemoryBlobStore())
