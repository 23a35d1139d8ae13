"""Tests for the persisted network record codec."""

import struct

import numpy as np
import pytest

from chillai.evolution.record import MAGIC, VERSION, NetworkRecord, decode, encode
from chillai.exceptions import RecordFormatError


def _record() -> NetworkRecord:
    return NetworkRecord(
        weights=[
            np.zeros((0, 0), dtype=np.float32),
            np.array([[1.0, -2.0], [0.5, 0.25], [3.0, 4.0]], dtype=np.float32),
            np.array([[0.1, 0.2, 0.3]], dtype=np.float32),
        ],
        biases=[
            np.zeros(0, dtype=np.float32),
            np.array([0.0, 1.0, -1.0], dtype=np.float32),
            np.array([0.75], dtype=np.float32),
        ],
        input_size=2,
        output_size=1,
    )


def test_header_layout_is_little_endian() -> None:
    data = encode(_record())
    magic, version, layers, input_size, output_size = struct.unpack_from("<4sHIII", data, 0)
    assert magic == MAGIC
    assert version == VERSION
    assert (layers, input_size, output_size) == (3, 2, 1)


def test_decode_restores_values_and_shapes() -> None:
    original = _record()
    decoded = decode(encode(original))
    assert decoded.layer_count == 3
    assert decoded.weights[0].shape == (0, 0)
    assert decoded.biases[0].shape == (0,)
    for a, b in zip(original.weights, decoded.weights):
        assert np.array_equal(a, b)
    for a, b in zip(original.biases, decoded.biases):
        assert np.array_equal(a, b)


def test_bad_magic_is_rejected() -> None:
    data = bytearray(encode(_record()))
    data[:4] = b"NOPE"
    with pytest.raises(RecordFormatError):
        decode(bytes(data))


def test_unknown_version_is_rejected() -> None:
    data = bytearray(encode(_record()))
    struct.pack_into("<H", data, 4, VERSION + 1)
    with pytest.raises(RecordFormatError) as err:
        decode(bytes(data))
    assert "version" in str(err.value)


def test_truncated_record_is_rejected() -> None:
    data = encode(_record())
    with pytest.raises(RecordFormatError):
        decode(data[:-3])


def test_trailing_bytes_are_rejected() -> None:
    with pytest.raises(RecordFormatError):
        decode(encode(_record()) + b"\x00")


def test_mismatched_bias_length_cannot_be_encoded() -> None:
    record = _record()
    record.biases[1] = np.zeros(2, dtype=np.float32)
    with pytest.raises(RecordFormatError):
        encode(record)
