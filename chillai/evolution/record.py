"""
Binary codec for persisted network records.

The layout is little-endian and carries explicit length fields so a record can
be shape-checked before any parameters are trusted::

    magic b"CHIL" | version u16 | layers u32 | input u32 | output u32
    per layer: rows u32 | cols u32 | rows*cols float32 weights | rows float32 biases

Layer 0 is always written with ``rows == cols == 0``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import List

import numpy as np

from chillai.exceptions import RecordFormatError

MAGIC = b"CHIL"
VERSION = 1

_HEADER = struct.Struct("<4sHIII")
_LAYER = struct.Struct("<II")
_FLOAT = np.dtype("<f4")


@dataclass
class NetworkRecord:
    """Weights and biases together with the declared input and output sizes."""

    weights: List[np.ndarray]
    biases: List[np.ndarray]
    input_size: int
    output_size: int

    @property
    def layer_count(self) -> int:
        return len(self.biases)


def encode(record: NetworkRecord) -> bytes:
    if len(record.weights) != len(record.biases):
        raise RecordFormatError(
            "Weights and biases disagree on the number of layers.",
            context={"weights": len(record.weights), "biases": len(record.biases)},
        )
    chunks = [_HEADER.pack(MAGIC, VERSION, record.layer_count, record.input_size, record.output_size)]
    for weights, biases in zip(record.weights, record.biases):
        block = np.asarray(weights, dtype=_FLOAT)
        rows = int(block.shape[0]) if block.ndim == 2 else 0
        cols = int(block.shape[1]) if block.ndim == 2 else 0
        bias = np.asarray(biases, dtype=_FLOAT).reshape(-1)
        if bias.shape[0] != rows:
            raise RecordFormatError(
                "Bias vector length does not match the weight block.",
                context={"rows": rows, "biases": int(bias.shape[0])},
            )
        chunks.append(_LAYER.pack(rows, cols))
        chunks.append(np.ascontiguousarray(block.reshape(rows, cols)).tobytes())
        chunks.append(bias.tobytes())
    return b"".join(chunks)


def _read_floats(view: memoryview, count: int, offset: int) -> np.ndarray:
    if count == 0:
        return np.zeros(0, dtype=np.float32)
    return np.frombuffer(view, dtype=_FLOAT, count=count, offset=offset)


def decode(data: bytes) -> NetworkRecord:
    view = memoryview(data)
    if len(view) < _HEADER.size:
        raise RecordFormatError("Record is shorter than its header.", context={"bytes": len(view)})

    magic, version, layers, input_size, output_size = _HEADER.unpack_from(view, 0)
    if magic != MAGIC:
        raise RecordFormatError("Not a ChillAI network record.", context={"magic": bytes(magic)})
    if version != VERSION:
        raise RecordFormatError(
            f"Unsupported record version {version}.",
            context={"supported": VERSION},
        )

    offset = _HEADER.size
    weights: List[np.ndarray] = []
    biases: List[np.ndarray] = []
    for layer in range(layers):
        if offset + _LAYER.size > len(view):
            raise RecordFormatError("Record is truncated.", context={"layer": layer})
        rows, cols = _LAYER.unpack_from(view, offset)
        offset += _LAYER.size
        needed = (rows * cols + rows) * _FLOAT.itemsize
        if offset + needed > len(view):
            raise RecordFormatError("Record is truncated.", context={"layer": layer})
        block = _read_floats(view, rows * cols, offset)
        offset += rows * cols * _FLOAT.itemsize
        bias = _read_floats(view, rows, offset)
        offset += rows * _FLOAT.itemsize
        weights.append(block.reshape(rows, cols).astype(np.float32))
        biases.append(bias.astype(np.float32))

    if offset != len(view):
        raise RecordFormatError(
            "Unexpected trailing bytes after the last layer.",
            context={"trailing": len(view) - offset},
        )
    return NetworkRecord(weights=weights, biases=biases, input_size=input_size, output_size=output_size)


__all__ = ["MAGIC", "VERSION", "NetworkRecord", "encode", "decode"]
