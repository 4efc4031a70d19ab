# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
RIFF (Resource Interchange File Format) utility functions.

Reading walks a seekable stream chunk by chunk, honouring the pad byte that
follows odd-sized bodies. Writing builds chunks, LIST chunks and RIFF forms as
bytes.
"""

import struct
from typing import BinaryIO


def read_chunk_header(f: BinaryIO) -> tuple[bytes, int]:
    """
    Reads a RIFF chunk header (ID and little-endian size).

    Raises:
        EOFError: If fewer than 8 bytes remain.
    """
    header = f.read(8)
    if len(header) < 8:
        raise EOFError(f"Unexpected end of data while reading chunk header ({len(header)} of 8 bytes).")

    chunk_id, chunk_size = struct.unpack("<4sI", header)
    return chunk_id, chunk_size


def read_chunk_body(f: BinaryIO, chunk_size: int) -> bytes:
    """
    Reads a chunk body and its pad byte.

    Raises:
        EOFError: If the body is shorter than declared.
    """
    data = f.read(chunk_size)
    if len(data) < chunk_size:
        raise EOFError(f"Chunk declares {chunk_size} bytes but only {len(data)} remain.")

    skip_padding(f, chunk_size)
    return data


def skip_chunk_body(f: BinaryIO, chunk_size: int) -> None:
    f.seek(chunk_size, 1)
    skip_padding(f, chunk_size)


def skip_padding(f: BinaryIO, chunk_size: int) -> None:
    """
    Skips the pad byte that follows an odd-sized chunk body.
    """
    if chunk_size % 2:
        f.read(1)


def make_chunk(chunk_id: bytes, data: bytes) -> bytes:
    """
    Creates a RIFF chunk, padding odd-sized data to an even length.
    """
    if len(chunk_id) != 4:
        raise ValueError("Chunk ID must be 4 bytes long.")

    chunk = struct.pack("<4sI", chunk_id, len(data)) + data
    if len(data) % 2:
        chunk += b"\x00"
    return chunk


def make_list_chunk(list_type: bytes, data: bytes) -> bytes:
    """
    Creates a LIST chunk (e.g., INFO, sdta, pdta).
    """
    if len(list_type) != 4:
        raise ValueError("List type must be 4 bytes long.")

    return make_chunk(b"LIST", list_type + data)


def make_riff(form_type: bytes, data: bytes) -> bytes:
    """
    Creates a top-level RIFF chunk of the given form type (e.g., b"WAVE", b"sfbk").
    """
    if len(form_type) != 4:
        raise ValueError("Form type must be 4 bytes long.")

    return make_chunk(b"RIFF", form_type + data)
