# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SoundFont2 parser.

Reads the RIFF/sfbk container from a file path or an in-memory buffer and
decodes the INFO, sdta and pdta lists into a SoundFontBank.
"""

import io
import struct
from pathlib import Path

import numpy as np

from .constants import (
    BYTES_PER_FRAME,
    IBAG_SIZE,
    IGEN_SIZE,
    IMOD_SIZE,
    INST_SIZE,
    NAME_SIZE,
    PBAG_SIZE,
    PGEN_SIZE,
    PHDR_SIZE,
    PMOD_SIZE,
    REQUIRED_PDTA_CHUNKS,
    SHDR_SIZE,
)
from .errors import SF2FormatError
from .records import (
    Bag,
    Generator,
    InstrumentHeader,
    Modulator,
    PresetHeader,
    SampleHeader,
    SoundFontBank,
)
from .riff import read_chunk_body, read_chunk_header, skip_chunk_body, skip_padding

HYDRA_CHUNKS = {"phdr", "pbag", "pmod", "pgen", "inst", "ibag", "imod", "igen", "shdr"}

INFO_KEYS = {
    "isng": "sound_engine",
    "INAM": "bank_name",
    "ICOP": "copyright",
    "ICMT": "comment",
    "ISFT": "software",
    "ICRD": "creation_date",
    "IENG": "engineer",
    "IPRD": "product",
}


def decode_name(raw):
    """
    Decodes a fixed-width, NUL-padded ASCII name field.
    """
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace").strip()


class SoundFontParser:
    """
    A parser for SF2 files.
    """

    def __init__(self, source):
        """
        Initializes the SoundFontParser.

        Args:
            source: Path to an SF2 file, or the file's contents as bytes.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            self.filepath = None
            self.buffer = bytes(source)
        else:
            self.filepath = Path(source)
            self.buffer = None

        self.file = None
        self.info_data = {}
        self.smpl_data = b""
        self.pdta = {}

    def parse(self):
        """
        Parses the entire SF2 file.

        Returns:
            The decoded SoundFontBank.
        """
        if self.buffer is None:
            self.buffer = self.filepath.read_bytes()

        self.file = io.BytesIO(self.buffer)
        self.info_data = {}
        self.smpl_data = b""
        self.pdta = {}

        # RIFF header
        riff_id = self.file.read(4)
        if riff_id != b"RIFF":
            raise SF2FormatError("Not a RIFF file")

        size_bytes = self.file.read(4)
        if len(size_bytes) < 4:
            raise SF2FormatError("Truncated RIFF header")

        form_type = self.file.read(4)
        if form_type != b"sfbk":
            raise SF2FormatError("Not a SoundFont file")

        self._parse_chunks()
        return self._build_bank()

    def _parse_chunks(self):
        """
        Parses INFO, sdta, and pdta chunks.
        """
        while True:
            try:
                chunk_id, chunk_size = read_chunk_header(self.file)
            except EOFError:
                break

            if chunk_id == b"LIST":
                list_type = self.file.read(4)
                body_size = chunk_size - 4
                if list_type == b"INFO":
                    self._parse_info_list(body_size)
                elif list_type == b"sdta":
                    self._parse_sdta_list(body_size)
                elif list_type == b"pdta":
                    self._parse_pdta_list(body_size)
                else:
                    self.file.seek(body_size, 1)  # Skip unknown list
                skip_padding(self.file, chunk_size)
            else:
                skip_chunk_body(self.file, chunk_size)  # Skip unknown chunk

    def _iter_subchunks(self, size):
        """
        Yields (id, size) of each sub-chunk of a LIST body, leaving the file
        positioned at the sub-chunk's data.
        """
        chunk_end = self.file.tell() + size
        while self.file.tell() < chunk_end:
            try:
                yield read_chunk_header(self.file)
            except EOFError as e:
                raise SF2FormatError(f"Truncated LIST chunk: {e}") from e

    def _read_body(self, sub_id, sub_size):
        try:
            return read_chunk_body(self.file, sub_size)
        except EOFError as e:
            raise SF2FormatError(f"\"{sub_id.decode('ascii', errors='replace')}\": {e}") from e

    def _parse_info_list(self, size):
        """
        Parses the INFO-list chunk.
        """
        for sub_id, sub_size in self._iter_subchunks(size):
            self._store_info_data(sub_id, self._read_body(sub_id, sub_size))

    def _store_info_data(self, sub_id, data):
        """
        Stores INFO data.
        """
        if sub_id == b"ifil" and len(data) >= 4:
            # Version info
            major, minor = struct.unpack("<HH", data[:4])
            self.info_data["version"] = f"{major}.{minor:02d}"
        else:
            key = sub_id.decode("ascii", errors="ignore").rstrip("\x00")
            value = data.decode("ascii", errors="ignore").rstrip("\x00")
            self.info_data[INFO_KEYS.get(key, key.lower())] = value

    def _parse_sdta_list(self, size):
        """
        Parses the sdta-list chunk. Only the 16-bit smpl chunk is kept.
        """
        for sub_id, sub_size in self._iter_subchunks(size):
            if sub_id == b"smpl":
                self.smpl_data = self._read_body(sub_id, sub_size)
            else:
                # sm24 and unknown chunks
                skip_chunk_body(self.file, sub_size)

    def _parse_pdta_list(self, size):
        """
        Parses the pdta-list (Hydra) chunk.
        """
        for sub_id, sub_size in self._iter_subchunks(size):
            sub_id_str = sub_id.decode("ascii", errors="ignore")
            if sub_id_str in HYDRA_CHUNKS:
                self.pdta[sub_id_str] = self._read_body(sub_id, sub_size)
            else:
                skip_chunk_body(self.file, sub_size)

    def _iter_records(self, chunk_name, record_size, required=True):
        """
        Splits a pdta sub-chunk into fixed-size records.
        """
        if chunk_name not in self.pdta:
            if required:
                raise SF2FormatError(f"Missing \"{chunk_name}\" chunk")
            return

        data = self.pdta[chunk_name]
        if len(data) % record_size:
            raise SF2FormatError(
                f"\"{chunk_name}\" chunk size {len(data)} is not a multiple of {record_size}"
            )

        for i in range(0, len(data), record_size):
            yield data[i:i + record_size]

    def _build_bank(self):
        missing = [name for name in REQUIRED_PDTA_CHUNKS if name not in self.pdta]
        if missing:
            raise SF2FormatError(f"Missing pdta chunks: {', '.join(missing)}")

        return SoundFontBank(
            presets=tuple(self._get_preset_headers()),
            instruments=tuple(self._get_instrument_headers()),
            samples=tuple(self._get_sample_headers()),
            preset_bags=tuple(self._get_bags("pbag", PBAG_SIZE)),
            instrument_bags=tuple(self._get_bags("ibag", IBAG_SIZE)),
            preset_generators=tuple(self._get_generators("pgen", PGEN_SIZE)),
            instrument_generators=tuple(self._get_generators("igen", IGEN_SIZE)),
            preset_modulators=tuple(self._get_modulators("pmod", PMOD_SIZE)),
            instrument_modulators=tuple(self._get_modulators("imod", IMOD_SIZE)),
            info=dict(self.info_data),
            sample_data=self.smpl_data,
        )

    def _get_preset_headers(self):
        # sfPresetHeader = 38 bytes
        for r in self._iter_records("phdr", PHDR_SIZE):
            values = struct.unpack("<HHHIII", r[NAME_SIZE:PHDR_SIZE])
            yield PresetHeader(
                name=decode_name(r[:NAME_SIZE]),
                preset=values[0],
                bank=values[1],
                bag_ndx=values[2],
                library=values[3],
                genre=values[4],
                morphology=values[5],
            )

    def _get_instrument_headers(self):
        # sfInst = 22 bytes
        for r in self._iter_records("inst", INST_SIZE):
            bag_ndx = struct.unpack("<H", r[NAME_SIZE:INST_SIZE])[0]
            yield InstrumentHeader(name=decode_name(r[:NAME_SIZE]), bag_ndx=bag_ndx)

    def _get_sample_headers(self):
        # sfSample = 46 bytes
        for r in self._iter_records("shdr", SHDR_SIZE):
            values = struct.unpack("<IIIIIBbHH", r[NAME_SIZE:SHDR_SIZE])
            start, end = values[0], values[1]
            yield SampleHeader(
                name=decode_name(r[:NAME_SIZE]),
                start=start,
                end=end,
                start_loop=values[2],
                end_loop=values[3],
                sample_rate=values[4],
                original_key=values[5],
                correction=values[6],
                sample_link=values[7],
                sample_type=values[8],
                data=self._slice_sample(start, end),
            )

    def _slice_sample(self, start, end):
        """
        Returns the frames [start, end) of the smpl chunk as int16,
        or None when the range is empty or outside the chunk.
        """
        byte_start = start * BYTES_PER_FRAME
        byte_end = end * BYTES_PER_FRAME
        if byte_end <= byte_start or byte_end > len(self.smpl_data):
            return None

        pcm = np.frombuffer(self.smpl_data, dtype="<i2", count=end - start, offset=byte_start)
        pcm.flags.writeable = False
        return pcm

    def _get_bags(self, chunk_name, record_size):
        # sfPresetBag / sfInstBag = 4 bytes
        for r in self._iter_records(chunk_name, record_size):
            gen_ndx, mod_ndx = struct.unpack("<HH", r)
            yield Bag(gen_ndx=gen_ndx, mod_ndx=mod_ndx)

    def _get_generators(self, chunk_name, record_size):
        # sfGenList = 4 bytes
        for r in self._iter_records(chunk_name, record_size):
            oper, amount = struct.unpack("<Hh", r)
            yield Generator(oper=oper, amount=amount)

    def _get_modulators(self, chunk_name, record_size):
        # sfModList = 10 bytes, optional
        for r in self._iter_records(chunk_name, record_size, required=False):
            values = struct.unpack("<HHhHH", r)
            yield Modulator(
                src_oper=values[0],
                dest_oper=values[1],
                amount=values[2],
                amt_src_oper=values[3],
                trans_oper=values[4],
            )


def parse_soundfont(source):
    """
    Parses an SF2 file path or buffer and returns its SoundFontBank.
    """
    return SoundFontParser(source).parse()
