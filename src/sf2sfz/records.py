# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Decoded SoundFont tables.

Every pdta sub-chunk becomes a tuple of frozen records, cross-referenced by
integer index exactly as in the file. Terminal records (EOP, EOI, EOS and the
trailing bag/generator) are kept so that zone ranges can always be computed
as ``[table[i].bag_ndx, table[i + 1].bag_ndx)``; they are only filtered out by
the ``visible_*`` accessors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .constants import (
    INSTRUMENT_TERMINATOR,
    PRESET_TERMINATOR,
    SAMPLE_TERMINATOR,
)


@dataclass(frozen=True)
class PresetHeader:
    name: str
    preset: int
    bank: int
    bag_ndx: int
    library: int
    genre: int
    morphology: int


@dataclass(frozen=True)
class InstrumentHeader:
    name: str
    bag_ndx: int


@dataclass(frozen=True)
class Bag:
    gen_ndx: int
    mod_ndx: int


@dataclass(frozen=True)
class Generator:
    oper: int
    amount: int


@dataclass(frozen=True)
class Modulator:
    src_oper: int
    dest_oper: int
    amount: int
    amt_src_oper: int
    trans_oper: int


@dataclass(frozen=True)
class SampleHeader:
    name: str
    start: int
    end: int
    start_loop: int
    end_loop: int
    sample_rate: int
    original_key: int
    correction: int
    sample_link: int
    sample_type: int
    # 16-bit PCM frames sliced from the smpl chunk, None when the header has no realizable range
    data: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    @property
    def has_data(self) -> bool:
        return self.data is not None and len(self.data) > 0

    @property
    def frame_count(self) -> int:
        return len(self.data) if self.data is not None else 0


def _zone_range(headers, index: int, bag_count: int) -> range:
    """
    Half-open bag range of header ``index``.
    The last header's range extends to the end of the bag table.
    """
    start = headers[index].bag_ndx
    if index + 1 < len(headers):
        end = headers[index + 1].bag_ndx
    else:
        end = bag_count
    return range(start, max(start, end))


def _zone_generators(bags, generators, bag_index: int) -> dict[int, int]:
    """
    Generators of one zone as an ``{oper: amount}`` mapping.
    Out-of-range bag indices yield an empty mapping.
    """
    if bag_index < 0 or bag_index >= len(bags):
        return {}

    gen_start = bags[bag_index].gen_ndx
    if bag_index + 1 < len(bags):
        gen_end = bags[bag_index + 1].gen_ndx
    else:
        gen_end = len(generators)

    return {gen.oper: gen.amount for gen in generators[gen_start:gen_end]}


@dataclass(frozen=True)
class SoundFontBank:
    """
    All tables decoded from one SoundFont file.
    """
    presets: tuple[PresetHeader, ...]
    instruments: tuple[InstrumentHeader, ...]
    samples: tuple[SampleHeader, ...]
    preset_bags: tuple[Bag, ...]
    instrument_bags: tuple[Bag, ...]
    preset_generators: tuple[Generator, ...]
    instrument_generators: tuple[Generator, ...]
    preset_modulators: tuple[Modulator, ...] = ()
    instrument_modulators: tuple[Modulator, ...] = ()
    info: dict = field(default_factory=dict, compare=False)
    sample_data: bytes = field(default=b"", compare=False, repr=False)

    def preset_zone_range(self, preset_idx: int) -> range:
        return _zone_range(self.presets, preset_idx, len(self.preset_bags))

    def instrument_zone_range(self, inst_idx: int) -> range:
        return _zone_range(self.instruments, inst_idx, len(self.instrument_bags))

    def preset_zone_generators(self, bag_idx: int) -> dict[int, int]:
        return _zone_generators(self.preset_bags, self.preset_generators, bag_idx)

    def instrument_zone_generators(self, bag_idx: int) -> dict[int, int]:
        return _zone_generators(self.instrument_bags, self.instrument_generators, bag_idx)

    def visible_presets(self) -> list[tuple[int, PresetHeader]]:
        """
        Presets a user can pick, as ``(index, header)`` pairs.
        """
        return [
            (idx, preset) for idx, preset in enumerate(self.presets)
            if preset.name.strip() and preset.name != PRESET_TERMINATOR
        ]

    def visible_instruments(self) -> list[tuple[int, InstrumentHeader]]:
        return [
            (idx, inst) for idx, inst in enumerate(self.instruments)
            if inst.name.strip() and inst.name != INSTRUMENT_TERMINATOR
        ]

    def visible_samples(self) -> list[tuple[int, SampleHeader]]:
        """
        Samples that can be exported, as ``(index, header)`` pairs.
        """
        return [
            (idx, sample) for idx, sample in enumerate(self.samples)
            if sample.name.strip() and sample.name != SAMPLE_TERMINATOR and sample.has_data
        ]
