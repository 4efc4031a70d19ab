# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Zone resolution - flattens preset and instrument zones into regions.

A preset zone points at an instrument, an instrument zone points at a sample.
The first zone of a preset or instrument may be a global zone whose
generators apply to every other zone of that preset or instrument. For every
(preset zone, instrument zone) pair that ends in a sample, the four generator
layers are merged into one Region:

    global preset < local preset < global instrument < local instrument

A key present in a later layer replaces the earlier value; values are never
summed. keyRange and velRange are the exception: the local instrument zone's
range wins, then the local preset zone's range, then whatever the global
layers carried.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from .constants import (
    GEN_INSTRUMENT,
    GEN_KEY_RANGE,
    GEN_SAMPLE_ID,
    GEN_VEL_RANGE,
    SAMPLE_TERMINATOR,
)
from .errors import SampleReferenceError
from .records import InstrumentHeader, SampleHeader, SoundFontBank

RANGE_GENERATORS = (GEN_KEY_RANGE, GEN_VEL_RANGE)


def is_global_zone(first_generators: dict[int, int], terminator: int, zone_count: int) -> bool:
    """
    Whether the first zone of a preset/instrument is its global zone.

    It is global iff it lacks the terminating generator (instrument for
    presets, sampleID for instruments) and the zone list has more than one zone.
    """
    return terminator not in first_generators and zone_count > 1


def split_zones(
    zone_range: range,
    lookup: Callable[[int], dict[int, int]],
    terminator: int,
) -> tuple[dict[int, int], list[tuple[int, dict[int, int]]]]:
    """
    Splits a zone range into its global generators and its local zones.

    Args:
        zone_range: The bag indices of one preset or instrument.
        lookup: Returns the generator mapping of a bag index.
        terminator: The generator that makes a zone local (instrument or sampleID).

    Returns:
        ``(global_generators, [(bag_index, generators), ...])``. Zones without
        the terminating generator are never listed as local.
    """
    global_generators = {}
    local_zones = []

    for position, bag_idx in enumerate(zone_range):
        generators = lookup(bag_idx)
        if position == 0 and is_global_zone(generators, terminator, len(zone_range)):
            global_generators = generators
            continue
        if terminator not in generators:
            continue
        local_zones.append((bag_idx, generators))

    return global_generators, local_zones


def merge_generators(
    global_preset: dict[int, int],
    preset: dict[int, int],
    global_inst: dict[int, int],
    inst: dict[int, int],
) -> dict[int, int]:
    """
    Merges the four generator layers of a region, later layers overriding earlier ones.
    """
    combined = {**global_preset, **preset, **global_inst, **inst}

    # Ranges: instrument zone first, then preset zone
    for oper in RANGE_GENERATORS:
        if oper in inst:
            combined[oper] = inst[oper]
        elif oper in preset:
            combined[oper] = preset[oper]

    return combined


@dataclass(frozen=True)
class Region:
    """
    One fully resolved (preset zone, instrument zone, sample) triple.
    """
    preset_bag: int
    instrument_index: int
    instrument_bag: int
    sample_index: int
    sample: SampleHeader
    generators: dict[int, int] = field(compare=False)

    def get(self, oper: int, default: Optional[int] = None) -> Optional[int]:
        return self.generators.get(oper, default)


class ZoneResolver:
    """
    Resolves the regions of the presets in a SoundFontBank.
    """

    def __init__(self, bank: SoundFontBank):
        self.bank = bank
        self.warnings: list[str] = []

    def resolve(self, preset_idx: int) -> list[Region]:
        """
        Returns the regions of one preset, in zone order.
        Zones with broken instrument or sample references are skipped and
        recorded in ``self.warnings``.
        """
        bank = self.bank
        preset = bank.presets[preset_idx]

        global_preset, preset_zones = split_zones(
            bank.preset_zone_range(preset_idx),
            bank.preset_zone_generators,
            GEN_INSTRUMENT,
        )

        regions = []
        for preset_bag, preset_gens in preset_zones:
            # Index generators are unsigned words
            inst_idx = preset_gens[GEN_INSTRUMENT] & 0xFFFF
            try:
                self._get_instrument(inst_idx)
            except SampleReferenceError as e:
                self.warnings.append(f"Preset \"{preset.name}\" zone {preset_bag}: {e}")
                continue

            global_inst, inst_zones = split_zones(
                bank.instrument_zone_range(inst_idx),
                bank.instrument_zone_generators,
                GEN_SAMPLE_ID,
            )

            for inst_bag, inst_gens in inst_zones:
                sample_idx = inst_gens[GEN_SAMPLE_ID] & 0xFFFF
                try:
                    sample = self._get_sample(sample_idx)
                except SampleReferenceError as e:
                    self.warnings.append(f"Preset \"{preset.name}\" instrument zone {inst_bag}: {e}")
                    continue

                regions.append(Region(
                    preset_bag=preset_bag,
                    instrument_index=inst_idx,
                    instrument_bag=inst_bag,
                    sample_index=sample_idx,
                    sample=sample,
                    generators=merge_generators(global_preset, preset_gens, global_inst, inst_gens),
                ))

        return regions

    def _get_instrument(self, inst_idx: int) -> InstrumentHeader:
        if inst_idx >= len(self.bank.instruments):
            raise SampleReferenceError(f"instrument index {inst_idx} does not exist")
        return self.bank.instruments[inst_idx]

    def _get_sample(self, sample_idx: int) -> SampleHeader:
        if sample_idx >= len(self.bank.samples):
            raise SampleReferenceError(f"sample index {sample_idx} does not exist")

        sample = self.bank.samples[sample_idx]
        if sample.name == SAMPLE_TERMINATOR:
            raise SampleReferenceError(f"sample index {sample_idx} is the terminal record")
        if not sample.has_data:
            raise SampleReferenceError(f"sample \"{sample.name}\" has no sample data")
        return sample
