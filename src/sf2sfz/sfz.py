# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SFZ Writer - renders resolved SoundFont presets as SFZ documents.

Each preset becomes one document: a <control> block whose default_path points
at the preset's sample folder, followed by one <region> block per resolved
region.
"""

import math
import re

from .constants import (
    GEN_ATTACK_VOL_ENV,
    GEN_COARSE_TUNE,
    GEN_DECAY_VOL_ENV,
    GEN_FINE_TUNE,
    GEN_KEY_RANGE,
    GEN_OVERRIDING_ROOT_KEY,
    GEN_PAN,
    GEN_RELEASE_VOL_ENV,
    GEN_SAMPLE_MODES,
    GEN_SUSTAIN_VOL_ENV,
    GEN_VEL_RANGE,
    LOOP_MODE_MASK,
    LOOPING_MODES,
    ROOT_KEY_UNSET,
)
from .resolver import ZoneResolver

CREDIT_LINE = "// Converted from SF2 to SFZ by sf2sfz"

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_\-]")
_INVALID_FILENAME_CHARS = re.compile(r"[<>:\"/\\|?*\x00-\x1f]")


def sanitize_name(name):
    """
    Replaces every character outside [A-Za-z0-9_-] with an underscore.
    """
    return _INVALID_NAME_CHARS.sub("_", name).strip()


def sanitize_filename(name):
    """
    Replaces characters that are invalid in file names (path separators
    included) with underscores. Names made only of dots become "_".
    """
    name = _INVALID_FILENAME_CHARS.sub("_", name).strip()
    if not name.strip("."):
        return "_"
    return name


def timecents_to_seconds(timecents):
    return math.pow(2, timecents / 1200)


def centibels_to_percent(centibels):
    """
    Converts an attenuation in centibels to a 0-100 amplitude percentage.
    """
    return 100 * math.pow(10, -(centibels / 10) / 20)


def unpack_range(amount):
    """
    Splits a keyRange/velRange amount into (lo, hi).
    The low byte holds the lower bound, the high byte the upper bound.
    """
    return amount & 0x7F, (amount >> 8) & 0x7F


def sample_file_name(sample):
    return f"{sanitize_name(sample.name)}.wav"


def sample_folder_name(base_name, preset_name):
    return f"{base_name} {sanitize_filename(preset_name)} Samples"


def preset_file_name(base_name, preset_name):
    return f"{base_name} {sanitize_filename(preset_name)}.sfz"


def render_region(region):
    """
    Renders one region as a list of SFZ lines (without the trailing blank line).
    """
    sample = region.sample
    gens = region.generators
    lines = ["<region>", f"sample={sample_file_name(sample)}"]

    key_range = gens.get(GEN_KEY_RANGE)
    if key_range is not None:
        lo, hi = unpack_range(key_range)
        if lo == hi:
            lines.append(f"key={lo}")
        else:
            lines.append(f"lokey={lo} hikey={hi}")
    else:
        lines.append("lokey=0 hikey=127")

    vel_range = gens.get(GEN_VEL_RANGE)
    if vel_range is not None:
        lo, hi = unpack_range(vel_range)
        lines.append(f"lovel={lo} hivel={hi}")

    # Volume envelope
    if GEN_ATTACK_VOL_ENV in gens:
        lines.append(f"ampeg_attack={timecents_to_seconds(gens[GEN_ATTACK_VOL_ENV]):.4f}")
    if GEN_DECAY_VOL_ENV in gens:
        lines.append(f"ampeg_decay={timecents_to_seconds(gens[GEN_DECAY_VOL_ENV]):.4f}")
    if GEN_SUSTAIN_VOL_ENV in gens:
        lines.append(f"ampeg_sustain={centibels_to_percent(gens[GEN_SUSTAIN_VOL_ENV]):.2f}")
    if GEN_RELEASE_VOL_ENV in gens:
        lines.append(f"ampeg_release={timecents_to_seconds(gens[GEN_RELEASE_VOL_ENV]):.4f}")

    # SF2 pan is -500..500 in tenths of a percent
    if GEN_PAN in gens:
        lines.append(f"pan={gens[GEN_PAN] / 10:.2f}")

    root_key = gens.get(GEN_OVERRIDING_ROOT_KEY, ROOT_KEY_UNSET)
    if root_key == ROOT_KEY_UNSET:
        root_key = sample.original_key
    lines.append(f"pitch_keycenter={root_key}")

    tune = gens.get(GEN_COARSE_TUNE, 0) * 100 + gens.get(GEN_FINE_TUNE, 0) + sample.correction
    if tune != 0:
        lines.append(f"tune={tune}")

    loop_mode = gens.get(GEN_SAMPLE_MODES, 0) & LOOP_MODE_MASK
    if loop_mode in LOOPING_MODES:
        lines.append("loop_mode=loop_continuous")
        lines.append(f"loop_start={sample.start_loop - sample.start}")
        lines.append(f"loop_end={sample.end_loop - sample.start}")

    return lines


class SFZWriter:
    """
    Renders the presets of a SoundFontBank as SFZ documents.
    """

    def __init__(self, bank, base_name):
        """
        Args:
            bank: The parsed SoundFontBank.
            base_name: Name the output is published under, usually the SF2 file stem.
        """
        self.bank = bank
        self.base_name = base_name
        self.resolver = ZoneResolver(bank)

    @property
    def warnings(self):
        return self.resolver.warnings

    def regions(self, preset_idx):
        return self.resolver.resolve(preset_idx)

    def render_preset(self, preset_idx, regions=None):
        """
        Renders one preset. The header and <control> block are emitted even
        when the preset resolves to no regions.
        """
        preset_name = self.bank.presets[preset_idx].name.strip()
        if regions is None:
            regions = self.regions(preset_idx)

        lines = [
            f"// {preset_name}",
            CREDIT_LINE,
            "",
            "<control>",
            f"default_path={sample_folder_name(self.base_name, preset_name)}",
            "",
        ]
        for region in regions:
            lines.extend(render_region(region))
            lines.append("")

        return "\n".join(lines) + "\n"

    def render_all(self):
        """
        Renders every visible preset.

        Returns:
            A dict mapping preset index to SFZ text.
        """
        return {idx: self.render_preset(idx) for idx, _ in self.bank.visible_presets()}
