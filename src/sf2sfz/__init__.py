# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

from .converter import SoundFontConverter
from .errors import SF2FormatError, SF2SFZError, SampleReferenceError, WavEncodingError
from .parser import SoundFontParser, parse_soundfont
from .records import SoundFontBank
from .resolver import Region, ZoneResolver
from .sfz import SFZWriter
from .wav import decode_wav, encode_wav, sample_to_wav

__all__ = [
    "SoundFontConverter",
    "SoundFontParser",
    "SoundFontBank",
    "SFZWriter",
    "ZoneResolver",
    "Region",
    "parse_soundfont",
    "encode_wav",
    "sample_to_wav",
    "decode_wav",
    "SF2SFZError",
    "SF2FormatError",
    "SampleReferenceError",
    "WavEncodingError"
]
