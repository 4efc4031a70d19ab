# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Exceptions raised while converting a SoundFont into SFZ documents.
"""


class SF2SFZError(Exception):
    """
    Base class for all sf2sfz errors.
    """


class SF2FormatError(SF2SFZError, ValueError):
    """
    The input is not a well-formed SoundFont2 file.
    Always fatal for the whole parse.
    """


class SampleReferenceError(SF2SFZError, LookupError):
    """
    A zone refers to an instrument or sample that does not exist or has no data.
    """


class WavEncodingError(SF2SFZError, ValueError):
    """
    A sample could not be turned into a WAV buffer.
    """
