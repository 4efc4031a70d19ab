# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
WAV encoding of extracted SoundFont samples.

Samples are written as canonical 44-byte-header, mono, 16-bit PCM WAV files.
"""

import io

import numpy as np
import soundfile as sf

from .errors import WavEncodingError


def encode_wav(data, sample_rate):
    """
    Encodes 16-bit mono PCM frames as a WAV file.

    Args:
        data: Sequence of int16 frames (numpy array or list).
        sample_rate: Sample rate in Hz.

    Returns:
        The WAV file as bytes.

    Raises:
        WavEncodingError: If there are no frames to encode.
    """
    if data is None or len(data) == 0:
        raise WavEncodingError("No sample data found")

    pcm = np.array(data, dtype=np.int16)

    buffer = io.BytesIO()
    sf.write(buffer, pcm, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


def sample_to_wav(sample):
    """
    Encodes a SampleHeader's frames at its own sample rate.
    """
    if not sample.has_data:
        raise WavEncodingError(f"No sample data found for \"{sample.name}\"")
    return encode_wav(sample.data, sample.sample_rate)


def decode_wav(buffer):
    """
    Reads a WAV buffer back into int16 frames.

    Returns:
        A tuple of (int16 numpy array, sample rate).
    """
    pcm, sample_rate = sf.read(io.BytesIO(buffer), dtype="int16")
    return pcm, sample_rate
