# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
SF2 Constants - Common constant definitions used when reading SoundFont2 files

Defines the generator enumeration, the fixed record widths of the pdta
(Hydra) sub-chunks and the sentinel record names.
"""

# Mapping from generator name to ID
# SF2 2.04 spec section 8.1.2 - Generator Enumerators
GENERATOR_IDS = {
    "startAddrsOffset": 0,
    "endAddrsOffset": 1,
    "startloopAddrsOffset": 2,
    "endloopAddrsOffset": 3,
    "startAddrsCoarseOffset": 4,
    "modLfoToPitch": 5,
    "vibLfoToPitch": 6,
    "modEnvToPitch": 7,
    "initialFilterFc": 8,
    "initialFilterQ": 9,
    "modLfoToFilterFc": 10,
    "modEnvToFilterFc": 11,
    "endAddrsCoarseOffset": 12,
    "modLfoToVolume": 13,
    "unused1": 14,
    "chorusEffectsSend": 15,
    "reverbEffectsSend": 16,
    "pan": 17,
    "unused2": 18,
    "unused3": 19,
    "unused4": 20,
    "delayModLFO": 21,
    "freqModLFO": 22,
    "delayVibLFO": 23,
    "freqVibLFO": 24,
    "delayModEnv": 25,
    "attackModEnv": 26,
    "holdModEnv": 27,
    "decayModEnv": 28,
    "sustainModEnv": 29,
    "releaseModEnv": 30,
    "keynumToModEnvHold": 31,
    "keynumToModEnvDecay": 32,
    "delayVolEnv": 33,
    "attackVolEnv": 34,
    "holdVolEnv": 35,
    "decayVolEnv": 36,
    "sustainVolEnv": 37,
    "releaseVolEnv": 38,
    "keynumToVolEnvHold": 39,
    "keynumToVolEnvDecay": 40,
    "instrument": 41,
    "reserved1": 42,
    "keyRange": 43,
    "velRange": 44,
    "startloopAddrsCoarseOffset": 45,
    "keynum": 46,
    "velocity": 47,
    "initialAttenuation": 48,
    "reserved2": 49,
    "endloopAddrsCoarseOffset": 50,
    "coarseTune": 51,
    "fineTune": 52,
    "sampleID": 53,
    "sampleModes": 54,
    "reserved3": 55,
    "scaleTuning": 56,
    "exclusiveClass": 57,
    "overridingRootKey": 58,
    "unused5": 59,
    "endOper": 60
}

# Generators the SFZ emitter reads
GEN_PAN = GENERATOR_IDS["pan"]
GEN_ATTACK_VOL_ENV = GENERATOR_IDS["attackVolEnv"]
GEN_DECAY_VOL_ENV = GENERATOR_IDS["decayVolEnv"]
GEN_SUSTAIN_VOL_ENV = GENERATOR_IDS["sustainVolEnv"]
GEN_RELEASE_VOL_ENV = GENERATOR_IDS["releaseVolEnv"]
GEN_INSTRUMENT = GENERATOR_IDS["instrument"]
GEN_KEY_RANGE = GENERATOR_IDS["keyRange"]
GEN_VEL_RANGE = GENERATOR_IDS["velRange"]
GEN_COARSE_TUNE = GENERATOR_IDS["coarseTune"]
GEN_FINE_TUNE = GENERATOR_IDS["fineTune"]
GEN_SAMPLE_ID = GENERATOR_IDS["sampleID"]
GEN_SAMPLE_MODES = GENERATOR_IDS["sampleModes"]
GEN_OVERRIDING_ROOT_KEY = GENERATOR_IDS["overridingRootKey"]

# overridingRootKey value meaning "use the sample's original pitch"
ROOT_KEY_UNSET = -1

# sampleModes low bits: 0 = no loop, 1 = continuous, 2 = unused, 3 = loop until release
LOOP_MODE_MASK = 0x03
LOOPING_MODES = (1, 3)

# Fixed record widths of the pdta sub-chunks (bytes)
PHDR_SIZE = 38  # sfPresetHeader
PBAG_SIZE = 4   # sfPresetBag
PMOD_SIZE = 10  # sfModList
PGEN_SIZE = 4   # sfGenList
INST_SIZE = 22  # sfInst
IBAG_SIZE = 4   # sfInstBag
IMOD_SIZE = 10  # sfInstModList
IGEN_SIZE = 4   # sfInstGenList
SHDR_SIZE = 46  # sfSample

NAME_SIZE = 20

# Sub-chunks every pdta list must carry
REQUIRED_PDTA_CHUNKS = ("phdr", "pbag", "pgen", "inst", "ibag", "igen", "shdr")

# Terminal record names
PRESET_TERMINATOR = "EOP"
INSTRUMENT_TERMINATOR = "EOI"
SAMPLE_TERMINATOR = "EOS"

# Bytes per frame in the smpl chunk (16-bit mono)
BYTES_PER_FRAME = 2
