"""
Builds small synthetic SoundFont2 files for the tests.

Tables are given the way they appear in the file, terminal records included,
so tests can exercise the zone arithmetic directly.
"""

import struct

import numpy as np

from sf2sfz.riff import make_chunk, make_list_chunk, make_riff


def name_field(name):
    return name.encode("ascii").ljust(20, b"\x00")[:20]


def phdr(name, bag_ndx, preset=0, bank=0):
    return name_field(name) + struct.pack("<HHHIII", preset, bank, bag_ndx, 0, 0, 0)


def inst(name, bag_ndx):
    return name_field(name) + struct.pack("<H", bag_ndx)


def bag(gen_ndx, mod_ndx=0):
    return struct.pack("<HH", gen_ndx, mod_ndx)


def gen(oper, amount):
    return struct.pack("<Hh", oper, amount)


def shdr(name, start=0, end=0, start_loop=0, end_loop=0, sample_rate=44100,
         original_key=60, correction=0, sample_link=0, sample_type=1):
    return name_field(name) + struct.pack(
        "<IIIIIBbHH", start, end, start_loop, end_loop, sample_rate,
        original_key, correction, sample_link, sample_type,
    )


def key_range(lo, hi):
    return lo | (hi << 8)


def build_sf2(presets, pbags, pgens, instruments, ibags, igens, samples, pcm=b"",
              info=None, extra_pdta=b"", extra_chunks=b"", pmods=None, imods=None):
    """
    Assembles a complete sfbk file from already-packed records.
    """
    info_data = make_chunk(b"ifil", struct.pack("<HH", 2, 1))
    for key, value in (info or {}).items():
        info_data += make_chunk(key, value.encode("ascii") + b"\x00")

    pdta = make_chunk(b"phdr", b"".join(presets))
    pdta += make_chunk(b"pbag", b"".join(pbags))
    if pmods is not None:
        pdta += make_chunk(b"pmod", b"".join(pmods))
    pdta += make_chunk(b"pgen", b"".join(pgens))
    pdta += make_chunk(b"inst", b"".join(instruments))
    pdta += make_chunk(b"ibag", b"".join(ibags))
    if imods is not None:
        pdta += make_chunk(b"imod", b"".join(imods))
    pdta += make_chunk(b"igen", b"".join(igens))
    pdta += make_chunk(b"shdr", b"".join(samples))
    pdta += extra_pdta

    body = make_list_chunk(b"INFO", info_data)
    body += extra_chunks
    body += make_list_chunk(b"sdta", make_chunk(b"smpl", bytes(pcm)))
    body += make_list_chunk(b"pdta", pdta)
    return make_riff(b"sfbk", body)


def ramp_pcm(frames):
    """
    Deterministic int16 ramp used as sample data.
    """
    return (np.arange(frames, dtype=np.int32) * 37 - 1800).astype("<i2")


def simple_sf2(preset_gens=(), inst_gens=(), frames=100, sample_name="Snd",
               preset_name="Test", **sample_kwargs):
    """
    One preset -> one instrument -> one sample.

    preset_gens / inst_gens are extra (oper, amount) pairs added to the single
    local zone before the instrument / sampleID generator.
    """
    pcm = ramp_pcm(frames)
    pgen_records = [gen(o, a) for o, a in preset_gens] + [gen(41, 0)]
    igen_records = [gen(o, a) for o, a in inst_gens] + [gen(53, 0)]

    sample_kwargs.setdefault("end", frames)
    return build_sf2(
        presets=[phdr(preset_name, 0), phdr("EOP", 1)],
        pbags=[bag(0), bag(len(pgen_records))],
        pgens=pgen_records + [gen(0, 0)],
        instruments=[inst("Inst", 0), inst("EOI", 1)],
        ibags=[bag(0), bag(len(igen_records))],
        igens=igen_records + [gen(0, 0)],
        samples=[shdr(sample_name, **sample_kwargs), shdr("EOS")],
        pcm=pcm.tobytes(),
    )


def _zone_tables(zones):
    """
    Packs a list of zones (each a list of (oper, amount)) into bag and
    generator records, terminal bag/generator appended.
    """
    bags, gens = [], []
    for zone in zones:
        bags.append(bag(len(gens)))
        gens.extend(gen(o, a) for o, a in zone)
    bags.append(bag(len(gens)))
    gens.append(gen(0, 0))
    return bags, gens


def zoned_sf2(presets, instruments, samples):
    """
    Arbitrary zone layouts.

    Args:
        presets: list of (name, zones); zones is a list of generator lists.
        instruments: list of (name, zones).
        samples: list of (name, frames) or (name, frames, shdr kwargs).
    """
    preset_zones, preset_records = [], []
    for name, zones in presets:
        preset_records.append(phdr(name, len(preset_zones), preset=len(preset_records)))
        preset_zones.extend(zones)
    preset_records.append(phdr("EOP", len(preset_zones)))

    inst_zones, inst_records = [], []
    for name, zones in instruments:
        inst_records.append(inst(name, len(inst_zones)))
        inst_zones.extend(zones)
    inst_records.append(inst("EOI", len(inst_zones)))

    pcm = b""
    sample_records = []
    for entry in samples:
        name, frames = entry[0], entry[1]
        kwargs = dict(entry[2]) if len(entry) > 2 else {}
        start = len(pcm) // 2
        kwargs.setdefault("start", start)
        kwargs.setdefault("end", start + frames)
        sample_records.append(shdr(name, **kwargs))
        # 46 zero frames after every sample, as in real banks
        pcm += ramp_pcm(frames).tobytes() + b"\x00" * 92
    sample_records.append(shdr("EOS"))

    pbags, pgens = _zone_tables(preset_zones)
    ibags, igens = _zone_tables(inst_zones)
    return build_sf2(
        presets=preset_records,
        pbags=pbags,
        pgens=pgens,
        instruments=inst_records,
        ibags=ibags,
        igens=igens,
        samples=sample_records,
        pcm=pcm,
    )
