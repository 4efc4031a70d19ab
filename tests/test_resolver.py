"""
Zone resolution tests - global zones, layer precedence, broken references
"""

from sf2sfz import SampleReferenceError, ZoneResolver, parse_soundfont
from sf2sfz.constants import (
    GEN_COARSE_TUNE,
    GEN_INSTRUMENT,
    GEN_KEY_RANGE,
    GEN_PAN,
    GEN_SAMPLE_ID,
    GEN_VEL_RANGE,
)
from sf2sfz.resolver import is_global_zone, merge_generators, split_zones

from sf2_builder import key_range, zoned_sf2

PAN = GEN_PAN
INSTRUMENT = GEN_INSTRUMENT
SAMPLE = GEN_SAMPLE_ID


def resolve(data, preset_idx=0):
    resolver = ZoneResolver(parse_soundfont(data))
    return resolver.resolve(preset_idx), resolver


def test_is_global_zone():
    assert is_global_zone({PAN: 10}, INSTRUMENT, 2)
    assert not is_global_zone({PAN: 10}, INSTRUMENT, 1)
    assert not is_global_zone({INSTRUMENT: 0}, INSTRUMENT, 3)
    assert not is_global_zone({}, SAMPLE, 0)


def test_split_zones_with_global():
    zones = {5: {PAN: 10}, 6: {INSTRUMENT: 0}, 7: {PAN: 3}, 8: {INSTRUMENT: 1, PAN: 4}}
    global_gens, local = split_zones(range(5, 9), zones.get, INSTRUMENT)
    assert global_gens == {PAN: 10}
    # Zones without an instrument past the first are dropped
    assert local == [(6, {INSTRUMENT: 0}), (8, {INSTRUMENT: 1, PAN: 4})]


def test_split_zones_single_zone_is_never_global():
    global_gens, local = split_zones(range(0, 1), {0: {PAN: 10}}.get, INSTRUMENT)
    assert global_gens == {}
    assert local == []


def test_split_zones_first_zone_with_terminator_is_local():
    zones = {0: {INSTRUMENT: 2}, 1: {INSTRUMENT: 3}}
    global_gens, local = split_zones(range(0, 2), zones.get, INSTRUMENT)
    assert global_gens == {}
    assert [bag for bag, _ in local] == [0, 1]


def test_split_zones_empty_range():
    assert split_zones(range(4, 4), {}.get, INSTRUMENT) == ({}, [])


def test_merge_local_overrides_global():
    merged = merge_generators({PAN: 1}, {PAN: 2}, {PAN: 3}, {PAN: 4})
    assert merged[PAN] == 4
    merged = merge_generators({PAN: 1, GEN_COARSE_TUNE: 5}, {PAN: 2}, {}, {})
    assert merged == {PAN: 2, GEN_COARSE_TUNE: 5}


def test_merge_does_not_sum():
    merged = merge_generators({GEN_COARSE_TUNE: 2}, {GEN_COARSE_TUNE: 3}, {}, {GEN_COARSE_TUNE: 1})
    assert merged[GEN_COARSE_TUNE] == 1


def test_merge_range_precedence():
    preset_range = key_range(10, 20)
    inst_range = key_range(30, 40)
    global_inst_range = key_range(50, 60)

    merged = merge_generators({}, {GEN_KEY_RANGE: preset_range}, {GEN_KEY_RANGE: global_inst_range},
                              {GEN_KEY_RANGE: inst_range})
    assert merged[GEN_KEY_RANGE] == inst_range

    # The local preset range beats a global instrument range
    merged = merge_generators({}, {GEN_KEY_RANGE: preset_range}, {GEN_KEY_RANGE: global_inst_range}, {})
    assert merged[GEN_KEY_RANGE] == preset_range

    merged = merge_generators({GEN_VEL_RANGE: preset_range}, {}, {}, {})
    assert merged[GEN_VEL_RANGE] == preset_range

    assert GEN_KEY_RANGE not in merge_generators({}, {}, {}, {})


def test_resolves_one_region_per_sample_zone():
    data = zoned_sf2(
        presets=[("P", [[(INSTRUMENT, 0)]])],
        instruments=[("I", [[(SAMPLE, 0)], [(SAMPLE, 1)]])],
        samples=[("A", 10), ("B", 20)],
    )
    regions, resolver = resolve(data)
    assert [r.sample.name for r in regions] == ["A", "B"]
    assert [r.instrument_bag for r in regions] == [0, 1]
    assert regions[1].sample.frame_count == 20
    assert resolver.warnings == []


def test_global_preset_zone_applies_to_all_zones():
    data = zoned_sf2(
        presets=[("P", [[(PAN, 100), (GEN_COARSE_TUNE, 2)],
                        [(INSTRUMENT, 0)],
                        [(PAN, -200), (INSTRUMENT, 0)]])],
        instruments=[("I", [[(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, _ = resolve(data)
    assert len(regions) == 2
    assert regions[0].get(PAN) == 100
    assert regions[1].get(PAN) == -200
    assert regions[0].get(GEN_COARSE_TUNE) == 2
    assert regions[1].get(GEN_COARSE_TUNE) == 2


def test_global_instrument_zone_applies_unless_overridden():
    data = zoned_sf2(
        presets=[("P", [[(INSTRUMENT, 0)]])],
        instruments=[("I", [[(PAN, 250)],
                            [(SAMPLE, 0)],
                            [(PAN, -50), (SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, _ = resolve(data)
    assert [r.get(PAN) for r in regions] == [250, -50]


def test_instrument_layer_beats_preset_layer():
    data = zoned_sf2(
        presets=[("P", [[(PAN, 10), (INSTRUMENT, 0)]])],
        instruments=[("I", [[(PAN, 20)], [(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, _ = resolve(data)
    assert regions[0].get(PAN) == 20


def test_single_zone_without_instrument_yields_nothing():
    data = zoned_sf2(
        presets=[("P", [[(PAN, 10)]])],
        instruments=[("I", [[(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, resolver = resolve(data)
    assert regions == []
    assert resolver.warnings == []


def test_empty_preset_yields_nothing():
    data = zoned_sf2(
        presets=[("Empty", []), ("P", [[(INSTRUMENT, 0)]])],
        instruments=[("I", [[(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    bank = parse_soundfont(data)
    resolver = ZoneResolver(bank)
    assert resolver.resolve(0) == []
    assert len(resolver.resolve(1)) == 1


def test_missing_instrument_is_skipped():
    data = zoned_sf2(
        presets=[("P", [[(INSTRUMENT, 7)], [(INSTRUMENT, 0)]])],
        instruments=[("I", [[(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, resolver = resolve(data)
    assert len(regions) == 1
    assert len(resolver.warnings) == 1
    assert "instrument index 7" in resolver.warnings[0]


def test_missing_and_sentinel_samples_are_skipped():
    data = zoned_sf2(
        presets=[("P", [[(INSTRUMENT, 0)]])],
        # Sample 1 is the EOS record, sample 9 does not exist
        instruments=[("I", [[(SAMPLE, 9)], [(SAMPLE, 1)], [(SAMPLE, 0)]])],
        samples=[("A", 10)],
    )
    regions, resolver = resolve(data)
    assert [r.sample_index for r in regions] == [0]
    assert len(resolver.warnings) == 2


def test_sample_without_data_is_skipped():
    data = zoned_sf2(
        presets=[("P", [[(INSTRUMENT, 0)]])],
        instruments=[("I", [[(SAMPLE, 0)], [(SAMPLE, 1)]])],
        samples=[("Empty", 0), ("A", 10)],
    )
    regions, resolver = resolve(data)
    assert [r.sample.name for r in regions] == ["A"]
    assert "no sample data" in resolver.warnings[0]


def test_reference_error_is_a_lookup_error():
    assert issubclass(SampleReferenceError, LookupError)
