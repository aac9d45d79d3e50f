import math

import pytest

from ppx.acc import accuracy
from ppx.beatmap import beatmap, circle, v2f
from ppx.diff import rate
from ppx.errors import ConfigurationError, InputWarning
from ppx.mods import Mods
from ppx.pp import ppv2, ppv2_params, performance, pp_base

HDDT = Mods.HD | Mods.DT

# a 1000 circle map given as raw stats
RAW = dict(aim_stars=2.5, speed_stars=2.2, max_combo=1000, nsliders=0,
    ncircles=1000, nobjects=1000, base_ar=9.0, base_od=8.0)


def test_regression_hddt(hddt_map):
    stars = rate(hddt_map, HDDT)
    pp = ppv2(stars=stars, bmap=hddt_map, mods=HDDT, accuracy=0.9955,
        nmiss=0, combo=hddt_map.max_combo() - 1)
    assert pp.total == pytest.approx(190.5716317462, rel=0.06)
    assert pp.aim == pytest.approx(102.7410640194, rel=1e-3)
    assert pp.speed == pytest.approx(31.2005823907, rel=1e-3)
    assert pp.acc == pytest.approx(51.9458580221, rel=1e-3)
    assert pp.accuracy == accuracy(20, 0, 0, 0)


def test_performance_is_deterministic(hddt_map):
    p = ppv2_params(stars=rate(hddt_map, HDDT), bmap=hddt_map, mods=HDDT,
        accuracy=0.97, nmiss=1)
    assert performance(p) == performance(p)


def test_pp_base():
    # anything under 1 star is flattened to the same tiny value
    assert pp_base(0.0) == pytest.approx(1e-5)
    assert pp_base(0.05) == pp_base(0.0)
    assert pp_base(0.0675 * 2) == pytest.approx(216.0 / 100000.0)


def test_misses_never_add_pp(hddt_map):
    stars = rate(hddt_map, HDDT)
    totals = [ppv2(stars=stars, bmap=hddt_map, mods=HDDT, nmiss=m).total
        for m in range(0, 12)]
    assert totals == sorted(totals, reverse=True)
    assert totals[-1] < totals[0]


def test_misses_with_hit_counts():
    totals = []
    for m in range(0, 50, 5):
        totals.append(ppv2(n300=950 - m, n100=50, n50=0, nmiss=m,
            **RAW).total)
    assert totals == sorted(totals, reverse=True)


def test_combo_never_removes_pp(hddt_map):
    stars = rate(hddt_map)
    max_combo = hddt_map.max_combo()
    totals = [ppv2(stars=stars, bmap=hddt_map, combo=c).total
        for c in range(0, max_combo + 1)]
    assert totals == sorted(totals)
    assert totals[-1] == ppv2(stars=stars, bmap=hddt_map).total


def test_score_versions_differ(hddt_map):
    stars = rate(hddt_map)
    v1 = ppv2(stars=stars, bmap=hddt_map, accuracy=0.98, score_version=1)
    v2 = ppv2(stars=stars, bmap=hddt_map, accuracy=0.98, score_version=2)
    assert v1.acc != v2.acc
    assert v1.aim == v2.aim
    assert v1.speed == v2.speed


def test_score_versions_agree_on_circle_only_maps():
    v1 = ppv2(accuracy=0.98, score_version=1, **RAW)
    v2 = ppv2(accuracy=0.98, score_version=2, **RAW)
    assert v1 == v2


@pytest.mark.parametrize("score_version", [0, 3])
def test_unsupported_score_version(score_version):
    with pytest.raises(ConfigurationError):
        ppv2(score_version=score_version, **RAW)


@pytest.mark.parametrize("mode", [1, 2, 3, "taiko", None])
def test_unsupported_mode(mode):
    with pytest.raises(ConfigurationError):
        ppv2(mode=mode, **RAW)


@pytest.mark.parametrize("mode", [3, "mania"])
def test_unsupported_mode_from_beatmap(mode):
    bmap = beatmap([circle(0.0, v2f())], mode=mode)
    with pytest.raises(ConfigurationError):
        ppv2(aim_stars=1.0, speed_stars=1.0, bmap=bmap)


def test_missing_inputs():
    with pytest.raises(ConfigurationError):
        ppv2(aim_stars=1.0, speed_stars=1.0)
    with pytest.raises(ConfigurationError):
        ppv2(speed_stars=1.0, max_combo=1, nsliders=0, ncircles=1,
            nobjects=1)


def test_zero_objects(empty_map):
    with pytest.warns(InputWarning):
        stars = rate(empty_map)
    with pytest.warns(InputWarning):
        pp = ppv2(stars=stars, bmap=empty_map)
    assert pp.total == 0.0
    assert pp.aim == 0.0
    assert pp.speed == 0.0
    assert pp.acc == 0.0


def test_max_combo_is_clamped():
    raw = dict(RAW, max_combo=0)
    with pytest.warns(InputWarning):
        pp = ppv2(**raw)
    assert math.isfinite(pp.total)
    assert pp.total > 0.0


def test_more_misses_than_combo():
    pp = ppv2(nmiss=1500, **RAW)
    assert math.isfinite(pp.total)
    assert pp.accuracy.nmiss == 1000


def test_hit_counts_match_accuracy(hddt_map):
    stars = rate(hddt_map)
    from_acc = ppv2(stars=stars, bmap=hddt_map, accuracy=1.0)
    from_counts = ppv2(stars=stars, bmap=hddt_map, n300=20)
    assert from_acc == from_counts


def test_nf_and_so_scale_the_total():
    base = ppv2(**RAW)
    assert ppv2(mods=Mods.NF, **RAW).total == pytest.approx(base.total * 0.9)
    assert ppv2(mods=Mods.SO, **RAW).total == \
        pytest.approx(base.total * 0.95)


def test_hidden_bonus():
    base = ppv2(**RAW)
    hd = ppv2(mods=Mods.HD, **RAW)
    # AR9: 1 + 0.04 * (12 - 9)
    assert hd.aim == pytest.approx(base.aim * 1.12)
    assert hd.speed == pytest.approx(base.speed * 1.12)
    assert hd.acc == pytest.approx(base.acc * 1.08)


def test_flashlight_bonus():
    base = ppv2(**RAW)
    fl = ppv2(mods=Mods.FL, **RAW)
    # 1000 objects: 1 + 0.35 + 0.3 + 500 / 1200
    assert fl.aim == pytest.approx(base.aim * (1.65 + 500.0 / 1200.0))
    assert fl.speed == base.speed
    assert fl.acc == pytest.approx(base.acc * 1.02)


def test_length_bonus_keeps_growing():
    short = ppv2(**RAW)
    longer = ppv2(**dict(RAW, nobjects=4000, ncircles=4000, max_combo=4000))
    # 0.95 + 0.4 * 0.5 against 1.35 + 0.5 * log10(2)
    ratio = (1.35 + 0.5 * math.log10(2.0)) / 1.15
    assert longer.aim == pytest.approx(short.aim * ratio)


def test_result_str(hddt_map):
    pp = ppv2(stars=rate(hddt_map), bmap=hddt_map, accuracy=1.0)
    assert pp.acc_percent == 100.0
    assert str(pp).endswith("for 100%")


@pytest.mark.parametrize("counts", [
    dict(n300=10, n100=10, n50=10),
    dict(n300=1000, n100=10),
    dict(n300=990, nmiss=20),
])
def test_hit_counts_must_cover_the_map(counts):
    with pytest.raises(ConfigurationError):
        ppv2(**dict(RAW, **counts))


def test_hit_counts_with_misses_cover_the_map():
    pp = ppv2(n300=980, n100=10, n50=5, nmiss=5, **RAW)
    assert pp.accuracy == accuracy(980, 10, 5, 5)
