"""
pp calculator.

takes the aim and speed stars from diff.rate() and the stats of a
play and returns the performance points it is worth, split into
aim, speed and accuracy.
"""

import math
import logging
import warnings
from collections import namedtuple

from ppx.acc import acc_calc, accuracy
from ppx.beatmap import MODE_STD
from ppx.errors import ConfigurationError, InputWarning
from ppx.mods import Mods, mods_apply, mods_str

logger = logging.getLogger(__name__)

SCORE_VERSIONS = (1, 2)


class ppv2_params(namedtuple("ppv2_params", [
    "aim_stars", "speed_stars", "stars", "max_combo", "nsliders",
    "ncircles", "nobjects", "base_ar", "base_od", "mode", "mods",
    "combo", "nmiss", "accuracy", "n300", "n100", "n50",
    "score_version", "bmap"])):
    """
    everything ppv2 needs to know about a play.

    stars: a star_rating, replaces aim_stars and speed_stars
    bmap: if set, mode, base_ar, base_od, max_combo, nsliders,
          ncircles and nobjects are taken from it
    combo: max combo reached, -1 means max_combo - nmiss
    accuracy: 0.0-1.0, hit counts are rounded from it
    n300 n100 n50: if n300 is set the hit counts are used as they are
                   and accuracy is ignored. together with nmiss they
                   must add up to the number of objects
    score_version: 1 or 2
    """
    __slots__ = ()

    def __new__(cls, aim_stars=None, speed_stars=None, stars=None,
        max_combo=None, nsliders=None, ncircles=None, nobjects=None,
        base_ar=5.0, base_od=5.0, mode=MODE_STD, mods=Mods.NOMOD,
        combo=-1, nmiss=0, accuracy=1.0, n300=None, n100=0, n50=0,
        score_version=1, bmap=None):
        return super(ppv2_params, cls).__new__(cls, aim_stars,
            speed_stars, stars, max_combo, nsliders, ncircles, nobjects,
            base_ar, base_od, mode, mods, combo, nmiss, accuracy, n300,
            n100, n50, score_version, bmap)


class pp_result(namedtuple("pp_result", "total aim speed acc accuracy")):
    """
    fields:
    total: pp for the play
    aim speed acc: pp of each skill, before the final multiplier
    accuracy: the accuracy (hit counts) the pp were computed with
    """
    __slots__ = ()

    @property
    def acc_percent(self):
        return self.accuracy.value() * 100.0

    def __str__(self):
        return "%g pp (%g aim, %g speed, %g acc) for %g%%" % (
            self.total, self.aim, self.speed, self.acc, self.acc_percent)


def pp_base(stars):
    # base pp value for stars, used internally by ppv2
    return (
        pow(5.0 * max(1.0, stars / 0.0675) - 4.0, 3.0) / 100000.0
    )


def warn_input(msg):
    logger.warning(msg)
    warnings.warn(msg, InputWarning, stacklevel=3)


def performance(p):
    """
    calculates ppv2 for the play described by p (a ppv2_params)
    and returns a pp_result.
    """

    aim_stars = p.aim_stars
    speed_stars = p.speed_stars
    if p.stars is not None:
        aim_stars = p.stars.aim
        speed_stars = p.stars.speed

    if aim_stars is None:
        raise ConfigurationError("missing aim_stars or stars")

    if speed_stars is None:
        raise ConfigurationError("missing speed_stars or stars")

    mode = p.mode
    base_ar = p.base_ar
    base_od = p.base_od
    max_combo = p.max_combo
    nsliders = p.nsliders
    ncircles = p.ncircles
    nobjects = p.nobjects

    if p.bmap is not None:
        mode = p.bmap.mode
        base_ar = p.bmap.ar
        base_od = p.bmap.od
        max_combo = p.bmap.max_combo()
        nsliders = p.bmap.nsliders
        ncircles = p.bmap.ncircles
        nobjects = len(p.bmap.hitobjects)

    else:
        if max_combo is None:
            raise ConfigurationError("missing max_combo or bmap")

        if nsliders is None:
            raise ConfigurationError("missing nsliders or bmap")

        if ncircles is None:
            raise ConfigurationError("missing ncircles or bmap")

        if nobjects is None:
            raise ConfigurationError("missing nobjects or bmap")


    if mode != MODE_STD:
        raise ConfigurationError(
            "ppv2 is only implemented for osu!std, got mode %r" % (mode,)
        )

    score_version = p.score_version
    if score_version not in SCORE_VERSIONS:
        raise ConfigurationError("unsupported scorev%s" % score_version)

    mods = p.mods
    nmiss = p.nmiss

    if nobjects <= 0:
        warn_input("no hitobjects, the play is worth 0pp")
        return pp_result(0.0, 0.0, 0.0, 0.0, accuracy(0, 0, 0, 0))

    if max_combo <= 0:
        warn_input("max_combo <= 0, changing to 1")
        max_combo = 1

    combo = p.combo
    if combo < 0:
        combo = max_combo - nmiss

    # more misses than combo would leave the combo ratio imaginary
    combo = max(0, combo)

    # accuracy ----------------------------------------------------
    if p.n300 is not None:
        acc_counts = accuracy(p.n300, p.n100, p.n50, nmiss)
        if acc_counts.nobjects != nobjects:
            raise ConfigurationError(
                "hit counts add up to %d objects, the map has %d" % (
                    acc_counts.nobjects, nobjects)
            )

        acc_value = acc_counts.value()

    else:
        # the hit counts only matter for the scorev1 circle
        # accuracy, the bonuses use the accuracy as given
        acc_counts = accuracy.from_percent(p.accuracy, nobjects, nmiss)
        acc_value = p.accuracy

    n300, n100, n50, _ = acc_counts
    real_acc = acc_counts.value()

    if score_version == 1:
        # scorev1 ignores sliders since they are free 300s
        # for whatever reason it also ignores spinners
        nspinners = nobjects - nsliders - ncircles
        real_acc = acc_calc(
            max(n300 - nsliders - nspinners, 0), n100, n50, nmiss
        )

        # can go negative if we miss everything
        real_acc = max(0.0, real_acc)

    elif score_version == 2:
        ncircles = nobjects

    # global values -----------------------------------------------
    nobjects_over_2k = nobjects / 2000.0

    length_bonus = 0.95 + 0.4 * min(1.0, nobjects_over_2k)

    if nobjects > 2000:
        length_bonus += math.log10(nobjects_over_2k) * 0.5

    miss_penality = pow(0.97, nmiss)
    combo_break = pow(combo, 0.8) / pow(max_combo, 0.8)

    # calculate stats with mods
    _, ar, od, _, _ = (
        mods_apply(mods, ar=base_ar, od=base_od)
    )

    # ar bonus ----------------------------------------------------
    ar_bonus = 1.0

    if ar > 10.33:
        ar_bonus += 0.3 * (ar - 10.33)

    elif ar < 8.0:
        ar_bonus += 0.01 * (8.0 - ar)


    # aim pp ------------------------------------------------------
    aim = pp_base(aim_stars)
    aim *= length_bonus
    aim *= miss_penality
    aim *= combo_break
    aim *= ar_bonus

    hd_bonus = 1.0
    if mods & Mods.HD != 0:
        hd_bonus += 0.04 * (12.0 - ar)

    if mods & Mods.FL != 0:
        fl_bonus = 1.0 + 0.35 * min(1.0, nobjects / 200.0)
        if nobjects > 200:
            fl_bonus += 0.3 * min(1.0, (nobjects - 200) / 300.0)
        if nobjects > 500:
            fl_bonus += (nobjects - 500) / 1200.0
        aim *= fl_bonus

    acc_bonus = 0.5 + acc_value / 2.0
    od_squared = od * od
    od_bonus = 0.98 + od_squared / 2500.0

    aim *= acc_bonus
    aim *= od_bonus
    aim *= hd_bonus

    # speed pp ----------------------------------------------------
    speed = pp_base(speed_stars)
    speed *= length_bonus
    speed *= miss_penality
    speed *= combo_break
    speed *= ar_bonus
    speed *= hd_bonus

    # scale the speed value with accuracy slightly
    speed *= 0.02 + acc_value

    # it is important to also consider accuracy difficulty when
    # doing that
    speed *= 0.96 + od_squared / 1600.0

    # acc pp ------------------------------------------------------
    acc = pow(1.52163, od) * pow(real_acc, 24.0) * 2.83

    # length bonus (not the same as speed/aim length bonus)
    acc *= min(1.15, pow(ncircles / 1000.0, 0.3))

    if mods & Mods.HD != 0:
        acc *= 1.08

    if mods & Mods.FL != 0:
        acc *= 1.02

    # total pp ----------------------------------------------------
    final_multiplier = 1.12

    if mods & Mods.NF != 0:
        final_multiplier *= 0.90

    if mods & Mods.SO != 0:
        final_multiplier *= 0.95

    total = (
        pow(
            pow(aim, 1.1) + pow(speed, 1.1) + pow(acc, 1.1),
            1.0 / 1.1
        ) * final_multiplier
    )

    res = pp_result(total, aim, speed, acc, acc_counts)
    logger.debug("+%s %dx %dm scorev%d: %s", mods_str(mods), combo,
        nmiss, score_version, res)

    return res


def ppv2(**kwargs):
    """
    calculates ppv2, shortcut for performance(ppv2_params(**kwargs)).
    see ppv2_params for the arguments.
    """
    return performance(ppv2_params(**kwargs))
