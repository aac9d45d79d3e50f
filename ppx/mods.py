"""mods utils"""

import enum
import math
from collections import namedtuple

from ppx.errors import ConfigurationError


class Mods(enum.IntFlag):
    """mod flags, using the same bits as the osu! api"""
    NOMOD = 0
    NF = 1<<0
    EZ = 1<<1
    TD = 1<<2 # touch device
    HD = 1<<3
    HR = 1<<4
    DT = 1<<6
    HT = 1<<8
    NC = 1<<9
    FL = 1<<10
    SO = 1<<12


MODS_SPEED_CHANGING = Mods.DT | Mods.HT | Mods.NC
MODS_MAP_CHANGING = Mods.HR | Mods.EZ | MODS_SPEED_CHANGING

# pairs that can't be active at the same time
MODS_EXCLUSIVE = [
    (Mods.DT | Mods.NC, Mods.HT),
    (Mods.EZ, Mods.HR),
]


def mod_set(*mods):
    """
    combines mods into a single Mods value, rejecting combinations
    the game doesn't allow (DT/NC with HT, EZ with HR).
    """
    res = Mods.NOMOD
    for mod in mods:
        res |= mod

    for left, right in MODS_EXCLUSIVE:
        if res & left != 0 and res & right != 0:
            raise ConfigurationError(
                "%s can't be combined with %s" % (
                    mods_str(res & left), mods_str(right))
            )

    return res


def mods_str(mods):
    """
    gets string representation of mods, such as HDDT.
    returns "nomod" for nomod
    """
    if mods == 0:
        return "nomod"

    res = ""

    if mods & Mods.HD != 0: res += "HD"
    if mods & Mods.HT != 0: res += "HT"
    if mods & Mods.HR != 0: res += "HR"
    if mods & Mods.EZ != 0: res += "EZ"
    if mods & Mods.TD != 0: res += "TD"
    if mods & Mods.NC != 0: res += "NC"
    elif mods & Mods.DT != 0: res += "DT"
    if mods & Mods.FL != 0: res += "FL"
    if mods & Mods.SO != 0: res += "SO"
    if mods & Mods.NF != 0: res += "NF"

    return res


# -------------------------------------------------------------------------
# stats with mods

OD0_MS = 79.5
OD10_MS = 19.5
AR0_MS = 1800.0
AR5_MS = 1200.0
AR10_MS = 450.0

OD_MS_STEP = (OD0_MS - OD10_MS) / 10.0
AR_MS_STEP1 = (AR0_MS - AR5_MS) / 5.0
AR_MS_STEP2 = (AR5_MS - AR10_MS) / 5.0

map_stats = namedtuple("map_stats", "speed_mul ar od cs hp")


def ar_to_ms(ar):
    """converts AR into the approach time in milliseconds"""
    if ar < 5.0:
        return AR0_MS - AR_MS_STEP1 * ar

    return AR5_MS - AR_MS_STEP2 * (ar - 5)


def ms_to_ar(arms):
    if arms > AR5_MS:
        return (AR0_MS - arms) / AR_MS_STEP1

    return 5.0 + (AR5_MS - arms) / AR_MS_STEP2


def speed_multiplier(mods):
    speed_mul = 1.0

    if mods & (Mods.DT | Mods.NC) != 0:
        speed_mul = 1.5

    if mods & Mods.HT != 0:
        speed_mul *= 0.75

    return speed_mul


def mods_apply(mods, ar=None, od=None, cs=None, hp=None):
    """
    calculates speed multiplier, ar, od, cs, hp with the given
    mods applied. returns map_stats(speed_mul, ar, od, cs, hp).

    the base stats are all optional and default to None. if a base
    stat is None, then it won't be calculated and will also be
    returned as None.
    """

    if mods & MODS_MAP_CHANGING == 0:
        return map_stats(1.0, ar, od, cs, hp)

    speed_mul = speed_multiplier(mods)

    od_ar_hp_multiplier = 1.0

    if mods & Mods.HR != 0:
        od_ar_hp_multiplier = 1.4

    if mods & Mods.EZ != 0:
        od_ar_hp_multiplier *= 0.5

    if ar is not None:
        ar *= od_ar_hp_multiplier

        # convert AR into milliseconds
        arms = ar_to_ms(ar)

        # stats must be capped to 0-10 before HT/DT which brings
        # them to a range of -4.42-11.08 for OD and -5-11 for AR
        arms = min(AR0_MS, max(AR10_MS, arms))
        arms /= speed_mul

        # convert back to AR
        ar = ms_to_ar(arms)


    if od is not None:
        od *= od_ar_hp_multiplier
        odms = OD0_MS - math.ceil(OD_MS_STEP * od)
        odms = min(OD0_MS, max(OD10_MS, odms))
        odms /= speed_mul
        od = (OD0_MS - odms) / OD_MS_STEP


    if cs is not None:
        # same factor as the other stats, the game client uses 1.3
        if mods & Mods.HR != 0:
            cs *= 1.4

        if mods & Mods.EZ != 0:
            cs *= 0.5

        cs = min(10.0, cs)


    if hp is not None:
        hp = min(10.0, hp * od_ar_hp_multiplier)

    return map_stats(speed_mul, ar, od, cs, hp)
