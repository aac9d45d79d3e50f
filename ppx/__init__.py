"""
osu! pp and difficulty calculator.

pure python, strain based star rating and ppv2 in the style of
oppai-ng / pyttanko. rate a beatmap first, then feed the stars to
the pp calculator:

    stars = ppx.rate(bmap, mods)
    pp = ppx.ppv2(stars=stars, bmap=bmap, mods=mods, accuracy=0.99)

all results are immutable values and nothing is cached between
calls, so maps can be rated from several threads at once.
"""

__version__ = "2.0.0"

from ppx.errors import ConfigurationError, InputWarning
from ppx.beatmap import (v2f, circle, slider, spinner, timing, beatmap,
    MODE_STD, OBJ_CIRCLE, OBJ_SLIDER, OBJ_SPINNER)
from ppx.mods import Mods, mod_set, mods_str, mods_apply, map_stats
from ppx.diff import rate, star_rating
from ppx.acc import acc_calc, acc_round, accuracy
from ppx.pp import ppv2, ppv2_params, pp_result, performance
from ppx.config import DEFAULT_CONFIG, load_config, set_logger
