"""
difficulty calculator.

strain based star rating: every object adds aim and speed strain
on top of the decayed strain of the previous object, the map is cut
in 400ms sections and the peak strain of each section is weighted
from highest to lowest.

nothing is stored on the hit objects, the per-object values live in
a private list for the duration of a rate() call.
"""

import math
import logging
import warnings
from collections import namedtuple

from ppx.beatmap import (beatmap, v2f, MODE_STD, OBJ_CIRCLE, OBJ_SLIDER,
    OBJ_SPINNER)
from ppx.config import DEFAULT_CONFIG
from ppx.errors import ConfigurationError, InputWarning
from ppx.mods import Mods, mods_apply, mods_str, ar_to_ms

logger = logging.getLogger(__name__)

DIFF_SPEED = 0
DIFF_AIM = 1

PLAYFIELD_WIDTH = 512.0 # in osu!pixels

# objects closer than this are drawn as a stack
STACK_DISTANCE = 3.0


def d_spacing_weight(difftype, distance, delta_time, prev_distance,
    prev_delta_time, angle):

    # calculates spacing weight and returns (weight, is_single)
    # NOTE: is_single is only computed for DIFF_SPEED

    MIN_SPEED_BONUS = 75.0 # ~200BPM 1/4 streams
    MAX_SPEED_BONUS = 45.0 # ~330BPM 1/4 streams
    ANGLE_BONUS_SCALE = 90
    AIM_TIMING_THRESHOLD = 107
    SPEED_ANGLE_BONUS_BEGIN = 5 * math.pi / 6
    AIM_ANGLE_BONUS_BEGIN = math.pi / 3

    # arbitrary thresholds to determine when a stream is spaced
    # enough that it becomes hard to alternate
    SINGLE_SPACING = 125.0

    strain_time = max(delta_time, 50.0)
    prev_strain_time = max(prev_delta_time, 50.0)

    if difftype == DIFF_AIM:
        result = 0.0
        if angle is not None and angle > AIM_ANGLE_BONUS_BEGIN:
            angle_bonus = math.sqrt(
                max(prev_distance - ANGLE_BONUS_SCALE, 0.0) *
                pow(math.sin(angle - AIM_ANGLE_BONUS_BEGIN), 2.0) *
                max(distance - ANGLE_BONUS_SCALE, 0.0)
            )
            result = (
                1.5 * pow(max(0.0, angle_bonus), 0.99) /
                max(AIM_TIMING_THRESHOLD, prev_strain_time)
            )
        weighted_distance = pow(distance, 0.99)
        res = max(result +
            weighted_distance / max(AIM_TIMING_THRESHOLD, strain_time),
            weighted_distance / strain_time)
        return (res, False)

    elif difftype == DIFF_SPEED:
        is_single = distance > SINGLE_SPACING
        distance = min(distance, SINGLE_SPACING)
        delta_time = max(delta_time, MAX_SPEED_BONUS)
        speed_bonus = 1.0
        if delta_time < MIN_SPEED_BONUS:
            speed_bonus += pow((MIN_SPEED_BONUS - delta_time) / 40.0, 2)
        angle_bonus = 1.0
        if angle is not None and angle < SPEED_ANGLE_BONUS_BEGIN:
            s = math.sin(1.5 * (SPEED_ANGLE_BONUS_BEGIN - angle))
            angle_bonus += s * s / 3.57
            if angle < math.pi / 2.0:
                angle_bonus = 1.28
                if distance < ANGLE_BONUS_SCALE and angle < math.pi / 4.0:
                    angle_bonus += (
                        (1.0 - angle_bonus) *
                        min((ANGLE_BONUS_SCALE - distance) / 10.0, 1.0)
                    )
                elif distance < ANGLE_BONUS_SCALE:
                    angle_bonus += (
                        (1.0 - angle_bonus) *
                        min((ANGLE_BONUS_SCALE - distance) / 10.0, 1.0) *
                        math.sin((math.pi / 2.0 - angle) * 4.0 / math.pi)
                    )
        res = (
            (1 + (speed_bonus - 1) * 0.75) * angle_bonus *
            (0.95 + speed_bonus * pow(distance / SINGLE_SPACING, 3.5))
        ) / strain_time
        return (res, is_single)


    raise ValueError("unknown difftype %r" % (difftype,))


DECAY_BASE = [ 0.3, 0.15 ] # strain decay per interval
WEIGHT_SCALING = [ 1400.0, 26.25 ] # balances speed and aim


class diff_object:
    """
    working values for one hit object during a rate() call.

    normpos: stacked position normalized on circle radius
    angle: angle between the previous and the current jump, None for
           the first two objects
    delta_time d_distance: gap and distance to the previous object
    strains: [ speed, aim ]
    """
    __slots__ = ("obj", "normpos", "angle", "delta_time", "d_distance",
        "strains", "is_single")

    def __init__(self, obj, normpos):
        self.obj = obj
        self.normpos = normpos
        self.angle = None
        self.delta_time = 0.0
        self.d_distance = 0.0
        self.strains = [ 0.0, 0.0 ]
        self.is_single = False


def d_strain(difftype, obj, prevobj, speed_mul):
    # calculates the difftype strain value for a hitobject. stores
    # the result in obj.strains[difftype]
    # this assumes that normpos is already computed

    t = difftype
    value = 0.0
    time_elapsed = (obj.obj.time - prevobj.obj.time) / speed_mul
    obj.delta_time = time_elapsed
    decay = pow(DECAY_BASE[t], time_elapsed / 1000.0)

    # this implementation doesn't account for sliders
    if obj.obj.objtype & (OBJ_SLIDER | OBJ_CIRCLE) != 0:
        distance = (obj.normpos - prevobj.normpos).len()
        obj.d_distance = distance
        value, is_single = d_spacing_weight(t, distance, time_elapsed,
            prevobj.d_distance, prevobj.delta_time, obj.angle)
        value *= WEIGHT_SCALING[t]
        if t == DIFF_SPEED:
            obj.is_single = is_single


    obj.strains[t] = prevobj.strains[t] * decay + value


def calc_individual(difftype, objs, speed_mul):
    # calculates total strain for difftype. this assumes the
    # normalized positions for hitobjects are already present

    # max strains are weighted from highest to lowest.
    # this is how much the weight decays
    DECAY_WEIGHT = 0.9

    # strains are calculated by analyzing the map in chunks
    # and taking the peak strains in each chunk. this is the
    # length of a strain interval in milliseconds
    strain_step = 400.0 * speed_mul

    strains = []
    # first object doesn't generate a strain so we begin with
    # an incremented interval end
    interval_end = (
      math.ceil(objs[0].obj.time / strain_step) * strain_step
    )
    max_strain = 0.0

    t = difftype

    for i, obj in enumerate(objs[1:]):
        prev = objs[i]

        d_strain(difftype, obj, prev, speed_mul)

        while obj.obj.time > interval_end:
            # add max strain for this interval
            strains.append(max_strain)

            # decay last object's strains until the next
            # interval and use that as the initial max strain
            decay = pow(
                DECAY_BASE[t],
                (interval_end - prev.obj.time) / 1000.0
            )

            max_strain = prev.strains[t] * decay
            interval_end += strain_step


        max_strain = max(max_strain, obj.strains[t])


    # don't forget to add the last strain
    strains.append(max_strain)

    # weight the top strains sorted from highest to lowest
    weight = 1.0
    difficulty = 0.0

    strains.sort(reverse=True)

    for strain in strains:
        difficulty += strain * weight
        weight *= DECAY_WEIGHT


    return difficulty


# -------------------------------------------------------------------------
# stacking

def stack_heights(hitobjects, stack_threshold):
    """
    resolves stacks the way maps from file format v6 up are drawn.
    returns a list with the stack height of every object.

    objects are visited from last to first and each one looks back
    for objects it sits on, so a stack that keeps growing later in
    the map lifts every earlier object it reaches. objects on a
    slider tail get negative heights and are drawn below it.
    """
    objs = hitobjects
    heights = [0] * len(objs)

    for i in range(len(objs) - 1, 0, -1):
        if heights[i] != 0 or objs[i].objtype & OBJ_SPINNER != 0:
            continue

        # top of the stack found so far
        base = i

        if objs[i].objtype & OBJ_CIRCLE != 0:
            for n in range(i - 1, -1, -1):
                obj_n = objs[n]
                if obj_n.objtype & OBJ_SPINNER != 0:
                    continue

                if objs[base].time - obj_n.end_time > stack_threshold:
                    break

                tail_distance = (obj_n.tail_pos - objs[base].pos).len()
                if (obj_n.objtype & OBJ_SLIDER != 0 and
                    tail_distance < STACK_DISTANCE):
                    # everything stacked on the tail moves below it
                    offset = heights[base] - heights[n] + 1
                    for j in range(n + 1, i + 1):
                        d = (obj_n.tail_pos - objs[j].pos).len()
                        if d < STACK_DISTANCE:
                            heights[j] -= offset

                    break

                if (obj_n.pos - objs[base].pos).len() < STACK_DISTANCE:
                    heights[n] = heights[base] + 1
                    base = n

        elif objs[i].objtype & OBJ_SLIDER != 0:
            for n in range(i - 1, -1, -1):
                obj_n = objs[n]
                if obj_n.objtype & OBJ_SPINNER != 0:
                    continue

                if objs[base].time - obj_n.time > stack_threshold:
                    break

                if (obj_n.tail_pos - objs[base].pos).len() < STACK_DISTANCE:
                    heights[n] = heights[base] + 1
                    base = n

    return heights


def circle_radius(cs):
    """circle radius in osu!pixels for the given (mod adjusted) CS"""
    return (PLAYFIELD_WIDTH / 16.0) * (1.0 - 0.7 * (cs - 5.0) / 5.0)


# -------------------------------------------------------------------------
# star rating

class star_rating(namedtuple("star_rating",
    "total aim speed nsingles nsingles_threshold")):
    """
    difficulty of a beatmap with a set of mods.

    fields:
    total: star rating
    aim: aim stars
    speed: speed stars
    nsingles: number of notes that are considered singletaps by
              the difficulty calculator
    nsingles_threshold: number of taps slower or equal to the
                        singletap threshold value
    """
    __slots__ = ()

    def __str__(self):
        return """%g stars (%g aim, %g speed)
%d spacing singletaps
%d taps within singletap threshold""" % (
            self.total, self.aim, self.speed, self.nsingles,
            self.nsingles_threshold
        )


def rate(bmap, mods=Mods.NOMOD, config=None):
    """
    calculates the star rating of bmap with mods applied and returns
    a star_rating.

    bmap can also be a plain sequence of hit objects, which is rated
    as a beatmap with default stats.

    config keys used: singletap_threshold, the smallest milliseconds
    interval that will be considered singletappable (125ms is 240 bpm
    1/2), and stacking.
    """

    # non-normalized diameter where the small circle size buff
    # starts
    CIRCLESIZE_BUFF_THRESHOLD = 30.0
    STAR_SCALING_FACTOR = 0.0675 # global stars multiplier

    # 50% of the difference between aim and speed is added to
    # star rating to compensate aim only or speed only maps
    EXTREME_SCALING_FACTOR = 0.5

    if config is None:
        config = DEFAULT_CONFIG

    if not isinstance(bmap, beatmap):
        bmap = beatmap(bmap)

    if bmap.mode != MODE_STD:
        raise ConfigurationError(
            "difficulty is only implemented for osu!std, got mode %r"
            % (bmap.mode,)
        )

    objs = bmap.hitobjects
    if len(objs) == 0:
        msg = "beatmap has no hitobjects, rating it 0 stars"
        logger.warning(msg)
        warnings.warn(msg, InputWarning, stacklevel=2)
        return star_rating(0.0, 0.0, 0.0, 0, 0)

    playfield_center = v2f(
        PLAYFIELD_WIDTH / 2, PLAYFIELD_WIDTH / 2
    )

    # calculate CS with mods
    speed_mul, _, _, cs, _ = mods_apply(mods, cs=bmap.cs)

    # circle radius
    radius = circle_radius(cs)

    # positions are normalized on circle radius so that we can
    # calc as if everything was the same circlesize
    scaling_factor = 52.0 / radius

    # low cs buff (credits to osuElements)
    if radius < CIRCLESIZE_BUFF_THRESHOLD:
        scaling_factor *= (
            1.0 + min(CIRCLESIZE_BUFF_THRESHOLD - radius, 5.0) / 50.0
        )


    playfield_center *= scaling_factor

    # stacks use the approach time in map time, so only HR/EZ count
    heights = [0] * len(objs)
    if config["stacking"]:
        ar = mods_apply(mods & (Mods.HR | Mods.EZ), ar=bmap.ar).ar
        stack_threshold = ar_to_ms(ar) * bmap.stack_leniency
        heights = stack_heights(objs, stack_threshold)

    stack_offset = radius / 10.0

    # calculate normalized positions
    dobjs = []
    prev1 = None
    prev2 = None
    for i, obj in enumerate(objs):
        if obj.objtype & OBJ_SPINNER != 0:
            normpos = v2f(playfield_center.x, playfield_center.y)
        else:
            offset = stack_offset * heights[i]
            pos = obj.pos - v2f(offset, offset)
            normpos = pos * scaling_factor

        dobj = diff_object(obj, normpos)

        if i >= 2:
            v1 = prev2.normpos - prev1.normpos
            v2 = dobj.normpos - prev1.normpos
            dot = v1.dot(v2)
            det = v1.x * v2.y - v1.y * v2.x
            dobj.angle = abs(math.atan2(det, dot))

        dobjs.append(dobj)
        prev2 = prev1
        prev1 = dobj

    # speed and aim stars
    speed = calc_individual(DIFF_SPEED, dobjs, speed_mul)
    aim = calc_individual(DIFF_AIM, dobjs, speed_mul)

    speed = math.sqrt(speed) * STAR_SCALING_FACTOR
    aim = math.sqrt(aim) * STAR_SCALING_FACTOR
    if mods & Mods.TD != 0:
        aim = pow(aim, 0.8)

    # total stars
    total = aim + speed
    total += (
        abs(speed - aim) *
            EXTREME_SCALING_FACTOR
    )

    # singletap stats
    nsingles = nsingles_threshold = 0
    singletap_threshold = config["singletap_threshold"]

    for i, dobj in enumerate(dobjs[1:]):
        prev = dobjs[i]

        if dobj.is_single:
            nsingles += 1

        if dobj.obj.objtype & (OBJ_CIRCLE | OBJ_SLIDER) == 0:
            continue

        interval = (dobj.obj.time - prev.obj.time) / speed_mul

        if interval >= singletap_threshold:
            nsingles_threshold += 1


    res = star_rating(total, aim, speed, nsingles, nsingles_threshold)
    logger.debug("%d objects +%s: %g stars (%g aim, %g speed)",
        len(objs), mods_str(mods), total, aim, speed)

    return res
