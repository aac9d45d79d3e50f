"""
beatmap data model.

the bare minimum amount of data about a beatmap to perform
difficulty and pp calculation. everything here is immutable once
built: hit objects are records, the beatmap keeps them in a tuple.
parsing .osu files is left to the caller.
"""

import math
from collections import namedtuple

from ppx.errors import ConfigurationError

MODE_STD = 0

PLAYFIELD_CENTER = (256.0, 192.0)


class v2f(namedtuple("v2f", "x y")):
    """2D vector with float values"""
    __slots__ = ()

    def __new__(cls, x=0.0, y=0.0):
        return super(v2f, cls).__new__(cls, float(x), float(y))

    def __sub__(self, other):
        return v2f(self.x - other.x, self.y - other.y)

    def __add__(self, other):
        return v2f(self.x + other.x, self.y + other.y)

    def __mul__(self, other):
        return v2f(self.x * other, self.y * other)

    def len(self):
        return math.sqrt(self.x * self.x + self.y * self.y)

    def dot(self, other):
        return self.x * other.x + self.y * other.y


# -------------------------------------------------------------------------
# hit objects

OBJ_CIRCLE = 1<<0
OBJ_SLIDER = 1<<1
OBJ_SPINNER = 1<<3


class circle(namedtuple("circle", "time pos")):
    """
    a hit circle.

    time: start time in milliseconds (float)
    pos: instance of v2f
    """
    __slots__ = ()
    objtype = OBJ_CIRCLE

    @property
    def end_time(self):
        return self.time

    @property
    def tail_pos(self):
        return self.pos


class slider(namedtuple("slider",
    "time pos distance duration repetitions end_pos")):
    """
    a slider.

    distance: distance travelled by one repetition (float)
    duration: total time in milliseconds over all repetitions
    repetitions: number of passes over the path, 1 means no repeats
    end_pos: position at the far end of the path. None means the
             path ends where it starts
    """
    __slots__ = ()
    objtype = OBJ_SLIDER

    def __new__(cls, time, pos, distance=0.0, duration=0.0,
        repetitions=1, end_pos=None):
        return super(slider, cls).__new__(
            cls, time, pos, distance, duration, repetitions, end_pos)

    @property
    def end_time(self):
        return self.time + self.duration

    @property
    def tail_pos(self):
        # an even number of passes brings the ball back to the head
        if self.end_pos is None or self.repetitions % 2 == 0:
            return self.pos
        return self.end_pos


class spinner(namedtuple("spinner", "time duration pos")):
    __slots__ = ()
    objtype = OBJ_SPINNER

    def __new__(cls, time, duration=0.0, pos=None):
        if pos is None:
            pos = v2f(*PLAYFIELD_CENTER)
        return super(spinner, cls).__new__(cls, time, duration, pos)

    @property
    def end_time(self):
        return self.time + self.duration

    @property
    def tail_pos(self):
        return self.pos


class timing(namedtuple("timing", "time ms_per_beat change")):
    """
    a timing point.
    time: start time in milliseconds (float)
    change: if False, ms_per_beat is -100.0 * bpm_multiplier
    """
    __slots__ = ()

    def __new__(cls, time=0.0, ms_per_beat=-100.0, change=False):
        return super(timing, cls).__new__(cls, time, ms_per_beat, change)


# -------------------------------------------------------------------------
# beatmap

class beatmap:
    """
    the map aggregate handed over by the parser.

    fields:
    mode: gamemode, see MODE_* constants (integer)
    title artist creator version: metadata strings
    ncircles, nsliders, nspinners: derived from hitobjects
    hp cs od ar (float), ar defaults to od for old maps
    sv tick_rate stack_leniency (float)
    hitobjects: tuple of circle, slider and spinner, time ascending
    timing_points: tuple (timing), time ascending
    """
    def __init__(self, hitobjects=(), mode=MODE_STD, cs=5.0, od=5.0,
        ar=None, hp=5.0, sv=1.0, tick_rate=1.0, stack_leniency=0.7,
        timing_points=(), format_version=14, title="", artist="",
        creator="", version=""):
        hitobjects = tuple(hitobjects)

        for i in range(1, len(hitobjects)):
            if hitobjects[i].time < hitobjects[i - 1].time:
                raise ConfigurationError(
                    "hitobject %d at %gms starts before the previous one "
                    "at %gms" % (i, hitobjects[i].time,
                        hitobjects[i - 1].time)
                )

        self.hitobjects = hitobjects
        self.timing_points = tuple(timing_points)
        self.mode = mode
        self.format_version = format_version

        self.title = title
        self.artist = artist
        self.creator = creator
        self.version = version

        self.hp = hp
        self.cs = cs
        self.od = od
        self.ar = od if ar is None else ar
        self.sv = sv
        self.tick_rate = tick_rate
        self.stack_leniency = stack_leniency

        self.ncircles = self.nsliders = self.nspinners = 0
        for obj in hitobjects:
            if obj.objtype & OBJ_CIRCLE != 0:
                self.ncircles += 1
            elif obj.objtype & OBJ_SLIDER != 0:
                self.nsliders += 1
            elif obj.objtype & OBJ_SPINNER != 0:
                self.nspinners += 1


    def __str__(self):
        s = self
        return """beatmap(
    title="%s", artist="%s", creator="%s", version="%s",
    ncircles=%d, nsliders=%d, nspinners=%d,
    hp=%g, cs=%g, od=%g, ar=%g,
    sv=%g, tick_rate=%g\n)""" % (
            s.title, s.artist, s.creator, s.version,
            s.ncircles, s.nsliders, s.nspinners, s.hp, s.cs, s.od,
            s.ar, s.sv, s.tick_rate
        )


    def __repr__(self):
        return str(self)

    def __len__(self):
        return len(self.hitobjects)

    def max_combo(self):
        points = self.timing_points

        # no slider velocity to derive ticks from
        if len(points) == 0:
            return len(self.hitobjects)

        res = 0
        tindex = -1
        tnext = -float("inf")

        px_per_beat = None

        for obj in self.hitobjects:
            if obj.objtype & OBJ_SLIDER == 0:
                res += 1
                continue


            # keep track of the current timing point without
            # looping through all of the timing points for every
            # object
            while tnext is not None and obj.time >= tnext:
                tindex += 1
                if len(points) > tindex + 1:
                    tnext = points[tindex + 1].time
                else:
                    tnext = None

                t = points[tindex]
                sv_multiplier = 1.0

                if not t.change and t.ms_per_beat < 0:
                    sv_multiplier = (-100.0 / t.ms_per_beat)

                px_per_beat = self.sv * 100.0 * sv_multiplier
                if self.format_version < 8:
                    px_per_beat /= sv_multiplier


            # slider ticks
            repetitions = max(1, obj.repetitions)

            num_beats = (
                (obj.distance * repetitions) / px_per_beat
            )

            ticks = int(
                math.ceil(
                    (num_beats - 0.1) /
                    repetitions * self.tick_rate
                )
            )

            ticks -= 1
            ticks *= repetitions
            ticks += repetitions + 1

            res += max(0, ticks)


        return res
