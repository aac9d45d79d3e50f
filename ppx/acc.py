"""accuracy <-> hit count conversions"""

import math
from collections import namedtuple


def acc_calc(n300, n100, n50, misses):
    """calculates accuracy (0.0-1.0)"""
    h = n300 + n100 + n50 + misses

    if h <= 0:
        return 0.0

    return (n50 * 50.0 + n100 * 100.0 + n300 * 300.0) / (h * 300.0)


def acc_round(acc, nobjects, misses=0):
    """
    rounds acc (0.0-1.0) to the closest amount of 300s and 100s.
    50s are never used. returns (n300, n100, n50)
    """

    nobjects = max(0, nobjects)
    misses = max(0, min(nobjects, misses))
    max300 = nobjects - misses

    if max300 <= 0:
        return (0, 0, 0)

    maxacc = acc_calc(max300, 0, 0, misses)
    acc = max(0.0, min(maxacc, acc))

    # solves (3 * (max300 - n100) + n100) / (3 * nobjects) = acc,
    # halves round up
    n100 = int(math.floor(-1.5 * ((acc - 1.0) * nobjects + misses) + 0.5))
    n100 = max(0, min(max300, n100))

    return (max300 - n100, n100, 0)


class accuracy(namedtuple("accuracy", "n300 n100 n50 nmiss")):
    """
    hit counts of a play.

    n300 + n100 + n50 + nmiss is the number of objects that were
    judged, value() is the accuracy in 0.0-1.0
    """
    __slots__ = ()

    @classmethod
    def from_percent(cls, acc, nobjects, nmiss=0):
        """
        reconstructs hit counts from an accuracy fraction (0.0-1.0),
        see acc_round
        """
        nmiss = max(0, min(nobjects, nmiss))
        n300, n100, n50 = acc_round(acc, nobjects, nmiss)
        return cls(n300, n100, n50, nmiss)

    @property
    def nobjects(self):
        return self.n300 + self.n100 + self.n50 + self.nmiss

    def value(self):
        return acc_calc(self.n300, self.n100, self.n50, self.nmiss)

    def __str__(self):
        return "%.2f%% (%dx300 %dx100 %dx50 %dxmiss)" % (
            self.value() * 100.0, self.n300, self.n100, self.n50,
            self.nmiss)
