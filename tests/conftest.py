"""shared beatmaps for the calculator tests"""

import pytest

from ppx.beatmap import beatmap, circle, slider, spinner, timing, v2f

# ten far apart spots, visited twice
PATTERN = [
    (100, 100), (300, 100), (400, 250), (250, 350), (100, 250),
    (200, 200), (350, 180), (150, 320), (420, 60), (60, 60),
]


def jump_map(nobjects=20, spacing=150.0, slider_every=4, **kwargs):
    """
    a map jumping around PATTERN every `spacing` ms, every
    slider_every-th object is a half beat slider
    """
    objs = []
    for i in range(nobjects):
        t = 1000.0 + spacing * i
        pos = v2f(*PATTERN[i % len(PATTERN)])
        if slider_every and i % slider_every == slider_every - 1:
            objs.append(slider(t, pos, distance=70.0, duration=150.0,
                repetitions=1, end_pos=pos + v2f(70, 0)))
        else:
            objs.append(circle(t, pos))

    stats = dict(cs=4.0, od=8.0, ar=9.0, sv=1.4, tick_rate=1.0,
        timing_points=[timing(0.0, 300.0, True)])
    stats.update(kwargs)
    return beatmap(objs, **stats)


@pytest.fixture
def hddt_map():
    """20 objects, 5 of them sliders, max combo 25"""
    return jump_map()


@pytest.fixture
def stream_map():
    """a 1/4 stream at 180 bpm with a spinner at the end"""
    objs = [circle(500.0 + 83.0 * i, v2f(200 + 20 * (i % 5), 200))
        for i in range(32)]
    objs.append(spinner(objs[-1].time + 500.0, duration=2000.0))
    return beatmap(objs, cs=4.0, od=8.0, ar=9.0)


@pytest.fixture
def empty_map():
    return beatmap([])
