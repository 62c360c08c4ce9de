import random
import numpy as np, cv2
from gazeboard.events import GazePoint
from gazeboard.heatmap import colorize, density_field, encode_png, peak_cell, render

def pts(coords):
    return [GazePoint(x=x, y=y) for x, y in coords]

def test_empty_is_transparent():
    out = render([], 120, 80)
    assert out.shape == (80, 120, 4) and out.dtype == np.uint8
    assert (out[..., 3] == 0).all()

def test_single_point_peak_is_red():
    field = density_field(pts([(50, 50)]), 100, 100, radius=30)
    assert peak_cell(field) == (50, 50)
    assert field[50, 80] == 0 and field[50, 20] == 0 and field[95, 95] == 0
    out = render(pts([(50, 50)]), 100, 100, radius=30)
    assert tuple(out[50, 50]) == (255, 0, 0, 224)
    assert out[50, 80, 3] == 0 and out[0, 0, 3] == 0

def test_linear_falloff():
    field = density_field(pts([(50, 50)]), 100, 100, radius=30)
    assert np.isclose(field[50, 65], 0.5)
    assert np.isclose(field[50, 50], 1.0)

def test_order_invariance():
    rnd = random.Random(7)
    coords = [(rnd.uniform(-20, 220), rnd.uniform(-20, 140)) for _ in range(150)] + [(30, 30)] * 5
    a = render(pts(coords), 200, 120, radius=12)
    rnd.shuffle(coords)
    b = render(pts(coords), 200, 120, radius=12)
    assert np.array_equal(a, b)

def test_points_outside_contribute_nothing():
    out = render(pts([(-1, 50), (100, 50), (50, 500)]), 100, 100, radius=30)
    assert (out[..., 3] == 0).all()

def test_edge_point_is_clipped():
    field = density_field(pts([(0, 0)]), 40, 40, radius=10)
    assert field[0, 0] == 1.0 and field[0, 10] == 0

def test_rounding_half_up():
    field = density_field(pts([(9.5, 4.5)]), 20, 20, radius=3)
    assert peak_cell(field) == (10, 5)

def test_band_edges():
    v = np.array([0.0, 0.125, 0.25, 0.5, 0.75, 1.0])
    rgba = colorize(v)
    assert tuple(rgba[0]) == (0, 0, 0, 0)
    assert tuple(rgba[1]) == (0, 0, 128, 64)
    assert tuple(rgba[2]) == (0, 0, 255, 128)
    assert tuple(rgba[3]) == (0, 255, 0, 192)
    assert tuple(rgba[4]) == (255, 255, 0, 224)
    assert tuple(rgba[5]) == (255, 0, 0, 224)

def test_png_encodes():
    png = encode_png(render(pts([(10, 10)]), 32, 24, radius=5))
    img = cv2.imdecode(np.frombuffer(png, np.uint8), cv2.IMREAD_UNCHANGED)
    assert img.shape == (24, 32, 4)
    assert img[10, 10, 3] == 224
