import pytest

from tracegraph.types import MAX_U64, ZoomAxis, ZoomDirection
from tracegraph import viewport as vp
from tracegraph.viewport import Viewport


def test_address_move_saturates_at_zero():
    assert vp.address_move(Viewport(view_address=5), -10).view_address == 0


def test_address_move_saturates_at_max():
    moved = vp.address_move(Viewport(view_address=MAX_U64 - 1), 10)
    assert moved.view_address == MAX_U64


def test_time_move_saturates_both_ways():
    assert vp.time_move(Viewport(view_time=3), -4).view_time == 0
    assert vp.time_move(Viewport(view_time=MAX_U64), 1).view_time == MAX_U64
    assert vp.time_move(Viewport(view_time=3), 4).view_time == 7


def test_moves_leave_the_original_viewport_alone():
    original = Viewport(view_address=100)
    moved = vp.address_move(original, 50)
    assert original.view_address == 100
    assert moved.view_address == 150


def test_fit_zoom_spans_the_whole_trace():
    fitted = vp.fit_zoom(Viewport(), 800, 400, 0x2000, 200)
    assert fitted.address_zoom_factor == pytest.approx(800 / 0x2000)
    assert fitted.time_zoom_factor == pytest.approx(2.0)


def test_fit_zoom_on_an_empty_trace():
    fitted = vp.fit_zoom(Viewport(address_zoom_factor=3.0, time_zoom_factor=3.0), 800, 400, 0, 0)
    assert fitted.address_zoom_factor == 1.0
    assert fitted.time_zoom_factor == 1.0


def test_fit_zoom_keeps_the_factor_of_a_collapsed_axis():
    start = Viewport(address_zoom_factor=3.0, time_zoom_factor=3.0)

    fitted = vp.fit_zoom(start, 0, 400, 0x2000, 200)
    assert fitted.address_zoom_factor == 3.0
    assert fitted.time_zoom_factor == pytest.approx(2.0)

    fitted = vp.fit_zoom(start, 800, 0, 0x2000, 200)
    assert fitted.address_zoom_factor == pytest.approx(800 / 0x2000)
    assert fitted.time_zoom_factor == 3.0


def test_overview_resets_origins():
    result = vp.overview(Viewport(view_address=0x500, view_time=99), 100, 100, 100, 100)
    assert result.at_origin
    assert result.address_zoom_factor == pytest.approx(1.0)


def test_wheel_zoom_recenters_on_the_cursor():
    zoomed = vp.wheel_zoom(Viewport(), 100, 50, 0.1)

    assert zoomed.view_address == 18   # int(100 * 0.2 / 1.1)
    assert zoomed.view_time == 9       # int(50 * 0.2 / 1.1)
    assert zoomed.address_zoom_factor == pytest.approx(1.1 / 0.9)
    assert zoomed.time_zoom_factor == pytest.approx(1.1 / 0.9)


def test_wheel_zoom_on_a_single_axis():
    zoomed = vp.wheel_zoom(Viewport(), 100, 50, 0.1, ZoomAxis.ADDRESS)
    assert zoomed.view_address == 18
    assert zoomed.view_time == 0
    assert zoomed.time_zoom_factor == 1.0

    zoomed = vp.wheel_zoom(Viewport(), 100, 50, 0.1, ZoomAxis.TIME)
    assert zoomed.view_address == 0
    assert zoomed.address_zoom_factor == 1.0
    assert zoomed.view_time == 9


def test_wheel_zoom_out_clamps_at_the_origin():
    zoomed = vp.wheel_zoom(Viewport(), 100, 50, -0.1)
    assert zoomed.at_origin
    assert zoomed.address_zoom_factor == pytest.approx(0.9 / 1.1)


@pytest.mark.parametrize("f", [0.0, 1.0, -1.0, 3.5])
def test_wheel_zoom_ignores_degenerate_deltas(f):
    viewport = Viewport(view_address=10)
    assert vp.wheel_zoom(viewport, 100, 100, f) == viewport


def test_rect_zoom_forward():
    zoomed = vp.rect_zoom(Viewport(), (300, 250), (100, 50), 800, 400, ZoomDirection.FORWARD)

    assert zoomed.view_address == 100
    assert zoomed.view_time == 50
    assert zoomed.address_zoom_factor == pytest.approx(4.0)
    assert zoomed.time_zoom_factor == pytest.approx(2.0)


def test_rect_zoom_backward():
    start = Viewport(view_address=1000, view_time=1000)
    zoomed = vp.rect_zoom(start, (100, 50), (300, 250), 800, 400, ZoomDirection.BACKWARD)

    assert zoomed.address_zoom_factor == pytest.approx(0.25)
    assert zoomed.time_zoom_factor == pytest.approx(0.5)
    assert zoomed.view_address == 600
    assert zoomed.view_time == 900


@pytest.mark.parametrize("end", [(105, 300), (300, 59), (109, 59)])
def test_rect_zoom_discards_misclicks(end):
    viewport = Viewport(view_address=7)
    assert vp.rect_zoom(viewport, (100, 50), end, 800, 400) == viewport


@pytest.mark.parametrize("direction", [ZoomDirection.FORWARD, ZoomDirection.BACKWARD])
def test_rect_zoom_without_a_host_area_is_a_no_op(direction):
    viewport = Viewport(view_address=7, address_zoom_factor=2.0)
    assert vp.rect_zoom(viewport, (100, 50), (300, 250), 0, 400, direction) == viewport
    assert vp.rect_zoom(viewport, (100, 50), (300, 250), 800, 0, direction) == viewport


def test_rect_zoom_rejects_unknown_directions():
    with pytest.raises(ValueError):
        vp.rect_zoom(Viewport(), (0, 0), (100, 100), 800, 400, ZoomDirection.NONE)


def test_size_zoom_never_shrinks_below_one():
    assert vp.size_zoom(Viewport(), -0.5).size_factor == 1.0
    assert vp.size_zoom(Viewport(), 0.5).size_factor == pytest.approx(3.0)


def test_size_px_never_drops_below_one():
    assert vp.adjust_size_px(Viewport(), -1).size_px == 1
    assert vp.adjust_size_px(Viewport(size_px=2), 1).size_px == 3


def test_coordinate_helpers():
    viewport = Viewport(view_address=0x100, view_time=20, address_zoom_factor=2.0, time_zoom_factor=0.5)
    assert viewport.display_address_at(10) == 0x105
    assert viewport.time_at(10) == 40
