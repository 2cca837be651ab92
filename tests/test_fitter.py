import pytest

from guidance.fitter import angle_from_slope, fit_centerline
from guidance.models import FitStatus


def test_fit_recovers_exact_line():
    a0, b0 = 0.5, 10.0
    points = [(a0 * y + b0, float(y)) for y in range(0, 220, 20)]
    result = fit_centerline(points)
    assert result.status is FitStatus.OK
    assert result.points == len(points)
    assert result.fit.slope == pytest.approx(a0, abs=1e-9)
    assert result.fit.intercept == pytest.approx(b0, abs=1e-6)


def test_fit_recovers_negative_slope_from_three_points():
    points = [(380.0, 0.0), (320.0, 310.0), (260.0, 620.0)]
    result = fit_centerline(points)
    assert result.ok
    assert result.fit.slope == pytest.approx(-120.0 / 620.0)
    assert result.fit.x_at(310.0) == pytest.approx(320.0)


@pytest.mark.parametrize("n", [0, 1, 2])
def test_fit_needs_three_points(n):
    points = [(100.0, float(20 * i)) for i in range(n)]
    result = fit_centerline(points)
    assert result.status is FitStatus.INSUFFICIENT
    assert result.fit is None


def test_fit_is_degenerate_when_all_points_share_y():
    result = fit_centerline([(1.0, 5.0), (2.0, 5.0), (3.0, 5.0)])
    assert result.status is FitStatus.DEGENERATE
    assert result.fit is None
    assert not result.ok


def test_vertical_centerline_has_zero_slope():
    result = fit_centerline([(320.0, float(y)) for y in range(0, 640, 20)])
    assert result.fit.slope == pytest.approx(0.0, abs=1e-9)
    assert result.fit.intercept == pytest.approx(320.0)


def test_angle_from_slope():
    assert angle_from_slope(0.0) == 0.0
    assert angle_from_slope(1.0) == pytest.approx(45.0)
    assert angle_from_slope(-1.0) == pytest.approx(-45.0)
    assert 89.0 < angle_from_slope(1e6) < 90.0
