import numpy
import pytest

from fiberunfold.curve import geometry
from fiberunfold.curve import interpolate


def circle(radius, num_points):
    theta = numpy.linspace(0, 2*numpy.pi, num_points, endpoint=False)
    return numpy.transpose([radius*numpy.cos(theta) + 50, radius*numpy.sin(theta) + 50])


def test_cumulative_distances():
    points = numpy.array([[0, 0], [3, 4], [3, 10]])
    numpy.testing.assert_allclose(geometry.cumulative_distances(points, unit=False), [0, 5, 11])
    numpy.testing.assert_allclose(geometry.cumulative_distances(points), [0, 5/11, 1])


def test_filter_dup_points():
    points = [[0, 0], [0, 0], [1, 1], [1, 1], [0, 0]]
    numpy.testing.assert_array_equal(geometry.filter_dup_points(points), [[0, 0], [1, 1], [0, 0]])


def test_slopes_match_polyfit():
    rs = numpy.random.RandomState(0)
    x = numpy.arange(30, dtype=float) + rs.uniform(-0.2, 0.2, 30)
    y = 0.05 * (x - 15)**2 + rs.normal(scale=0.5, size=30)
    points = numpy.transpose([x, y])
    slopes = geometry.least_squares_slopes(points)
    assert slopes.shape == (26,)
    expected = [numpy.polyfit(x[i-2:i+3], y[i-2:i+3], 1)[0] for i in range(2, 28)]
    numpy.testing.assert_allclose(slopes, expected, rtol=1e-9, atol=1e-12)


def test_normals_are_unit_and_orthogonal():
    points = interpolate.densify_polyline([[0, 0], [10, 3], [25, -4], [40, 8]])
    slopes = geometry.least_squares_slopes(points)
    normals = geometry.slope_normals(slopes)
    numpy.testing.assert_allclose(numpy.linalg.norm(normals, axis=1), 1)
    tangents = numpy.transpose([numpy.ones_like(slopes), slopes])
    numpy.testing.assert_allclose((normals * tangents).sum(axis=1), 0, atol=1e-12)


@pytest.mark.parametrize('spacing', [0.3, 1, 2.5])
def test_horizontal_normals(spacing):
    points = numpy.transpose([numpy.arange(12) * spacing, numpy.full(12, 7.0)])
    centers, normals = geometry.estimate_normals(points)
    assert len(normals) == 8
    numpy.testing.assert_array_equal(numpy.abs(normals), [[0, 1]] * 8)
    numpy.testing.assert_array_equal(centers, points[2:-2])


def test_vertical_normals_fall_back_to_horizontal():
    points = numpy.transpose([numpy.full(10, 4.0), numpy.arange(10, dtype=float)])
    assert numpy.isnan(geometry.least_squares_slopes(points)).all()
    centers, normals = geometry.estimate_normals(points)
    numpy.testing.assert_array_equal(normals, [[1, 0]] * 6)


def test_slope_normals():
    normals = geometry.slope_normals([0, 1, numpy.nan, numpy.inf])
    s = numpy.sqrt(0.5)
    numpy.testing.assert_allclose(normals, [[0, 1], [-s, s], [1, 0], [1, 0]])


def test_orient_normals_flips_against_previous():
    normals = numpy.array([[0, 1], [0, -1], [0.6, -0.8], [-1, 0]])
    oriented = geometry.orient_normals(normals)
    numpy.testing.assert_array_equal(oriented, [[0, 1], [0, 1], [-0.6, 0.8], [-1, 0]])
    # input not modified
    assert normals[1, 1] == -1


def test_orientation_is_consistent_around_a_circle():
    points = interpolate.densify_polyline(circle(20, 60))
    centers, normals = geometry.estimate_normals(points)
    dots = (normals[1:] * normals[:-1]).sum(axis=1)
    assert (dots >= 0).all()
    numpy.testing.assert_allclose(numpy.linalg.norm(normals, axis=1), 1)


def test_orientation_is_consistent_along_a_zigzag():
    points = interpolate.densify_polyline([[0, 0], [10, 10], [20, 0], [20, 15], [5, 20]])
    centers, normals = geometry.estimate_normals(points)
    dots = (normals[1:] * normals[:-1]).sum(axis=1)
    assert (dots >= 0).all()


@pytest.mark.parametrize('num_points', [0, 1, 4])
def test_short_curves_give_no_normals(num_points):
    points = numpy.transpose([numpy.arange(num_points), numpy.arange(num_points)])
    centers, normals = geometry.estimate_normals(points)
    assert centers.shape == (0, 2)
    assert normals.shape == (0, 2)
    assert geometry.least_squares_slopes(points).shape == (0,)


def test_five_points_give_one_normal():
    points = numpy.array([[0, 0], [1, 1], [2, 2], [3, 3], [4, 4]], dtype=float)
    centers, normals = geometry.estimate_normals(points)
    numpy.testing.assert_array_equal(centers, [[2, 2]])
    s = numpy.sqrt(0.5)
    numpy.testing.assert_allclose(normals, [[-s, s]])
