import numpy

from fiberunfold.curve import geometry
from fiberunfold.curve import interpolate
from fiberunfold.image import raster
from fiberunfold.image import resample


def row_normals(x_start, x_stop, y):
    points = numpy.transpose([numpy.arange(x_start, x_stop, dtype=float), numpy.full(x_stop - x_start, float(y))])
    return geometry.estimate_normals(points)


def test_normal_sample_coordinates():
    points = numpy.array([[10, 5], [11, 5]], dtype=float)
    normals = numpy.array([[0, 1], [1, 0]], dtype=float)
    coords = resample.normal_sample_coordinates(points, normals, 2)
    assert coords.shape == (2, 2, 5)
    numpy.testing.assert_array_equal(coords[:, 0], [[10, 10, 10, 10, 10], [3, 4, 5, 6, 7]])
    numpy.testing.assert_array_equal(coords[:, 1], [[9, 10, 11, 12, 13], [5, 5, 5, 5, 5]])


def test_sampling_along_a_row_reproduces_pixels():
    rs = numpy.random.RandomState(2)
    image = rs.uniform(0, 1000, size=(40, 25))
    points, normals = row_normals(3, 31, 12)
    radius = 4
    ribbon = resample.sample_along_normals(image, points, normals, radius)
    assert ribbon.shape == (len(points), 2*radius+1)
    x = points[:, 0].astype(int)
    expected = numpy.array([image[xi, 12-radius:12+radius+1] for xi in x])
    numpy.testing.assert_allclose(ribbon, expected, atol=1e-2)


def test_sampling_along_a_column_reproduces_pixels():
    rs = numpy.random.RandomState(3)
    image = rs.uniform(0, 1000, size=(25, 40))
    points = numpy.transpose([numpy.full(30, 9.0), numpy.arange(30, dtype=float)])
    points, normals = geometry.estimate_normals(points)
    ribbon = resample.sample_along_normals(image, points, normals, 3)
    expected = numpy.array([image[6:13, int(y)] for y in points[:, 1]])
    numpy.testing.assert_allclose(ribbon, expected, atol=1e-2)


def test_column_profile():
    ribbon = numpy.array([[1, 5, 2], [-3, -1, -2]])
    numpy.testing.assert_array_equal(resample.column_profile(ribbon), [5, -1])
    assert resample.column_profile(numpy.zeros((0, 3))).shape == (0,)


def test_profile_is_value_at_peak_offset():
    # intensity increases away from the centerline up to a peak 2 pixels below it
    column = numpy.zeros(30)
    column[[12, 13, 14, 15, 16, 17, 18]] = [0.5, 1, 2, 3, 4, 10, 5]
    image = numpy.tile(column, (50, 1))
    r = raster.Raster(image)
    points, normals = row_normals(5, 45, 15)
    normals = numpy.abs(normals)
    ribbons, profiles, abscissa = resample.resample(r, points, normals, 3)
    numpy.testing.assert_allclose(profiles[0], 10, rtol=1e-5)
    numpy.testing.assert_allclose(ribbons[0, :, 5], 10, rtol=1e-5)


def test_resample_shapes():
    rs = numpy.random.RandomState(4)
    r = raster.Raster(rs.uniform(size=(3, 50, 50)), pixel_spacing=0.2)
    points = interpolate.densify_polyline([[5, 5], [20, 30], [45, 40]])
    points, normals = geometry.estimate_normals(points)
    ribbons, profiles, abscissa = resample.resample(r, points, normals, 5)
    k = len(points)
    assert ribbons.shape == (3, k, 11)
    assert ribbons.dtype == numpy.float32
    assert profiles.shape == (3, k)
    numpy.testing.assert_allclose(abscissa, numpy.arange(k) * 0.2)
    numpy.testing.assert_allclose(profiles, ribbons.max(axis=2))
    abscissa = resample.resample(r, points, normals, 5, pixel_spacing=2)[2]
    numpy.testing.assert_allclose(abscissa, numpy.arange(k) * 2)


def test_resample_matches_single_image_sampling_near_edges():
    rs = numpy.random.RandomState(8)
    image = rs.uniform(0, 100, size=(30, 25))
    r = raster.Raster(image)
    points, normals = row_normals(0, 30, 1)
    ribbons = resample.resample(r, points, normals, 4)[0]
    expected = resample.sample_along_normals(image, points, normals, 4)
    numpy.testing.assert_allclose(ribbons[0], expected, atol=1e-2)
