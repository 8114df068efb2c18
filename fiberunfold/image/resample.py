import numpy
from scipy import ndimage

def normal_sample_coordinates(points, normals, radius):
    """Return the positions at which to sample an image to straighten a curve.

    For each curve point p with unit normal n, the 2*radius+1 positions
    p + s*n for s in [-radius, radius] are produced, one pixel apart.

    Parameters:
    points: array of shape (k, 2) of x, y positions along the curve.
    normals: array of shape (k, 2) of unit normals at those positions.
    radius: integer half-width of the sampled cross-section.

    Returns: array of shape (2, k, 2*radius+1) of x and y coordinates, suitable
    for ndimage.map_coordinates()."""
    points = numpy.asarray(points, dtype=float).reshape((-1, 2))
    normals = numpy.asarray(normals, dtype=float).reshape((-1, 2))
    offsets = numpy.arange(-radius, radius+1)
    coords = points[:, numpy.newaxis, :] + offsets[numpy.newaxis, :, numpy.newaxis] * normals[:, numpy.newaxis, :]
    return numpy.moveaxis(coords, -1, 0)

def sample_along_normals(image, points, normals, radius, order=3, mode='nearest', **kwargs):
    """Return an image "ribbon" that straightens the region of an image around
    a curve.

    Column x of the output contains the image sampled along the normal at
    points[x], from -radius (row 0) to +radius (row 2*radius).

    Parameters:
    image: the image to sample from, indexed as [x, y].
    points, normals: arrays of shape (k, 2); see estimate_normals() in
        curve.geometry.
    radius: integer half-width of the sampled cross-section.
    order: image interpolation order for the resampling process.
        0 = nearest-neighbor interpolation
        1 = linear interpolation
        3 = cubic interpolation
    mode: policy for positions outside the image. 'nearest' (the default)
        uses the value of the closest edge pixel.
    other keyword args are passed to ndimage.map_coordinates() to control the
        resampling. (E.g. 'cval' when mode='constant'.)

    Returns: float array of shape (k, 2*radius+1)."""
    coords = normal_sample_coordinates(points, normals, radius)
    image = numpy.asarray(image, dtype=numpy.float32)
    return ndimage.map_coordinates(image, coords, order=order, mode=mode, **kwargs)

def column_profile(ribbon):
    """Return the maximum of each column of a ribbon (array of shape (k, h)), or
    of a stack of ribbons (shape (c, k, h)).

    The maximum across the ribbon's width is robust to small errors in the
    position of the curve relative to the true intensity ridge."""
    return numpy.asarray(ribbon, dtype=float).max(axis=-1)

def resample(raster, points, normals, radius, pixel_spacing=None, order=3, mode='nearest'):
    """Unfold every channel of a raster along a curve.

    Parameters:
    raster: image.raster.Raster instance (or any object with num_channels and
        a sample_points(channel, coords, order, mode) method, plus a
        pixel_spacing attribute if pixel_spacing is not given here).
    points, normals: arrays of shape (k, 2) giving positions along the curve
        and the unit normals there.
    radius: integer half-width of the sampled cross-section.
    pixel_spacing: physical distance between consecutive curve points; the
        raster's pixel_spacing if None.
    order, mode: interpolation parameters, as for sample_along_normals().

    Returns: ribbons, profiles, abscissa
        ribbons: float32 array of shape (c, k, 2*radius+1)
        profiles: array of shape (c, k): the column maxima of each ribbon
        abscissa: array of shape (k,): the physical position of each column.
    """
    if pixel_spacing is None:
        pixel_spacing = raster.pixel_spacing
    coords = normal_sample_coordinates(points, normals, radius)
    k = coords.shape[1]
    ribbons = numpy.empty((raster.num_channels, k, 2*radius+1), dtype=numpy.float32)
    for channel in range(raster.num_channels):
        ribbons[channel] = raster.sample_points(channel, coords, order=order, mode=mode)
    profiles = column_profile(ribbons)
    abscissa = numpy.arange(k) * pixel_spacing
    return ribbons, profiles, abscissa
