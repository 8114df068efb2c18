# This code is licensed under the MIT License (see LICENSE file for details)

"""Extract and straighten ("unfold") fibers from a multi-channel image.

A fiber is given by its centerline, a polyline drawn through the image. The
centerline is resampled to points one pixel apart, a unit normal is estimated
at each point, and every channel of the image is sampled along these normals
to produce a straightened image of the fiber (the "ribbon", with one column
per centerline point and one row per pixel across the fiber) along with an
intensity profile along the fiber (the maximum of each ribbon column).

Example:
    raster = image.raster.read_raster('fibers.tif')
    curves = [datafile.read_curve(path) for path in sorted(glob.glob('fibers/*.csv'))]
    fibers = unfold_fibers(raster, curves, radius=4)
    export.save_fibers(fibers, 'output', title=raster.title)
"""

from concurrent import futures
import logging

import numpy

from .curve import geometry
from .curve import interpolate
from .image import resample

logger = logging.getLogger(__name__)

# boundary modes understood by ndimage.map_coordinates
MODES = ('nearest', 'reflect', 'mirror', 'wrap', 'constant', 'grid-constant',
    'grid-mirror', 'grid-wrap')

class InvalidConfigurationError(ValueError):
    """Raised when unfolding parameters are invalid, before any work is done."""
    pass

class UnfoldParameters:
    """Parameters shared by all the fibers unfolded in one run.

    Attributes:
        radius: half-width, in pixels, of the cross-section sampled on either
            side of the centerline. The ribbons are 2*radius+1 pixels tall.
        order: image interpolation order (3 = cubic).
        mode: policy for sampling outside the image (see
            ndimage.map_coordinates); 'nearest' repeats the edge pixels.
        step: spacing, in pixels, of the resampled centerline points.
        pixel_spacing: physical size of a pixel, overriding the image
            calibration if not None.
        num_threads: if not None, unfold this many fibers in parallel.
    """
    def __init__(self, radius=4, order=3, mode='nearest', step=1, pixel_spacing=None, num_threads=None):
        if isinstance(radius, bool) or int(radius) != radius or radius <= 0:
            raise InvalidConfigurationError('Radius must be a strictly positive integer, not {}'.format(radius))
        if order not in range(6):
            raise InvalidConfigurationError('Interpolation order must be in the range 0-5, not {}'.format(order))
        if mode not in MODES:
            raise InvalidConfigurationError('Sampling mode must be one of {}, not {!r}'.format(', '.join(MODES), mode))
        if not step > 0:
            raise InvalidConfigurationError('Step must be positive, not {}'.format(step))
        if pixel_spacing is not None and not pixel_spacing > 0:
            raise InvalidConfigurationError('Pixel spacing must be positive, not {}'.format(pixel_spacing))
        if num_threads is not None and num_threads < 1:
            raise InvalidConfigurationError('Number of threads must be at least 1, not {}'.format(num_threads))
        self.radius = int(radius)
        self.order = order
        self.mode = mode
        self.step = step
        self.pixel_spacing = pixel_spacing
        self.num_threads = num_threads

    def __repr__(self):
        return 'UnfoldParameters(radius={}, order={}, mode={!r}, step={})'.format(self.radius, self.order, self.mode, self.step)

class UnfoldedFiber:
    """A straightened fiber and its intensity profiles.

    Attributes:
        name: identifier for the fiber, e.g. 'Fiber #1'.
        ribbons: float32 array of shape (c, k, 2*radius+1), indexed as
            [channel, x, y]: one straightened image per channel.
        profiles: array of shape (c, k) of the maximum of each ribbon column.
        abscissa: array of shape (k,) of the physical position of each column
            along the fiber.
        points: array of shape (k, 2) of the centerline positions in the
            original image.
        normals: array of shape (k, 2) of the unit normals at those positions.
        radius: the radius used for sampling.
        unit: physical unit of the abscissa.
        source_dtype: dtype of the original image.

    The arrays are read-only.
    """
    def __init__(self, name, ribbons, profiles, abscissa, points, normals, radius, unit='pixel', source_dtype=numpy.float32):
        self.name = name
        self.ribbons = ribbons
        self.profiles = profiles
        self.abscissa = abscissa
        self.points = points
        self.normals = normals
        for array in (ribbons, profiles, abscissa, points, normals):
            array.flags.writeable = False
        self.radius = radius
        self.unit = unit
        self.source_dtype = numpy.dtype(source_dtype)

    def __repr__(self):
        return 'UnfoldedFiber("{}", length={})'.format(self.name, self.length)

    @property
    def num_channels(self):
        return self.ribbons.shape[0]

    @property
    def length(self):
        """Number of columns in the straightened fiber."""
        return self.ribbons.shape[1]

def _get_parameters(parameters, parameter_kws):
    if parameters is None:
        return UnfoldParameters(**parameter_kws)
    if parameter_kws:
        raise TypeError('Specify either an UnfoldParameters instance or keyword arguments, not both.')
    return parameters

def unfold_fiber(raster, curve, parameters=None, name='Fiber', **parameter_kws):
    """Straighten a single fiber.

    Parameters:
        raster: image.raster.Raster to sample from.
        curve: array of shape (n, 2) of x, y positions along the fiber
            centerline (a straight line, segmented line, or freehand path).
        parameters: UnfoldParameters instance; if None, one is constructed
            from the remaining keyword arguments (e.g. radius=4).
        name: name of the output fiber.

    Returns: UnfoldedFiber instance, or None if the curve is too short to
    estimate any normals (fewer than 5 resampled points).
    """
    parameters = _get_parameters(parameters, parameter_kws)
    dense_points = interpolate.densify_polyline(curve, parameters.step)
    points, normals = geometry.estimate_normals(dense_points)
    if len(points) == 0:
        logger.debug('%s: curve of %d points is too short to unfold', name, len(dense_points))
        return None
    pixel_spacing = parameters.pixel_spacing
    if pixel_spacing is None:
        pixel_spacing = raster.pixel_spacing
    ribbons, profiles, abscissa = resample.resample(raster, points, normals, parameters.radius,
        pixel_spacing * parameters.step, parameters.order, parameters.mode)
    logger.debug('%s: unfolded %d columns in %d channels', name, len(points), len(ribbons))
    return UnfoldedFiber(name, ribbons, profiles, abscissa, points, normals, parameters.radius,
        getattr(raster, 'unit', 'pixel'), getattr(raster, 'dtype', numpy.float32))

def unfold_fibers(raster, curves, parameters=None, cancel=None, **parameter_kws):
    """Straighten a set of fibers from the same image.

    Each curve is processed independently. Curves too short to unfold are
    skipped, so the output may contain fewer fibers than there are curves; the
    fibers are named after the position of their curve in the input
    ('Fiber #1', 'Fiber #2', ...) and are returned in input order.

    Parameters:
        raster: image.raster.Raster to sample from.
        curves: iterable of arrays of shape (n, 2), one per fiber centerline.
        parameters: UnfoldParameters instance; if None, one is constructed
            from the remaining keyword arguments (e.g. radius=4, num_threads=4).
        cancel: optional threading.Event; if it is set, curves not yet started
            are skipped.

    Returns: list of UnfoldedFiber instances.
    """
    parameters = _get_parameters(parameters, parameter_kws)
    curves = list(curves)

    def unfold(i, curve):
        if cancel is not None and cancel.is_set():
            return None
        return unfold_fiber(raster, curve, parameters, name='Fiber #{}'.format(i+1))

    if parameters.num_threads is None or parameters.num_threads == 1:
        fibers = [unfold(i, curve) for i, curve in enumerate(curves)]
    else:
        with futures.ThreadPoolExecutor(parameters.num_threads) as threadpool:
            fibers = list(threadpool.map(unfold, range(len(curves)), curves))
    fibers = [fiber for fiber in fibers if fiber is not None]
    if cancel is not None and cancel.is_set():
        logger.info('Unfolding cancelled after %d fibers', len(fibers))
    elif not fibers and curves:
        logger.warning('None of the %d curves was long enough to unfold', len(curves))
    else:
        logger.info('Unfolded %d of %d fibers', len(fibers), len(curves))
    return fibers
