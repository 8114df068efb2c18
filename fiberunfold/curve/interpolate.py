import numpy

from . import geometry

def linear_resample_polyline(points, num_points):
    """Resample a piecewise linear curve to contain a given number of
    equally-spaced points, using linear interpolation.

    Parameters:
    points: array of n points x,y; shape=(n,2)
    num_points: number of output points in array.

    Returns a resampled array, of shape (num_points,2)"""
    points = numpy.asarray(points, dtype=float)
    distances = geometry.cumulative_distances(points, unit=True)
    sample_positions = numpy.linspace(0, 1, num_points)
    x = numpy.interp(sample_positions, distances, points[:,0])
    y = numpy.interp(sample_positions, distances, points[:,1])
    return numpy.transpose([x,y])


def densify_polyline(points, step=1):
    """Resample a polyline (a straight line, a segmented line, or a freehand
    path) to points spaced approximately 'step' apart along its arc length.

    Both endpoints are kept, and the spacing is adjusted slightly so that the
    points are exactly evenly spaced: a curve of arc length L gives
    round(L / step) + 1 points. Duplicate consecutive input points are ignored.

    Degenerate input is not an error: a single point, or a curve whose points
    all coincide, gives back that one point. A curve much shorter than 'step'
    gives just its two endpoints.

    Parameters:
    points: array of n points x,y; shape=(n,2), with n >= 1.
    step: desired distance between output points.

    Returns an array of shape (m,2)."""
    points = numpy.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2 or len(points) == 0:
        raise ValueError('points must be a non-empty array of shape (n, 2)')
    points = geometry.filter_dup_points(points)
    if len(points) < 2:
        return points
    length = geometry.cumulative_distances(points, unit=False)[-1]
    num_points = max(2, int(round(length / step)) + 1)
    return linear_resample_polyline(points, num_points)
