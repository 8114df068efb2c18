import numpy

WINDOW = 5

def cumulative_distances(points, unit=True):
    """Return cumulative distances along a polyline.

    Parameters:
    points: array of shape (n,m) consisting of n points in m dimensions
    unit: if True, return distances divided by total length of the curve,
          if False, return actual arc lengths."""
    points = numpy.asarray(points, dtype=float)
    distances = numpy.concatenate([[0], numpy.add.accumulate(numpy.sqrt(((points[:-1] - points[1:])**2).sum(axis=1)))])
    if unit:
        distances /= distances[-1]
    return distances

def filter_dup_points(points):
    """Return a polyline with no duplicate or near-duplicate consecutive points."""
    points = numpy.asarray(points, dtype=float)
    points_out = [points[0]]
    for point in points[1:]:
        if not numpy.allclose(point, points_out[-1]):
            points_out.append(point)
    return numpy.array(points_out)

def least_squares_slopes(points):
    """Return the slope dy/dx of the least-squares line fit to each 5-point
    window of a polyline.

    The slope at interior point i is fit to points[i-2:i+3], so there is one
    slope for each of the n-4 points that have two neighbors on either side.
    Windows with no extent in x (vertical lines) give a slope of nan; no
    floating-point warnings are emitted for these.

    Parameters:
    points: array of shape (n, 2) of x, y positions.

    Returns: array of shape (max(n-4, 0),)"""
    points = numpy.asarray(points, dtype=float)
    if len(points) < WINDOW:
        return numpy.empty(0)
    windows = numpy.stack([points[j:len(points)-WINDOW+1+j] for j in range(WINDOW)], axis=1)
    # centered form of the normal equations: (n*Sxy - Sx*Sy) / (n*Sxx - Sx**2)
    dx = windows[...,0] - windows[...,0].mean(axis=1, keepdims=True)
    dy = windows[...,1] - windows[...,1].mean(axis=1, keepdims=True)
    with numpy.errstate(divide='ignore', invalid='ignore'):
        slopes = (dx*dy).sum(axis=1) / (dx*dx).sum(axis=1)
    slopes[numpy.ptp(windows[...,0], axis=1) == 0] = numpy.nan
    return slopes

def slope_normals(slopes):
    """Return unit vectors normal to lines of the given slopes.

    The normal to a line of slope m is (-m, 1) / sqrt(1 + m**2). A non-finite
    slope means a vertical line, for which the normal is (1, 0).

    Returns: array of shape (len(slopes), 2)"""
    slopes = numpy.asarray(slopes, dtype=float)
    normals = numpy.empty((len(slopes), 2))
    normals[:] = 1, 0
    finite = numpy.isfinite(slopes)
    m = slopes[finite]
    scale = numpy.sqrt(1 / (1 + m**2))
    normals[finite, 0] = -m * scale
    normals[finite, 1] = scale
    return normals

def orient_normals(normals):
    """Flip the signs of a sequence of normals so that each one points to the
    same side of the curve as its predecessor.

    Each normal (after the first) is negated if its dot product with the
    previous, already-oriented, normal is negative. This greedy pass gives
    local continuity only: it is a heuristic and can still produce a flipped
    orientation after a cusp or a near-180-degree turn, where adjacent
    normals are close to orthogonal.

    Returns: new array of oriented normals."""
    oriented = numpy.array(normals, dtype=float)
    for i in range(1, len(oriented)):
        if numpy.dot(oriented[i], oriented[i-1]) < 0:
            oriented[i] *= -1
    return oriented

def estimate_normals(points):
    """Estimate a consistently-oriented unit normal at each interior point of
    a densely-sampled polyline.

    The tangent at each point is taken from a least-squares line fit to the
    point and its two neighbors on either side, which is much less noisy than
    finite differences on a hand-drawn curve. The first two and last two
    points therefore get no normal.

    Parameters:
    points: array of shape (n, 2) of x, y positions, ideally spaced about
        one pixel apart (see interpolate.densify_polyline).

    Returns: centers, normals
        centers: array of shape (max(n-4, 0), 2) of the interior points
        normals: array of the same shape with the unit normal at each center.
    """
    points = numpy.asarray(points, dtype=float).reshape((-1, 2))
    if len(points) < WINDOW:
        return numpy.empty((0, 2)), numpy.empty((0, 2))
    half = WINDOW // 2
    normals = orient_normals(slope_normals(least_squares_slopes(points)))
    return points[half:-half].copy(), normals
