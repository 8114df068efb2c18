'''
Curve
-----
Functions for computations over plane curves, approximated as series of points (polylines).
 - curve.geometry: basic algorithms for polyline curves, and estimation of consistently-oriented normals by local least-squares line fits.
 - curve.interpolate: methods for resampling polylines to evenly-spaced points.
 '''
