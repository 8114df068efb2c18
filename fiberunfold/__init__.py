'''
# fiberunfold

Python modules for extracting and straightening ("unfolding") curved fibers,
such as stretched DNA fibers, from multi-channel microscopy images.

Curve
-----
Functions for computations over plane curves, approximated as series of points (polylines).
 - curve.geometry: basic algorithms for polyline curves, and estimation of consistently-oriented normals by local least-squares line fits.
 - curve.interpolate: methods for resampling polylines to evenly-spaced points.

Image
-----
Functions for sampling and displaying images.
 - image.raster: multi-channel images with a physical pixel size, sampled at sub-pixel positions by spline interpolation.
 - image.resample: transform an image into the frame of reference of a curve, producing a straightened "ribbon".
 - image.colorize: scale images and color-tint channels for composite display.

Fibers
------
 - unfold: extract straightened images and intensity profiles of fibers given by their centerlines.
 - group: lay out several unfolded fibers in a single image.
 - export: write unfolded fibers as TIFF images, profile tables and plots.
 - datafile: read and write delimited data files, including centerline coordinates.

'''
