'''
Image
-----
Functions for sampling and displaying images.
 - image.raster: multi-channel images with a physical pixel size, sampled at sub-pixel positions by spline interpolation.
 - image.resample: transform an image into the frame of reference of a curve, producing a straightened "ribbon".
 - image.colorize: scale images and color-tint channels for composite display.
'''
