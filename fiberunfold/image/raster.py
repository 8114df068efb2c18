import pathlib

import numpy
from scipy import ndimage
import tifffile

# padding added around a channel before spline filtering
SPLINE_PAD = 12

class Raster:
    """Multi-channel image with a physical pixel size, sampled at continuous
    (sub-pixel) positions.

    NB: images are indexed as [x, y], so a single channel of shape (w, h) is
    w pixels wide and h pixels tall. A C-ordered image as read from most file
    formats is [y, x] and needs to be transposed (see read_raster()).

    Attributes:
        channels: float32 array of shape (c, w, h).
        pixel_spacing: physical size of one pixel (e.g. microns per pixel).
        unit: name of the physical unit of pixel_spacing.
        dtype: dtype of the image data as provided, for converting output back
            to the original bit depth.
        title: name of the image.
    """
    def __init__(self, channels, pixel_spacing=None, unit=None, title='image'):
        """Parameters:
            channels: array of shape (w, h) for a single-channel image, or
                (c, w, h) for a multi-channel image. Any numeric dtype.
            pixel_spacing: positive physical size of a pixel; 1 if None.
            unit: name of the physical unit; 'pixel' if None.
            title: name of the image, used to name grouped outputs.
        """
        channels = numpy.asarray(channels)
        if channels.ndim == 2:
            channels = channels[numpy.newaxis]
        if channels.ndim != 3:
            raise ValueError('Image must be of shape (w, h) or (c, w, h)')
        if pixel_spacing is None:
            pixel_spacing = 1.0
        if not pixel_spacing > 0:
            raise ValueError('Pixel spacing must be positive, not {}'.format(pixel_spacing))
        self.dtype = channels.dtype
        self.channels = channels.astype(numpy.float32)
        self.pixel_spacing = float(pixel_spacing)
        self.unit = 'pixel' if unit is None else unit
        self.title = title
        self._prefiltered = {}

    def __repr__(self):
        return 'Raster("{}", channels={}, size={}x{})'.format(self.title, self.num_channels, self.width, self.height)

    @property
    def num_channels(self):
        return self.channels.shape[0]

    @property
    def width(self):
        return self.channels.shape[1]

    @property
    def height(self):
        return self.channels.shape[2]

    def spline_coefficients(self, channel, order=3, mode='nearest'):
        """Return the spline-filtered coefficients of a channel for repeated
        interpolation with ndimage.map_coordinates(..., prefilter=False), and
        the number of pixels of padding added to each side of the channel.

        For the 'nearest' and 'grid-constant' modes, the channel is padded
        before filtering (as ndimage.map_coordinates() itself does), so that
        the spline continues the edge (or zero) values outside the image
        rather than ringing. The filtering is done once per
        (channel, order, mode) and cached."""
        if order <= 1:
            return self.channels[channel], 0
        key = channel, order, mode
        if key not in self._prefiltered:
            image = self.channels[channel]
            if mode == 'nearest':
                npad = SPLINE_PAD
                image = numpy.pad(image, npad, mode='edge')
            elif mode == 'grid-constant':
                npad = SPLINE_PAD
                image = numpy.pad(image, npad, mode='constant')
            else:
                npad = 0
            coefficients = ndimage.spline_filter(image, order=order, output=numpy.float64, mode=mode)
            self._prefiltered[key] = coefficients, npad
        return self._prefiltered[key]

    def sample_points(self, channel, coords, order=3, mode='nearest'):
        """Interpolate a channel at arbitrary positions.

        Parameters:
            channel: index of the channel to sample.
            coords: array of shape (2, ...) containing the x and y positions
                to sample at.
            order: spline interpolation order (0 = nearest-neighbor, 1 = linear,
                3 = cubic). Cubic interpolation reproduces the pixel values
                exactly at integer positions.
            mode: how positions outside the image are handled; the default
                'nearest' repeats the edge pixels. See the documentation for
                ndimage.map_coordinates() for other options.

        Returns: array of shape coords.shape[1:]
        """
        coords = numpy.array(coords, dtype=float)
        if mode == 'nearest':
            # clamp each axis separately: beyond the edge, the value is that of
            # the closest edge position
            for axis, size in enumerate((self.width, self.height)):
                numpy.clip(coords[axis], 0, size - 1, out=coords[axis])
        coefficients, npad = self.spline_coefficients(channel, order, mode)
        return ndimage.map_coordinates(coefficients, coords + npad, order=order, mode=mode, prefilter=False)

    def sample(self, channel, x, y, order=3, mode='nearest'):
        """Return the interpolated value of a channel at a single position."""
        return float(self.sample_points(channel, numpy.array([[x], [y]], dtype=float), order, mode)[0])


def read_raster(path, pixel_spacing=None, unit=None):
    """Read a TIFF image into a Raster.

    Single-channel images are stored as [y, x] arrays and multi-channel images
    as [c, y, x] (the ImageJ hyperstack layout for one slice), or as [y, x, s]
    for RGB and other images with several samples per pixel. All of these are
    transposed into the [c, x, y] convention used here.

    If pixel_spacing is None, it is taken from the file's X resolution tag when
    present (and 1 otherwise). Likewise the unit is taken from the ImageJ
    metadata when present."""
    path = pathlib.Path(path)
    with tifffile.TiffFile(str(path)) as tiff:
        data = tiff.asarray()
        axes = tiff.series[0].axes
        page = tiff.pages[0]
        if pixel_spacing is None:
            tag = page.tags.get('XResolution')
            if tag is not None:
                numerator, denominator = tag.value
                if numerator > 0 and denominator > 0 and numerator != denominator:
                    pixel_spacing = denominator / numerator
        if unit is None and tiff.imagej_metadata is not None:
            unit = tiff.imagej_metadata.get('unit')
    if axes.endswith('S'):
        data = numpy.moveaxis(data, -1, 0)
    if data.ndim not in (2, 3):
        raise ValueError('Only 2D single- or multi-channel images are supported, not shape {}'.format(data.shape))
    channels = numpy.swapaxes(data, -1, -2)
    return Raster(channels, pixel_spacing, unit, path.stem)
