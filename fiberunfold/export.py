"""Write unfolded fibers to disk: straightened images as TIFF files, intensity
profiles as delimited tables and as plots.

NB: images here are indexed as [x, y] (see image.raster) and are transposed
to the usual [y, x] file layout on writing."""

import logging
import pathlib

import numpy
import tifffile

from . import datafile
from . import group
from .image import colorize
from .unfold import InvalidConfigurationError

logger = logging.getLogger(__name__)

def to_dtype(image, dtype):
    """Convert a float image to the given dtype, rounding and clipping to the
    range of integer dtypes."""
    dtype = numpy.dtype(dtype)
    image = numpy.asarray(image)
    if dtype.kind in 'ui':
        info = numpy.iinfo(dtype)
        return numpy.clip(numpy.round(image), info.min, info.max).astype(dtype)
    return image.astype(dtype)

def write_image(path, channels, dtype=None, pixel_spacing=None, unit=None):
    """Write a multi-channel image of shape (c, x, y) as an ImageJ TIFF.

    Parameters:
        path: output path
        channels: array of shape (c, x, y)
        dtype: if not None, convert to this dtype first (see to_dtype()).
            ImageJ stores only 8-bit, 16-bit and float images, so other
            dtypes are written as float32.
        pixel_spacing, unit: if not None, physical calibration stored with the
            image.
    """
    channels = numpy.asarray(channels)
    if dtype is not None:
        channels = to_dtype(channels, dtype)
    if channels.dtype not in (numpy.uint8, numpy.uint16, numpy.float32):
        channels = channels.astype(numpy.float32)
    data = numpy.ascontiguousarray(numpy.swapaxes(channels, -1, -2))
    metadata = {'axes': 'CYX'}
    kws = {}
    if pixel_spacing is not None:
        kws['resolution'] = (1 / pixel_spacing, 1 / pixel_spacing)
        if unit is not None:
            metadata['unit'] = unit
    tifffile.imwrite(str(path), data, imagej=True, metadata=metadata, **kws)

def write_fiber_image(path, fiber, pixel_spacing=None):
    """Write the ribbons of an UnfoldedFiber as a multi-channel TIFF in the
    bit depth of the original image."""
    write_image(path, fiber.ribbons, fiber.source_dtype, pixel_spacing, fiber.unit)

def profile_table(fiber):
    """Return a list of rows (header first) tabulating the profiles of a fiber:
    the abscissa followed by one column per channel."""
    header = ['Length [{}]'.format(fiber.unit)] + ['Channel {}'.format(c+1) for c in range(fiber.num_channels)]
    rows = numpy.column_stack([fiber.abscissa] + list(fiber.profiles)).tolist()
    return [header] + rows

def write_profiles(path, fiber, delimiter=','):
    """Write the intensity profiles of an UnfoldedFiber to a delimited file."""
    datafile.write_delimited(path, profile_table(fiber), delimiter)

def plot_profiles(fiber, colors=None, ax=None):
    """Plot the intensity profiles of an UnfoldedFiber, one line per channel.

    Parameters:
        fiber: UnfoldedFiber instance.
        colors: list of RGB tuples, one per channel; if None, the default
            composite-image channel colors are used.
        ax: matplotlib Axes to plot into; if None, a new figure is made.

    Returns: the matplotlib Figure.
    """
    import matplotlib.pyplot as plt
    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure
    if colors is None:
        colors = colorize.channel_colors(fiber.num_channels)
    for c, (profile, color) in enumerate(zip(fiber.profiles, colors)):
        ax.plot(fiber.abscissa, profile, color=color, label='Channel {}'.format(c+1))
    ax.set_title(fiber.name.replace('Fiber', 'Profiles'))
    ax.set_xlabel('Length [{}]'.format(fiber.unit))
    ax.set_ylabel('Intensity level [a.u.]')
    return fig

def write_composite_preview(path, channels, colors=None, labels=()):
    """Write an RGB preview of a multi-channel image of shape (c, x, y), with
    each channel tinted in its composite color.

    Parameters:
        path: output path; the format is determined by the suffix (e.g. .png).
        channels: array of shape (c, x, y)
        colors: list of RGB tuples, one per channel; if None, the default
            composite-image channel colors are used.
        labels: list of (x, y, text) tuples of text to draw on the image, with
            the text baseline starting at (x, y).
    """
    import matplotlib.pyplot as plt
    rgb = numpy.swapaxes(colorize.composite_rgb(channels, colors), 0, 1)
    dpi = 100
    height, width = rgb.shape[:2]
    fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    try:
        ax = fig.add_axes([0, 0, 1, 1])
        ax.imshow(rgb, interpolation='nearest')
        ax.set_axis_off()
        for x, y, text in labels:
            ax.text(x, y, text, color='white', fontsize=7, verticalalignment='baseline')
        fig.savefig(str(path), dpi=dpi)
    finally:
        plt.close(fig)

def save_fibers(fibers, output_dir, group_fibers=True, title='image', pixel_spacing=None,
        colors=None, preview=False, **group_kws):
    """Save a set of unfolded fibers and their profiles to a directory.

    The following files are written:
        - If group_fibers is True: 'Fibers of <title>.tif', a single image of all
          the fibers stacked together (see group.group_fibers()). Otherwise,
          one 'Fiber #i.tif' image per fiber.
        - For each fiber, 'Profiles #i.csv' with the intensity profiles and
          'Profiles #i.png' with a plot of the same.
        - If preview is True, an RGB png of each image written above.

    Parameters:
        fibers: list of UnfoldedFiber instances.
        output_dir: existing directory to write to.
        group_fibers: whether to combine all fibers in one image.
        title: name of the original image, used to name the group image.
        pixel_spacing: physical pixel size to store in the TIFF files.
        colors: channel colors for plots and previews.
        preview: if True, also write RGB previews of the fiber images.
        group_kws: further arguments to group.group_fibers().

    Returns: list of the paths written.
    """
    import matplotlib.pyplot as plt
    output_dir = pathlib.Path(output_dir)
    if not output_dir.is_dir():
        raise InvalidConfigurationError('Output path {} must be an existing directory'.format(output_dir))
    written = []
    if fibers and group_fibers:
        image, label_positions = group.group_fibers(fibers, **group_kws)
        path = output_dir / 'Fibers of {}.tif'.format(title)
        write_image(path, image, fibers[0].source_dtype, pixel_spacing, fibers[0].unit)
        written.append(path)
        if preview:
            path = path.with_suffix('.png')
            labels = [(x, y, fiber.name.replace('Fiber ', '')) for fiber, (x, y) in zip(fibers, label_positions)]
            write_composite_preview(path, image, colors, labels)
            written.append(path)
    for fiber in fibers:
        if not group_fibers:
            path = output_dir / '{}.tif'.format(fiber.name)
            write_fiber_image(path, fiber, pixel_spacing)
            written.append(path)
            if preview:
                path = path.with_suffix('.png')
                write_composite_preview(path, fiber.ribbons, colors)
                written.append(path)
        profile_name = fiber.name.replace('Fiber', 'Profiles')
        path = output_dir / '{}.csv'.format(profile_name)
        write_profiles(path, fiber)
        written.append(path)
        fig = plot_profiles(fiber, colors)
        path = output_dir / '{}.png'.format(profile_name)
        try:
            fig.savefig(str(path))
        finally:
            plt.close(fig)
        written.append(path)
    logger.info('Wrote %d files to %s', len(written), output_dir)
    return written
