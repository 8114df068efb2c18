import numpy
from matplotlib import colors as mcolors

# default channel colors of an ImageJ composite image, in channel order
CHANNEL_COLORS = ('red', 'lime', 'blue', 'gray', 'cyan', 'magenta', 'yellow')

def scale(array, min=None, max=None, gamma=1, output_max=255):
    """Return an array with values in the range [0, output_max].

    If 'min' and/or 'max' are specified, these represent the values in the input
    that will be mapped to 0 and 'output_max' in the output, respectively.
    If not specified, the min and/or max values from the input will be used.

    If gamma is specified, a gamma-transform will be applied to the final array.
    """
    array = numpy.array(array, dtype=numpy.float32)
    if array.size == 0:
        return array
    if min is None:
        min = array.min()
    if max is None:
        max = array.max()
    if min >= max:
        return numpy.zeros_like(array)
    with numpy.errstate(under='ignore'):
        array.clip(min, max, out=array)
        array -= min
        array /= max - min
        array **= gamma
    return array * output_max

def channel_colors(num_channels):
    """Return an RGB tuple (values in [0, 1]) for each of num_channels channels.

    A single channel is shown in gray; otherwise the ImageJ composite order
    (red, green, blue, gray, cyan, magenta, yellow) is used, repeating as
    necessary."""
    if num_channels == 1:
        return [mcolors.to_rgb('gray')]
    return [mcolors.to_rgb(CHANNEL_COLORS[i % len(CHANNEL_COLORS)]) for i in range(num_channels)]

def color_tint(array, target_color, input_max=1):
    """Given a one-channel image and an RGB[A] tuple, return a color-tinted image.

    The output image values will range from (0,0,0) to (R,G,B), weighted by the
    array values (divided by the input_max). If an alpha value is provided, the
    output alpha channel will be that value (not weighted by the input image)

    Parameters:
        array: input image of shape (x, y).
        target_color: (R, G, B) tuple. If a (R, G, B, A) tuple, an alpha channel
            consisting of the A value will be added to the image.
        input_max: maximum possible value of the input image (e.g. 1, 255, 65535)

    Output: image with shape = array.shape + (len(target_color),)

    """
    channels = len(target_color)
    assert channels in (3, 4)
    assert array.ndim == 2
    array = numpy.asarray(array, dtype=numpy.float32) / input_max
    out = array[:, :, numpy.newaxis] * numpy.asarray(target_color, dtype=numpy.float32)
    if channels == 4:
        out[:, :, 3].fill(target_color[3])
    return out

def composite_rgb(channels, colors=None, gamma=1):
    """Combine the channels of a multi-channel image into a single RGB image,
    the way a composite image is displayed: each channel is contrast-stretched
    to its own min/max, tinted with its color, and the tinted images are added.

    Parameters:
        channels: array of shape (c, x, y)
        colors: list of c RGB tuples in [0, 1]; if None, use channel_colors(c).
        gamma: gamma-transform applied to each scaled channel.

    Returns: uint8 array of shape (x, y, 3)
    """
    channels = numpy.asarray(channels)
    if colors is None:
        colors = channel_colors(len(channels))
    out = numpy.zeros(channels.shape[1:] + (3,), dtype=numpy.float32)
    for channel, color in zip(channels, colors):
        out += color_tint(scale(channel, gamma=gamma, output_max=1), color)
    out.clip(0, 1, out=out)
    return (out * 255).round().astype(numpy.uint8)
