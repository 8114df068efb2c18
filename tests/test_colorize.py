import numpy

from fiberunfold.image import colorize


def test_scale():
    numpy.testing.assert_allclose(colorize.scale([0, 5, 10]), [0, 127.5, 255])
    numpy.testing.assert_allclose(colorize.scale([0, 5, 10], min=5, output_max=1), [0, 0, 1])
    numpy.testing.assert_array_equal(colorize.scale([3, 3]), [0, 0])


def test_channel_colors():
    assert colorize.channel_colors(1) == [(0.5019607843137255, 0.5019607843137255, 0.5019607843137255)]
    colors = colorize.channel_colors(9)
    assert colors[:3] == [(1, 0, 0), (0, 1, 0), (0, 0, 1)]
    assert colors[7] == colors[0]


def test_composite_rgb():
    channels = numpy.zeros((2, 4, 3))
    channels[0, 0, 0] = 10
    channels[1, 0, 0] = 5
    channels[1, 1, 1] = 10
    rgb = colorize.composite_rgb(channels)
    assert rgb.shape == (4, 3, 3)
    assert rgb.dtype == numpy.uint8
    numpy.testing.assert_array_equal(rgb[0, 0], [255, 128, 0])
    numpy.testing.assert_array_equal(rgb[1, 1], [0, 255, 0])
    numpy.testing.assert_array_equal(rgb[2, 2], [0, 0, 0])
