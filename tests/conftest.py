import matplotlib
matplotlib.use('Agg')

import numpy
import pytest

from fiberunfold.image import raster


@pytest.fixture
def line_raster():
    """Single-channel 60x20 image, zero except for row y=10 at intensity 100."""
    image = numpy.zeros((60, 20), dtype=numpy.uint16)
    image[:, 10] = 100
    return raster.Raster(image, pixel_spacing=0.5, unit='micron', title='line')


@pytest.fixture
def horizontal_curve():
    """Straight centerline along row y=10, giving 50 points one pixel apart."""
    return numpy.array([[5, 10], [54, 10]], dtype=float)
