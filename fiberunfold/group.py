import numpy

def group_fibers(fibers, margin=5, label_space=20, fiber_space=5, background=0):
    """Lay out a set of unfolded fibers one above the other in a single image.

    Each fiber occupies a horizontal band of height 2*radius+1+2*fiber_space,
    with the ribbon centered vertically in the band and left-aligned after
    margin + label_space pixels, leaving room to the left for a label.

    Parameters:
        fibers: list of UnfoldedFiber instances, all with the same radius and
            number of channels.
        margin: empty space (in pixels) on either end of the longest fiber.
        label_space: additional space at the left reserved for labels.
        fiber_space: empty space above and below each fiber.
        background: value of the pixels not covered by a fiber.

    Returns: image, label_positions
        image: float32 array of shape (c, w, h) indexed as [channel, x, y],
            where w = longest fiber + 2*margin + label_space and
            h = len(fibers) * (2*radius+1+2*fiber_space).
        label_positions: list of (x, y) positions, one per fiber, at which to
            draw a label such as '#1' (text baseline, left-aligned).
    """
    if not fibers:
        raise ValueError('At least one fiber is required to make a group image')
    radius = fibers[0].radius
    num_channels = fibers[0].num_channels
    if any(fiber.radius != radius or fiber.num_channels != num_channels for fiber in fibers):
        raise ValueError('All fibers must have the same radius and number of channels')
    band_height = 2*radius + 1 + 2*fiber_space
    width = max(fiber.length for fiber in fibers) + 2*margin + label_space
    image = numpy.empty((num_channels, width, len(fibers) * band_height), dtype=numpy.float32)
    image.fill(background)
    x0 = margin + label_space
    label_positions = []
    for i, fiber in enumerate(fibers):
        y0 = i * band_height + fiber_space
        image[:, x0:x0+fiber.length, y0:y0+2*radius+1] = fiber.ribbons
        label_positions.append((0, y0 + radius + 8))
    return image, label_positions
