import pathlib

import numpy

def write_delimited(path, data, delimiter='\t'):
    """Write a list of lists (or iterable of iterables) to a delimited file."""
    path = pathlib.Path(path)
    try:
        with path.open('w') as f:
            f.write('\n'.join(delimiter.join(map(str, row)) for row in data) + '\n')
    except Exception:
        if path.exists():
            # an error occured during writing the file. Remove the half-written
            # file and re-raise the exception
            path.unlink()
        raise

def read_delimited(path, header=True, coerce_float=True, empty_val=numpy.nan, delimiter='\t'):
    """Iterate over the rows in a delimited file such as a csv or tsv.

    Iterate a delimited file line by line, yielding each line's contents split
    by the delimiter and optionally converted to floating-point values if possible.

    Note: empty lines are skipped.

    Parameters:
        path: path to input file
        header: if True (default), return the header line and an iterator over
            the remaining lines. If False, return an iterator over all lines.
        coerce_float: if True (default), attempt to convert data values to
            floating point. If that fails, return the original input string.
        empty_val: if coerce_float is True, return this value when an input
            value is empty. '' or numpy.nan (default) are the usual choices.
        delimiter: symbol on which the file is delimited.

    Returns:
        (header, iterator) if header is True, else iterator
        where header is a list of the strings on the first line, and iterator
        yields a list of values for each subsequent line.

    Example:
        header, data = read_delimited('path/to/profiles.csv', delimiter=',')
        channel_1 = header.index('Channel 1')
        intensities = [row[channel_1] for row in data]
    """
    data_iter = _iter_delimited(path, header, coerce_float, empty_val, delimiter)
    if header:
        return next(data_iter), data_iter
    else:
        return data_iter

def _iter_delimited(path, header, coerce_float, empty_val, delimiter):
    with open(path) as infile:
        for line in infile:
            line = line.strip('\r\n')
            if not line:
                continue # skip blank lines
            vals = line.split(delimiter)
            if header:
                yield vals
                header = False # OK, we've already read the header, don't do it again
            elif not coerce_float:
                yield vals # don't try to convert to float, just return strings
            else:
                new_vals = []
                for val in vals:
                    if val == '':
                        val = empty_val
                    else:
                        try:
                            val = float(val)
                        except ValueError:
                            pass
                    new_vals.append(val)
                yield new_vals

def read_curve(path, delimiter=None, x_column='X', y_column='Y'):
    """Read a fiber centerline from a delimited file of x, y coordinates,
    such as the coordinates table of a line selection exported from ImageJ.

    If the file has a header line containing x_column and y_column, those
    columns are used; otherwise the header line (if any) is skipped and the
    last two columns are taken as x and y. (ImageJ coordinate tables may have
    a leading row-index column.)

    Parameters:
        path: path to input file
        delimiter: symbol on which the file is delimited. If None, use ','
            for .csv files and tab otherwise.
        x_column, y_column: names of the coordinate columns.

    Returns: array of shape (n, 2)
    """
    path = pathlib.Path(path)
    if delimiter is None:
        delimiter = ',' if path.suffix.lower() == '.csv' else '\t'
    rows = list(read_delimited(path, header=False, delimiter=delimiter))
    if not rows:
        raise ValueError('No coordinates found in {}'.format(path))
    first = [val.strip() if isinstance(val, str) else val for val in rows[0]]
    if x_column in first and y_column in first:
        xi, yi = first.index(x_column), first.index(y_column)
        rows = rows[1:]
    else:
        xi, yi = -2, -1
        if any(isinstance(val, str) for val in first):
            rows = rows[1:]
    points = numpy.array([[row[xi], row[yi]] for row in rows], dtype=float)
    if len(points) == 0:
        raise ValueError('No coordinates found in {}'.format(path))
    return points
