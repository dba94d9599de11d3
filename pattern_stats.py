import numpy as np


def binned_entropy(values, bin_size):
    """Shannon entropy (bits) of values rounded to multiples of bin_size."""
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0

    binned = np.round(values / bin_size) * bin_size
    _, counts = np.unique(binned, return_counts=True)
    p = counts / counts.sum()  # relative frequencies
    return float(-np.sum(p * np.log2(p)))


def variance(values):
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    return float(np.var(values))


def coefficient_of_variation(values):
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        return 0.0
    mean = values.mean()
    if mean == 0:
        return 0.0
    return float(np.std(values) / mean)


def has_linear_trend(values, slope_threshold):
    """True when the least-squares slope of values against their position exceeds the threshold."""
    values = np.asarray(values, dtype=float)
    if values.size <= 2:
        return False

    slope = np.polyfit(np.arange(values.size), values, 1)[0]
    return bool(abs(slope) > slope_threshold)
