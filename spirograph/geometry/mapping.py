"""Clamp-and-rescale primitive used throughout normalization."""


def map_clamp(
    value: float, in_min: float, in_max: float, out_min: float, out_max: float
) -> float:
    """Linearly map value from [in_min, in_max] onto [out_min, out_max].

    Input outside the source interval saturates at the nearest output bound.
    The caller must ensure in_min != in_max.
    """
    t = (value - in_min) / (in_max - in_min)
    t = max(0.0, min(1.0, t))
    return out_min + t * (out_max - out_min)
