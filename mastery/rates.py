from __future__ import annotations


def safe_ratio(numerator: float, denominator: float, scale: float = 100.0) -> float:
    """Return ``numerator / denominator * scale``, or 0 when the denominator is zero."""
    if not denominator:
        return 0.0
    return (numerator / denominator) * scale
