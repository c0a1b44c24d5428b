"""Unit conversions for the Plex operator."""

from __future__ import annotations

import bitmath

__all__ = ["quantity_to_bytes"]


def quantity_to_bytes(quantity: str) -> int:
    """Convert a Kubernetes storage quantity to a number of bytes.

    Binary suffixes such as ``Gi`` and decimal suffixes such as ``G`` are
    both accepted. A bare number is a count of bytes.

    Parameters
    ----------
    quantity
        Amount of storage as a string.

    Returns
    -------
    int
        Equivalent number of bytes.

    Raises
    ------
    ValueError
        Raised if the input string is not a valid quantity.
    """
    return int(bitmath.parse_string_unsafe(quantity).bytes)
