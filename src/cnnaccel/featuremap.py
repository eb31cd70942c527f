"""
Feature map marshaling between flat bit-vectors and fixed-width elements.

A feature map of R rows by C columns of W-bit signed elements travels between
stages as one flat vector of W * R * C bits in row-major order. Element i
(i = row * C + col) occupies bits [W * (i + 1) - 1 : W * i]:

    bit:   W*R*C-1 ...                      2W-1 ... W   W-1 ... 0
         +--------------+-----+------------+------------+----------+
         | elem R*C-1   | ... | elem 2     | elem 1     | elem 0   |
         +--------------+-----+------------+------------+----------+

Flat vectors are Python ints holding the raw (unsigned) bit pattern, the same
value an Amaranth simulator reports for an ``unsigned(W * R * C)`` port.
"""

from collections.abc import Iterable

import numpy as np

from .errors import ShapeMismatch


def wrap_signed(value: int, bits: int) -> int:
    """Truncate ``value`` to ``bits`` and read it back as two's complement."""
    mask = (1 << bits) - 1
    value = int(value) & mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def to_unsigned(value: int, bits: int) -> int:
    """Raw ``bits``-wide bit pattern of a (possibly negative) integer."""
    return int(value) & ((1 << bits) - 1)


def grid_dtype(bits: int):
    # Wide MAC outputs do not fit a machine integer
    return np.int64 if bits <= 64 else object


def unpack(flat: int, bits: int, rows: int, cols: int) -> list[int]:
    """
    Split a flat feature map into ``rows * cols`` signed elements.

    Args:
        flat: Raw bit pattern, ``0 <= flat < 2 ** (bits * rows * cols)``
        bits: Element width W
        rows: Feature map rows R
        cols: Feature map columns C

    Returns:
        Elements in row-major order.

    Raises:
        ShapeMismatch: ``flat`` is negative or wider than ``bits * rows * cols``.
    """
    total = bits * rows * cols
    flat = int(flat)
    if flat < 0 or flat >> total:
        raise ShapeMismatch(
            f"flat feature map {flat:#x} does not fit {rows}x{cols} elements of {bits} bits"
        )
    mask = (1 << bits) - 1
    return [wrap_signed((flat >> (bits * i)) & mask, bits) for i in range(rows * cols)]


def unpack_grid(flat: int, bits: int, rows: int, cols: int) -> np.ndarray:
    """Like :func:`unpack`, shaped as a ``(rows, cols)`` array."""
    elements = unpack(flat, bits, rows, cols)
    return np.array(elements, dtype=grid_dtype(bits)).reshape(rows, cols)


def pack(
    elements: Iterable[int] | np.ndarray,
    bits: int,
    rows: int | None = None,
    cols: int | None = None,
) -> int:
    """
    Concatenate elements into a flat feature map, element 0 in the low bits.

    Each element is truncated to ``bits`` the way a register assignment would.
    A 2D array is flattened row-major. When ``rows`` and ``cols`` are given the
    element count must equal ``rows * cols``.

    Raises:
        ShapeMismatch: the element count or grid shape disagrees with ``rows``
            and ``cols``.
    """
    if isinstance(elements, np.ndarray):
        if rows is not None and cols is not None and elements.ndim == 2:
            if elements.shape != (rows, cols):
                raise ShapeMismatch(
                    f"grid shape {elements.shape} does not match ({rows}, {cols})"
                )
        values = elements.reshape(-1).tolist()
    else:
        values = [int(v) for v in elements]

    if rows is not None and cols is not None and len(values) != rows * cols:
        raise ShapeMismatch(f"expected {rows * cols} elements, got {len(values)}")

    flat = 0
    for i, value in enumerate(values):
        flat |= to_unsigned(value, bits) << (bits * i)
    return flat
