"""
qwetensor: Traversal algorithms

The fold/map primitives every cursor-composed operation is written with.
Each one consumes CursorRanges (or plain iterables for the second operand)
so no operation repeats row/column index arithmetic.
"""

import operator
from typing import Callable, Iterable

from .cursors import CursorRange


def transform(
    src: CursorRange,
    dst: CursorRange,
    op: Callable) -> None:
    """
    dst[k] = op(src[k]) along both traversals.
    """
    dst.assign(op(value) for value in src)


def transform_pairwise(
    src_0: CursorRange,
    src_1: Iterable,
    dst: CursorRange,
    op: Callable) -> None:
    """
    dst[k] = op(src_0[k], src_1[k]) along all three traversals. ``src_1``
    is consumed in step with ``src_0`` and must be at least as long.
    """
    dst.assign(op(a, b) for a, b in zip(src_0, src_1))


def inner_product(
    src_0: CursorRange,
    src_1: Iterable,
    init,
    add: Callable = operator.add,
    mul: Callable = operator.mul):
    """
    Fold init + src_0[0]*src_1[0] + src_0[1]*src_1[1] + ... in visiting
    order. ``src_1`` is consumed in step with ``src_0``.
    """
    acc = init
    for a, b in zip(src_0, src_1):
        acc = add(acc, mul(a, b))
    return acc


def copy_into(
    src: CursorRange,
    dst: CursorRange) -> None:
    """dst[k] = src[k] along both traversals."""
    dst.assign(iter(src))
