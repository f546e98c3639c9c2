"""
qwetensor: Tensor

The (2, 0)-tensor over N-dimensional Euclidean space: an N x N array of
real scalars owned by exactly one Tensor value.

N, the scalar type and the backend are class-level parameters. ``Tensor[N]``,
``Tensor[N, dtype]``, ``Tensor[N, dtype, backend]`` and
``tensor_type(N, dtype, backend)`` return a specialization, one class per
(N, dtype, backend) triple, and ``Tensor`` itself is the (3, float64, cursor)
specialization. Tensors of different specializations never combine: the
operators return NotImplemented and Python raises TypeError.

The backend picks the cores every operator and method of the class runs on
(see operations.py). It is fixed when the class is created; nothing at module
level changes it.

    >>> T = Tensor([[5.0] * 3] * 3)
    >>> T2 = Tensor()
    >>> T2[1, 1] = 0.312
    >>> T2[0][2] = 2.00004
    >>> Tm = T * (T + T2)
    >>> w = Tm * [7, 7, 7]
    >>> T2d = Tensor[2]()
    >>> T * T2d
    Traceback (most recent call last):
    ...
    TypeError: unsupported operand type(s) for *: 'Tensor' and 'Tensor[2, float64]'

"""

import collections.abc
import numbers
import warnings

import numpy as np
from typing import Dict, Optional, Sequence, Tuple
from .constants import BACKENDS, DEFAULT_BACKEND, DEFAULT_DIM, DEFAULT_DTYPE
from .cursors import ColCursor, CursorRange, RowCursor
from .operations import TensorOperations
from .scalar import as_scalar, scalar_dtype


_SPECIALIZATIONS: Dict[Tuple[int, np.dtype, str], type] = {}


def _check_dim(dim) -> int:
    if isinstance(dim, bool) or not isinstance(dim, numbers.Integral):
        raise TypeError(f"Tensor dimension must be an int, got {type(dim).__name__}")
    if dim < 0:
        raise ValueError(f"Tensor dimension must be non-negative, got {dim}")
    return int(dim)


def _check_backend(backend) -> str:
    if backend not in BACKENDS:
        raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
    return backend


def tensor_type(
    dim: int = DEFAULT_DIM,
    dtype=DEFAULT_DTYPE,
    backend: str = DEFAULT_BACKEND) -> type:
    """
    The Tensor class for dimension ``dim``, scalar type ``dtype`` and
    ``backend``.

    The same arguments always return the same class, so ``type(a) is
    type(b)`` holds exactly when a and b may be combined.

    Args:
        dim (int): non-negative dimension N
        dtype: real scalar type, see scalar.scalar_dtype
        backend (str): "cursor", "numba" or "numpy"

    Returns:
        type: a subclass of Tensor (or Tensor itself for (3, float64, cursor))
    """
    key = (_check_dim(dim), scalar_dtype(dtype), _check_backend(backend))
    cls = _SPECIALIZATIONS.get(key)
    if cls is None:
        name = f"Tensor[{key[0]}, {key[1].name}]"
        if key[2] != DEFAULT_BACKEND:
            name = f"Tensor[{key[0]}, {key[1].name}, {key[2]}]"
        cls = type(name, (Tensor,), {
            "__slots__": (),
            "__module__": Tensor.__module__,
            "__qualname__": name,
            "dim": key[0],
            "dtype": key[1],
            "backend": key[2],
            "operations": TensorOperations(backend=key[2]),
        })
        _SPECIALIZATIONS[key] = cls
    return cls


class Tensor:
    """
    Fixed-dimension two-index tensor with value semantics.

    Every operation returns a new Tensor (or vector, or scalar) whose storage
    shares nothing with its operands. ``copy()`` gives an independent owner.
    """
    __slots__ = ("_storage",)

    dim: int = DEFAULT_DIM
    dtype: np.dtype = np.dtype(DEFAULT_DTYPE)
    backend: str = DEFAULT_BACKEND
    operations: TensorOperations = TensorOperations(backend=DEFAULT_BACKEND)

    # numpy defers to our reflected operators instead of broadcasting
    __array_ufunc__ = None

    def __class_getitem__(cls, params):
        """
        ``cls[N]``, ``cls[N, dtype]`` or ``cls[N, dtype, backend]``. An omitted
        backend is the backend of ``cls``.
        """
        if not isinstance(params, tuple):
            params = (params,)
        if len(params) == 1:
            params = params + (DEFAULT_DTYPE,)
        if len(params) == 2:
            params = params + (cls.backend,)
        return tensor_type(*params)


    def __init__(
        self,
        rows: Optional[Sequence[Sequence]] = None) -> None:
        """
        Args:
            rows (optional): N rows of N real values each. Omitted, every
                             cell holds the additive identity.
        """
        self._storage = np.zeros((self.dim, self.dim), dtype=self.dtype)
        if rows is not None:
            self._storage[...] = self._validate_rows(rows)


    @classmethod
    def _validate_rows(
        cls,
        rows) -> np.ndarray:
        if len(rows) != cls.dim:
            raise ValueError(f"{cls.__name__} needs {cls.dim} rows, got {len(rows)}")
        for i, row in enumerate(rows):
            if len(row) != cls.dim:
                raise ValueError(f"Row {i} of {cls.__name__} needs {cls.dim} values, got {len(row)}")

        values = np.array(rows).reshape(cls.dim, cls.dim)
        if values.dtype.kind not in "biuf":
            raise TypeError(f"Tensor cells must be real numbers, got {values.dtype}")
        narrowed = (values.dtype.kind == "f"
                    and (cls.dtype.kind != "f" or values.dtype.itemsize > cls.dtype.itemsize))
        if narrowed:
            warnings.warn(
                f"Converting {values.dtype} rows to {cls.dtype} for {cls.__name__}",
                UserWarning,
                stacklevel=3)
        return values


    @classmethod
    def _adopt(
        cls,
        array: np.ndarray) -> "Tensor":
        """Wrap a freshly computed N x N array without copying it again."""
        if array.shape != (cls.dim, cls.dim):
            raise ValueError(f"{cls.__name__} storage must be {cls.dim}x{cls.dim}, got {array.shape}")
        obj = cls.__new__(cls)
        obj._storage = np.ascontiguousarray(array, dtype=cls.dtype)
        return obj


    @classmethod
    def identity(cls) -> "Tensor":
        """Kronecker delta, delta_ij."""
        return cls._adopt(np.eye(cls.dim, dtype=cls.dtype))


    @classmethod
    def outer(
        cls,
        vector_0,
        vector_1) -> "Tensor":
        """Outer product a_i b_j of two length-N vectors."""
        return cls.operations.tensor_outer_product(cls, vector_0, vector_1)


    ##########################################################################
    # Element access
    ##########################################################################

    def _check_index(
        self,
        index) -> int:
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise TypeError(f"Tensor indices must be ints, got {type(index).__name__}")
        if not 0 <= index < self.dim:
            raise IndexError(f"Index {index} out of range for {type(self).__name__}")
        return int(index)


    def _split_key(
        self,
        key) -> Tuple[int, Optional[int]]:
        if isinstance(key, tuple):
            if len(key) != 2:
                raise IndexError(f"Tensor cells are addressed by (row, col), got {len(key)} indices")
            return self._check_index(key[0]), self._check_index(key[1])
        return self._check_index(key), None


    def __getitem__(self, key):
        """
        ``t[i, j]`` reads a cell. ``t[i]`` is a writable view of row i, so
        ``t[i][j] = x`` writes into this tensor.
        """
        i, j = self._split_key(key)
        if j is None:
            return self._storage[i]
        return self._storage[i, j]


    def __setitem__(self, key, value) -> None:
        i, j = self._split_key(key)
        if j is not None:
            self._storage[i, j] = as_scalar(value, self.dtype)
            return
        row = np.array(value)
        if row.shape != (self.dim,) or row.dtype.kind not in "biuf":
            raise ValueError(f"Row {i} needs {self.dim} real values")
        self._storage[i] = row


    @property
    def shape(self) -> Tuple[int, int]:
        return (self.dim, self.dim)


    ##########################################################################
    # Cursors
    ##########################################################################

    def row_begin(
        self,
        row: Optional[int] = None) -> RowCursor:
        """First cell of the row-major traversal, or of row ``row`` only."""
        if row is None:
            return RowCursor(self, 0, 0)
        return RowCursor(self, self._check_index(row), 0)


    def row_end(
        self,
        row: Optional[int] = None) -> RowCursor:
        """End sentinel: (N, 0), or (row + 1, 0) for a single row."""
        if row is None:
            return RowCursor(self, self.dim, 0)
        return RowCursor(self, self._check_index(row) + 1, 0)


    def col_begin(
        self,
        col: Optional[int] = None) -> ColCursor:
        """First cell of the column-major traversal, or of column ``col`` only."""
        if col is None:
            return ColCursor(self, 0, 0)
        return ColCursor(self, 0, self._check_index(col))


    def col_end(
        self,
        col: Optional[int] = None) -> ColCursor:
        """End sentinel: (0, N), or (0, col + 1) for a single column."""
        if col is None:
            return ColCursor(self, 0, self.dim)
        return ColCursor(self, 0, self._check_index(col) + 1)


    def row_major(
        self,
        row: Optional[int] = None) -> CursorRange:
        return CursorRange(self.row_begin(row), self.row_end(row))


    def col_major(
        self,
        col: Optional[int] = None) -> CursorRange:
        return CursorRange(self.col_begin(col), self.col_end(col))


    ##########################################################################
    # Algebra
    ##########################################################################

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.operations.tensor_add(self, other)


    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.operations.tensor_subtract(self, other)


    def __neg__(self):
        return self.operations.tensor_subtract(type(self)(), self)


    @staticmethod
    def _is_vector(other) -> bool:
        return (isinstance(other, (collections.abc.Sequence, np.ndarray))
                and not isinstance(other, (str, bytes)))


    def __mul__(self, other):
        """
        ``A * s`` scales, ``A * v`` is A_ij v_j, ``A * B`` is A_ik B_kj.
        """
        if isinstance(other, Tensor):
            if type(other) is not type(self):
                return NotImplemented
            return self.operations.tensor_dot_tensor_ik_kj(self, other)
        if isinstance(other, numbers.Real):
            return self.operations.tensor_scale(self, other)
        if self._is_vector(other):
            return self.operations.tensor_dot_vector_ij_j(self, other)
        return NotImplemented


    def __rmul__(self, other):
        if isinstance(other, numbers.Real):
            return self.operations.tensor_scale(self, other)
        return NotImplemented


    def __matmul__(self, other):
        if isinstance(other, Tensor):
            if type(other) is not type(self):
                return NotImplemented
            return self.operations.tensor_dot_tensor_ik_kj(self, other)
        if self._is_vector(other):
            return self.operations.tensor_dot_vector_ij_j(self, other)
        return NotImplemented


    def __rmatmul__(self, other):
        if self._is_vector(other):
            return self.operations.vector_dot_tensor_i_ij(other, self)
        return NotImplemented


    def double_contraction(
        self,
        other: "Tensor"):
        """
        Sum over the row-major traversal of this tensor paired with the
        column-major traversal of ``other``: sum_ij A_ij B_ji.

        Note this is A : B^T. The textbook A : B = sum_ij A_ij B_ij is
        ``double_contraction_ij_ij``. The two agree when either operand is
        symmetric.
        """
        return self.operations.tensor_double_contraction_ji_ij(self, other)


    def double_contraction_ij_ij(
        self,
        other: "Tensor"):
        """A_ij B_ij"""
        return self.operations.tensor_double_contraction_ij_ij(self, other)


    def double_contraction_ji_ij(
        self,
        other: "Tensor"):
        """A_ji B_ij"""
        return self.operations.tensor_double_contraction_ji_ij(self, other)


    def transpose(self) -> "Tensor":
        return self.operations.tensor_transpose(self)

    @property
    def T(self) -> "Tensor":
        return self.transpose()


    def trace(self):
        return self.operations.tensor_trace(self)


    def magnitude(self):
        """sqrt(A_ij A_ij)"""
        return self.operations.tensor_magnitude(self)


    def invariants(self) -> Tuple:
        """
        Returns:
            (I1, I2, I3) = (trace(A), 0.5 * (trace(A)^2 - trace(A^2)), det(A))
        """
        return self.operations.tensor_invariants(self)


    def decompose(
        self,
        sym: bool = False,
        asym: bool = False,
        bulk: bool = False,
        all: bool = False):
        """
        Orthogonal decomposition A = sym + asym + bulk, where

            sym  = 0.5 * (A + A^T) - trace(A) / N * delta
            asym = 0.5 * (A - A^T)
            bulk = trace(A) / N * delta

        One requested component is returned on its own, several as a tuple
        in (sym, asym, bulk) order.
        """
        return self.operations.orthogonal_tensor_decomposition(
            self, sym=sym, asym=asym, bulk=bulk, all=all)


    ##########################################################################
    # Value semantics
    ##########################################################################

    def copy(self) -> "Tensor":
        return type(self)._adopt(self._storage.copy())

    __copy__ = copy

    def __deepcopy__(self, memo) -> "Tensor":
        return self.copy()


    def to_numpy(self) -> np.ndarray:
        """An independent N x N copy of the cells."""
        return self._storage.copy()


    def __array__(self, dtype=None, copy=None):
        out = self._storage.copy()
        if dtype is not None:
            out = out.astype(dtype)
        return out


    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return bool(np.array_equal(self._storage, other._storage))

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._storage.tolist()!r})"


    def __str__(self) -> str:
        return "\n".join(" ".join(str(value) for value in row) for row in self._storage.tolist())


_SPECIALIZATIONS[(DEFAULT_DIM, np.dtype(DEFAULT_DTYPE), DEFAULT_BACKEND)] = Tensor
