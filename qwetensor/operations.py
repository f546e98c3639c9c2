"""
qwetensor: Tensor Operations

This module provides the algebra on fixed-dimension tensors: addition, scalar
and tensor-vector products, tensor-tensor products, double contractions,
transpose, and the tensor invariants and orthogonal decomposition used for
stress/strain work in 3-D Euclidean space.

Each operation has three cores (see core_functions.py):

    cursor  fold/map over row-major and column-major cursors
    numba   JIT compiled loops, float32/float64 storage only
    numpy   einsum

The backend is chosen per TensorOperations instance. Numba requests on
storage without a compiled kernel fall back to the numpy core.

"""

import collections.abc
import numpy as np
from typing import Tuple, Union
from .constants import *
from .core_functions import *
from .scalar import as_scalar


class TensorOperations:
    """
    A class to perform operations on Tensor values.
    No data objects. Only methods.

    """
    def __init__(
        self,
        backend: str = DEFAULT_BACKEND,
        use_numba: bool = False):
        """
        Initialize the TensorOperations class.

        Args:
            backend (str, optional): one of "cursor", "numba", "numpy". Defaults to "cursor".
            use_numba (bool, optional): shorthand for backend="numba". Defaults to False.
        """
        if use_numba:
            backend = NUMBA_BACKEND
        if backend not in BACKENDS:
            raise ValueError(f"backend must be one of {BACKENDS}, got {backend!r}")
        self.backend = backend


    def __repr__(self) -> str:
        return f"TensorOperations(backend={self.backend!r})"


    def _use_cursor(self) -> bool:
        return self.backend == CURSOR_BACKEND


    def _use_numba(
        self,
        *arrays: np.ndarray) -> bool:
        return (self.backend == NUMBA_BACKEND
                and all(array.dtype in NUMBA_DTYPES for array in arrays))


    @staticmethod
    def _check_same_type(
        tensor_0,
        tensor_1) -> None:
        if type(tensor_0) is not type(tensor_1):
            raise TypeError(
                f"Cannot combine {type(tensor_0).__name__} with {type(tensor_1).__name__}: "
                "dimension and scalar type must match")


    @staticmethod
    def _as_vector(
        tensor,
        vector) -> np.ndarray:
        if isinstance(vector, (str, bytes)) or not isinstance(
                vector, (collections.abc.Sequence, np.ndarray)):
            raise TypeError(f"Expected a length-{tensor.dim} vector, got {type(vector).__name__}")
        out = np.array(vector)
        if out.ndim != 1 or out.shape[0] != tensor.dim:
            raise ValueError(f"Vector must have shape ({tensor.dim},), got {out.shape}")
        if out.dtype.kind not in "biuf":
            raise TypeError(f"Vector components must be real, got {out.dtype}")
        return np.ascontiguousarray(out, dtype=tensor.dtype)


    def tensor_add(
        self,
        tensor_0,
        tensor_1):
        """A_ij + B_ij"""
        self._check_same_type(tensor_0, tensor_1)
        if self._use_cursor():
            return tensor_add_cursor_core(tensor_0, tensor_1)
        a, b = tensor_0._storage, tensor_1._storage
        if self._use_numba(a):
            out = tensor_add_nb_core(a, b)
        else:
            out = tensor_add_np_core(a, b)
        return type(tensor_0)._adopt(out)


    def tensor_subtract(
        self,
        tensor_0,
        tensor_1):
        """A_ij - B_ij"""
        self._check_same_type(tensor_0, tensor_1)
        if self._use_cursor():
            return tensor_subtract_cursor_core(tensor_0, tensor_1)
        a, b = tensor_0._storage, tensor_1._storage
        if self._use_numba(a):
            out = tensor_subtract_nb_core(a, b)
        else:
            out = tensor_subtract_np_core(a, b)
        return type(tensor_0)._adopt(out)


    def tensor_scale(
        self,
        tensor,
        scalar):
        """
        A_ij * s. The scalar is converted to the tensor's scalar type
        first, so the result stays in that type.
        """
        s = as_scalar(scalar, tensor.dtype)
        if self._use_cursor():
            return tensor_scale_cursor_core(tensor, s)
        a = tensor._storage
        if self._use_numba(a):
            out = tensor_scale_nb_core(a, s)
        else:
            out = tensor_scale_np_core(a, s)
        return type(tensor)._adopt(out)


    def tensor_dot_vector_ij_j(
        self,
        tensor,
        vector) -> np.ndarray:
        """A_ij*v_j"""
        v = self._as_vector(tensor, vector)
        if self._use_cursor():
            return tensor_dot_vector_ij_j_cursor_core(tensor, v)
        a = tensor._storage
        if self._use_numba(a):
            return tensor_dot_vector_ij_j_nb_core(a, v)
        return tensor_dot_vector_ij_j_np_core(a, v)


    def vector_dot_tensor_i_ij(
        self,
        vector,
        tensor) -> np.ndarray:
        """v_i*A_ij"""
        v = self._as_vector(tensor, vector)
        if self._use_cursor():
            return vector_dot_tensor_i_ij_cursor_core(v, tensor)
        a = tensor._storage
        if self._use_numba(a):
            return vector_dot_tensor_i_ij_nb_core(a, v)
        return vector_dot_tensor_i_ij_np_core(v, a)


    def tensor_dot_tensor_ik_kj(
        self,
        tensor_0,
        tensor_1):
        """A_ik*B_kj"""
        self._check_same_type(tensor_0, tensor_1)
        if self._use_cursor():
            return tensor_dot_tensor_ik_kj_cursor_core(tensor_0, tensor_1)
        a, b = tensor_0._storage, tensor_1._storage
        if self._use_numba(a):
            out = tensor_dot_tensor_ik_kj_nb_core(a, b)
        else:
            out = tensor_dot_tensor_ik_kj_np_core(a, b)
        return type(tensor_0)._adopt(out)


    def tensor_double_contraction_ij_ij(
        self,
        tensor_0,
        tensor_1):
        """A_ij*B_ij contraction"""
        self._check_same_type(tensor_0, tensor_1)
        if self._use_cursor():
            return tensor_double_contraction_ij_ij_cursor_core(tensor_0, tensor_1)
        a, b = tensor_0._storage, tensor_1._storage
        if self._use_numba(a):
            return a.dtype.type(tensor_double_contraction_ij_ij_nb_core(a, b))
        return tensor_double_contraction_ij_ij_np_core(a, b)


    def tensor_double_contraction_ji_ij(
        self,
        tensor_0,
        tensor_1):
        """A_ji*B_ij contraction, equal to A_ij*B_ji"""
        self._check_same_type(tensor_0, tensor_1)
        if self._use_cursor():
            return tensor_double_contraction_ji_ij_cursor_core(tensor_0, tensor_1)
        a, b = tensor_0._storage, tensor_1._storage
        if self._use_numba(a):
            return a.dtype.type(tensor_double_contraction_ji_ij_nb_core(a, b))
        return tensor_double_contraction_ji_ij_np_core(a, b)


    def tensor_transpose(
        self,
        tensor):
        """A_ji"""
        if self._use_cursor():
            return tensor_transpose_cursor_core(tensor)
        a = tensor._storage
        if self._use_numba(a):
            out = tensor_transpose_nb_core(a)
        else:
            out = tensor_transpose_np_core(a)
        return type(tensor)._adopt(out)


    def tensor_trace(
        self,
        tensor):
        """A_ii"""
        if self._use_cursor():
            return tensor_trace_cursor_core(tensor)
        a = tensor._storage
        if self._use_numba(a):
            return a.dtype.type(tensor_trace_nb_core(a))
        return tensor_trace_np_core(a)


    def tensor_magnitude(
        self,
        tensor):
        """sqrt(A_ij*A_ij)"""
        if self._use_cursor():
            return tensor_magnitude_cursor_core(tensor)
        a = tensor._storage
        if self._use_numba(a):
            return a.dtype.type(tensor_magnitude_nb_core(a))
        return tensor_magnitude_np_core(a)


    def tensor_outer_product(
        self,
        cls,
        vector_0,
        vector_1):
        """a_i*b_j, as a tensor of type ``cls``"""
        u = self._as_vector(cls, vector_0)
        v = self._as_vector(cls, vector_1)
        if self._use_cursor():
            return tensor_outer_product_cursor_core(cls, u, v)
        if self._use_numba(u):
            out = tensor_outer_product_nb_core(u, v)
        else:
            out = tensor_outer_product_np_core(u, v)
        return cls._adopt(out)


    def tensor_invariants(
        self,
        tensor) -> Tuple:
        """
        Compute all three tensor invariants
        """
        if self._use_cursor():
            return tensor_invariants_cursor_core(tensor)
        a = tensor._storage
        if self._use_numba(a) and tensor.dim == 3:
            return tensor_invariants_3D_nb_core(a)
        return tensor_invariants_np_core(a)


    def orthogonal_tensor_decomposition(
        self,
        tensor,
        sym: bool = False,
        asym: bool = False,
        bulk: bool = False,
        all: bool = False) -> Union[object, Tuple]:
        """
        Decompose tensor into three orthogonal tensors. (1) symmetric traceless,
        (2) antisymmetric, (3) trace.
        """
        if tensor.dtype.kind != "f":
            raise TypeError(f"Decomposition needs a floating scalar type, got {tensor.dtype}")

        if all:
            sym = asym = bulk = True
        sym, asym, bulk = bool(sym), bool(asym), bool(bulk)

        # Early exit if nothing requested
        if not (sym or asym or bulk):
            raise ValueError("Must request at least one component")

        cls = type(tensor)
        if self._use_cursor():
            parts = tensor_decomp_cursor_core(tensor, (sym, asym, bulk))
        elif self._use_numba(tensor._storage):
            outputs = tuple(np.zeros_like(tensor._storage) for _ in range(3))
            tensor_decomp_nb_core(tensor._storage, *outputs, (sym, asym, bulk))
            parts = tuple(cls._adopt(out) for out in outputs)
        else:
            parts = tuple(cls._adopt(out) for out in tensor_decomp_np_core(tensor._storage))

        result = tuple(part for part, wanted in zip(parts, (sym, asym, bulk)) if wanted)
        if len(result) == 1:
            return result[0]
        return result
