import operator

from numba import njit
import numpy as np
from typing import Tuple
from .constants import *
from .traversal import copy_into, inner_product, transform, transform_pairwise

##########################################################################################
# Core cursor functions for tensor operations
##########################################################################################

# Every function here is a fold/map over cursor ranges. Operands are
# Tensor instances, results are freshly allocated with type(tensor)().


def _zero_of(tensor):
    return tensor.dtype.type(0)


def tensor_add_cursor_core(
    tensor_a,
    tensor_b):
    """
    C_ij = A_ij + B_ij, pairwise along the row-major traversals
    """
    out = type(tensor_a)()
    transform_pairwise(tensor_a.row_major(), tensor_b.row_major(), out.row_major(), operator.add)
    return out


def tensor_subtract_cursor_core(
    tensor_a,
    tensor_b):
    """
    C_ij = A_ij - B_ij, pairwise along the row-major traversals
    """
    out = type(tensor_a)()
    transform_pairwise(tensor_a.row_major(), tensor_b.row_major(), out.row_major(), operator.sub)
    return out


def tensor_scale_cursor_core(
    tensor,
    scalar):
    """
    C_ij = A_ij * s along the row-major traversal
    """
    out = type(tensor)()
    transform(tensor.row_major(), out.row_major(), lambda value: value * scalar)
    return out


def tensor_dot_vector_ij_j_cursor_core(
    tensor,
    vector: np.ndarray) -> np.ndarray:
    """
    w_i = A_ij v_j: one inner product per restricted row cursor
    """
    out = np.zeros(tensor.dim, dtype=tensor.dtype)
    for i in range(tensor.dim):
        out[i] = inner_product(tensor.row_major(i), vector, _zero_of(tensor))
    return out


def vector_dot_tensor_i_ij_cursor_core(
    vector: np.ndarray,
    tensor) -> np.ndarray:
    """
    w_j = v_i A_ij: one inner product per restricted column cursor
    """
    out = np.zeros(tensor.dim, dtype=tensor.dtype)
    for j in range(tensor.dim):
        out[j] = inner_product(tensor.col_major(j), vector, _zero_of(tensor))
    return out


def tensor_dot_tensor_ik_kj_cursor_core(
    tensor_a,
    tensor_b):
    """
    C_ij = A_ik B_kj: inner product of row i of A with column j of B,
    written along the row-major traversal of C
    """
    out = type(tensor_a)()
    out.row_major().assign(
        inner_product(tensor_a.row_major(i), tensor_b.col_major(j), _zero_of(tensor_a))
        for i, j in out.row_major().positions())
    return out


def tensor_double_contraction_ij_ij_cursor_core(
    tensor_a,
    tensor_b):
    """
    A_ij B_ij: row-major traversal of A against row-major traversal of B
    """
    return inner_product(tensor_a.row_major(), tensor_b.row_major(), _zero_of(tensor_a))


def tensor_double_contraction_ji_ij_cursor_core(
    tensor_a,
    tensor_b):
    """
    A_ji B_ij: row-major traversal of A against column-major traversal of
    B. The k-th row-major cell of A is (i, j) and the k-th column-major cell
    of B is (j, i), so this is sum_ij A_ij B_ji = sum_ij A_ji B_ij.
    """
    return inner_product(tensor_a.row_major(), tensor_b.col_major(), _zero_of(tensor_a))


def tensor_transpose_cursor_core(
    tensor):
    """
    Copy the row-major traversal of A into the column-major traversal of C
    """
    out = type(tensor)()
    copy_into(tensor.row_major(), out.col_major())
    return out


def tensor_trace_cursor_core(
    tensor):
    """
    A_ii, as the contraction A_ij delta_ij
    """
    return tensor_double_contraction_ij_ij_cursor_core(tensor, type(tensor).identity())


def tensor_magnitude_cursor_core(
    tensor):
    """
    sqrt(A_ij A_ij)
    """
    return np.sqrt(tensor_double_contraction_ij_ij_cursor_core(tensor, tensor))


def tensor_outer_product_cursor_core(
    cls,
    vector_a: np.ndarray,
    vector_b: np.ndarray):
    """
    C_ij = a_i b_j along the row-major traversal of C
    """
    out = cls()
    out.row_major().assign(vector_a[i] * vector_b[j] for i, j in out.row_major().positions())
    return out


def tensor_invariants_cursor_core(
    tensor) -> Tuple:
    """
    I1 = trace(A), I2 = 0.5 * (trace(A)^2 - trace(A^2)), I3 = det(A)
    """
    trace = tensor_trace_cursor_core(tensor)
    trace_A2 = tensor_trace_cursor_core(tensor_dot_tensor_ik_kj_cursor_core(tensor, tensor))
    I1 = trace
    I2 = 0.5 * (trace * trace - trace_A2)
    I3 = np.linalg.det(tensor._storage)
    return I1, I2, I3


def tensor_decomp_cursor_core(
    tensor,
    compute_flags: Tuple[bool, bool, bool]) -> Tuple:
    """
    Orthogonal decomposition composed from the other cursor cores.

    Returns:
        (sym, asym, bulk), with None for components not requested
    """
    compute_sym, compute_asym, compute_bulk = compute_flags
    half = tensor.dtype.type(0.5)
    transposed = tensor_transpose_cursor_core(tensor)

    trace_part = _zero_of(tensor)
    if tensor.dim > 0:
        trace_part = tensor.dtype.type(tensor_trace_cursor_core(tensor) / tensor.dim)
    bulk = tensor_scale_cursor_core(type(tensor).identity(), trace_part)

    sym = asym = None
    if compute_sym:
        sym = tensor_subtract_cursor_core(
            tensor_scale_cursor_core(tensor_add_cursor_core(tensor, transposed), half),
            bulk)
    if compute_asym:
        asym = tensor_scale_cursor_core(tensor_subtract_cursor_core(tensor, transposed), half)
    return sym, asym, (bulk if compute_bulk else None)


##########################################################################################
# Core numba JIT functions for tensor operations
##########################################################################################

@njit([sig_binary_32, sig_binary_64], cache=True)
def tensor_add_nb_core(
    tensor_a,
    tensor_b):
    """
    Compute A_ij + B_ij
    """
    N = tensor_a.shape[0]
    out = np.empty_like(tensor_a)
    for m in range(N):
        for n in range(N):
            out[m, n] = tensor_a[m, n] + tensor_b[m, n]
    return out


@njit([sig_binary_32, sig_binary_64], cache=True)
def tensor_subtract_nb_core(
    tensor_a,
    tensor_b):
    """
    Compute A_ij - B_ij
    """
    N = tensor_a.shape[0]
    out = np.empty_like(tensor_a)
    for m in range(N):
        for n in range(N):
            out[m, n] = tensor_a[m, n] - tensor_b[m, n]
    return out


@njit([sig_scale_32, sig_scale_64], cache=True)
def tensor_scale_nb_core(
    tensor,
    scalar):
    """
    Compute A_ij * s
    """
    N = tensor.shape[0]
    out = np.empty_like(tensor)
    for m in range(N):
        for n in range(N):
            out[m, n] = tensor[m, n] * scalar
    return out


@njit([sig_tensor_vector_32, sig_tensor_vector_64], cache=True)
def tensor_dot_vector_ij_j_nb_core(
    tensor,
    vector):
    """
    Compute A_ij*v_j
    """
    N = tensor.shape[0]
    out = np.zeros(N, dtype=tensor.dtype)
    for m in range(N):
        sum_val = 0.0
        for k in range(N):
            sum_val += tensor[m, k] * vector[k]
        out[m] = sum_val
    return out


@njit([sig_tensor_vector_32, sig_tensor_vector_64], cache=True)
def vector_dot_tensor_i_ij_nb_core(
    tensor,
    vector):
    """
    Compute v_i*A_ij (the tensor comes first to share the A_ij*v_j signature)
    """
    N = tensor.shape[0]
    out = np.zeros(N, dtype=tensor.dtype)
    for n in range(N):
        sum_val = 0.0
        for m in range(N):
            sum_val += vector[m] * tensor[m, n]
        out[n] = sum_val
    return out


@njit([sig_binary_32, sig_binary_64], cache=True)
def tensor_dot_tensor_ik_kj_nb_core(
    tensor_a,
    tensor_b):
    """
    Compute A_ik*B_kj
    """
    N = tensor_a.shape[0]
    out = np.zeros_like(tensor_a)
    for m in range(N):
        for n in range(N):
            sum_val = 0.0
            for k in range(N):
                sum_val += tensor_a[m, k] * tensor_b[k, n]
            out[m, n] = sum_val
    return out


@njit([sig_double_contraction_32, sig_double_contraction_64], cache=True)
def tensor_double_contraction_ij_ij_nb_core(
    tensor_a,
    tensor_b):
    """
    Compute A_ij*B_ij
    """
    N = tensor_a.shape[0]
    sum_val = 0.0
    for m in range(N):
        for n in range(N):
            sum_val += tensor_a[m, n] * tensor_b[m, n]
    return sum_val


@njit([sig_double_contraction_32, sig_double_contraction_64], cache=True)
def tensor_double_contraction_ji_ij_nb_core(
    tensor_a,
    tensor_b):
    """
    Compute A_ji*B_ij (with transpose on A)
    """
    N = tensor_a.shape[0]
    sum_val = 0.0
    for m in range(N):
        for n in range(N):
            sum_val += tensor_a[n, m] * tensor_b[m, n]
    return sum_val


@njit([sig_unary_32, sig_unary_64], cache=True)
def tensor_transpose_nb_core(
    tensor):
    """
    Compute tensor transpose
    """
    N = tensor.shape[0]
    out = np.empty_like(tensor)
    for m in range(N):
        for n in range(N):
            out[n, m] = tensor[m, n]
    return out


@njit([sig_reduce_32, sig_reduce_64], cache=True)
def tensor_trace_nb_core(
    tensor):
    """
    Compute A_ii
    """
    sum_val = 0.0
    for m in range(tensor.shape[0]):
        sum_val += tensor[m, m]
    return sum_val


@njit([sig_reduce_32, sig_reduce_64], cache=True)
def tensor_magnitude_nb_core(
    tensor):
    """
    Compute tensor magnitude sqrt(A_ij*A_ij)
    """
    N = tensor.shape[0]
    sum_val = 0.0
    for m in range(N):
        for n in range(N):
            val = tensor[m, n]
            sum_val += val * val
    return np.sqrt(sum_val)


@njit([sig_outer_product_32, sig_outer_product_64], cache=True)
def tensor_outer_product_nb_core(
    vector_a,
    vector_b):
    """
    Compute A_i*B_j outer product
    """
    N = vector_a.shape[0]
    out = np.zeros((N, N), dtype=vector_a.dtype)
    for m in range(N):
        for n in range(N):
            out[m, n] = vector_a[m] * vector_b[n]
    return out


@njit([sig_decomp_32, sig_decomp_64], cache=True)
def tensor_decomp_nb_core(
    tensor,
    out_sym,
    out_asym,
    out_bulk,
    compute_flags):
    """
    Fused kernel for orthogonal tensor decomposition

    Args:
        tensor: Input tensor (N, N)
        out_sym: Output symmetric traceless part (N, N)
        out_asym: Output antisymmetric part (N, N)
        out_bulk: Output bulk part (N, N)
        compute_flags: (compute_sym, compute_asym, compute_bulk)
    """
    compute_sym, compute_asym, compute_bulk = compute_flags
    N = tensor.shape[0]
    if N == 0:
        return

    trace = 0.0
    for m in range(N):
        trace += tensor[m, m]
    trace_part = trace / N

    for m in range(N):
        for n in range(N):
            T_mn = tensor[m, n]
            T_nm = tensor[n, m]

            if compute_sym:
                # Symmetric part: 0.5*(T_mn + T_nm) - (1/N)*trace*delta_mn
                sym_part = 0.5 * (T_mn + T_nm)
                if m == n:
                    sym_part -= trace_part
                out_sym[m, n] = sym_part

            if compute_asym:
                # Antisymmetric part: 0.5*(T_mn - T_nm)
                out_asym[m, n] = 0.5 * (T_mn - T_nm)

            if compute_bulk:
                # Bulk part: (1/N)*trace*delta_mn
                if m == n:
                    out_bulk[m, n] = trace_part
                else:
                    out_bulk[m, n] = 0.0


@njit(cache=True)
def tensor_invariants_3D_nb_core(
    tensor):
    """
    Compute all three invariants of a 3x3 tensor in a single pass
    I1 = trace(A)
    I2 = 0.5 * (trace(A)^2 - trace(A^2))
    I3 = det(A)
    """
    a00 = tensor[0, 0]
    a01 = tensor[0, 1]
    a02 = tensor[0, 2]
    a10 = tensor[1, 0]
    a11 = tensor[1, 1]
    a12 = tensor[1, 2]
    a20 = tensor[2, 0]
    a21 = tensor[2, 1]
    a22 = tensor[2, 2]

    # First invariant (trace)
    trace = a00 + a11 + a22

    # Trace of A^2
    trace_A2 = (a00*a00 + a01*a10 + a02*a20 +
               a10*a01 + a11*a11 + a12*a21 +
               a20*a02 + a21*a12 + a22*a22)

    # Second invariant
    I2 = 0.5 * (trace*trace - trace_A2)

    # Third invariant (determinant)
    I3 = (a00 * (a11*a22 - a12*a21) -
          a01 * (a10*a22 - a12*a20) +
          a02 * (a10*a21 - a11*a20))

    return trace, I2, I3


##########################################################################################
# Core numpy functions for tensor operations
##########################################################################################


def tensor_add_np_core(
    tensor_a : np.ndarray,
    tensor_b : np.ndarray) -> np.ndarray:
    """
    Compute A_ij + B_ij.
    Args:
        tensor_a (np.ndarray) : N,N array
        tensor_b (np.ndarray) : N,N array
    Returns:
        a new N,N array
    """
    return np.add(tensor_a, tensor_b)


def tensor_subtract_np_core(
    tensor_a : np.ndarray,
    tensor_b : np.ndarray) -> np.ndarray:
    """
    Compute A_ij - B_ij.
    """
    return np.subtract(tensor_a, tensor_b)


def tensor_scale_np_core(
    tensor : np.ndarray,
    scalar) -> np.ndarray:
    """
    Compute A_ij * s, keeping the dtype of A.
    """
    return np.multiply(tensor, scalar).astype(tensor.dtype, copy=False)


def tensor_dot_vector_ij_j_np_core(
    tensor : np.ndarray,
    vector : np.ndarray) -> np.ndarray:
    """
    Compute the A_ij v_j vector.
    Args:
        tensor (np.ndarray) : N,N array
        vector (np.ndarray) : N array
    Returns:
        A_ij v_j : a_i1 v_1 + a_i2 v_2 + ... the contraction vector.
    """
    return np.einsum('ij,j->i',
                     tensor,
                     vector)


def vector_dot_tensor_i_ij_np_core(
    vector : np.ndarray,
    tensor : np.ndarray) -> np.ndarray:
    """
    Compute the v_i A_ij vector.
    Args:
        vector (np.ndarray) : N array
        tensor (np.ndarray) : N,N array
    Returns:
        v_i A_ij : v_1 a_1j + v_2 a_2j + ... the contraction vector.
    """
    return np.einsum('i,ij->j',
                     vector,
                     tensor)


def tensor_dot_tensor_ik_kj_np_core(
    tensor_a : np.ndarray,
    tensor_b : np.ndarray) -> np.ndarray:
    """
    Compute the A_ik B_kj tensor.
    """
    return np.einsum('ik,kj->ij',
                     tensor_a,
                     tensor_b)


def tensor_double_contraction_ij_ij_np_core(
    tensor_a : np.ndarray,
    tensor_b : np.ndarray):
    """
    Compute the A_ij B_ij scalar.
    Args:
        tensor_a (np.ndarray) : N,N array
        tensor_b (np.ndarray) : N,N array
    Returns:
        A_ijB_ij = a_11 b_11 + a_12 b_12 + ... a_nn b_nn: the contraction scalar.
    """
    return tensor_a.dtype.type(np.einsum('ij,ij->',
                                         tensor_a,
                                         tensor_b))


def tensor_double_contraction_ji_ij_np_core(
    tensor_a : np.ndarray,
    tensor_b : np.ndarray):
    """
    Compute the A_ji B_ij scalar.
    Args:
        tensor_a (np.ndarray) : N,N array
        tensor_b (np.ndarray) : N,N array
    Returns:
        A_jiB_ij = a_11 b_11 + a_21 b_12 + ... a_nn b_nn: the contraction scalar.
    """
    return tensor_a.dtype.type(np.einsum('ji,ij->',
                                         tensor_a,
                                         tensor_b))


def tensor_transpose_np_core(
    tensor : np.ndarray) -> np.ndarray:
    """
    Compute the transpose of a tensor.
    Returns:
        the transpose A_ji of A_ij, in its own storage
    """
    return np.einsum('ij->ji',
                     tensor).copy()


def tensor_trace_np_core(
    tensor : np.ndarray):
    """
    Compute A_ii.
    """
    return tensor.dtype.type(np.trace(tensor))


def tensor_magnitude_np_core(
    tensor : np.ndarray):
    """
    Compute the tensor magnitude sqrt(A_ij A_ij).
    """
    return np.sqrt(tensor_double_contraction_ij_ij_np_core(tensor,
                                                           tensor))


def tensor_outer_product_np_core(
    vector_a : np.ndarray,
    vector_b : np.ndarray) -> np.ndarray:
    """
    Compute the a_i b_j tensor from two vectors.
    """
    return np.einsum('i,j->ij',
                     vector_a,
                     vector_b)


def tensor_decomp_np_core(
    tensor : np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Decompose a tensor into its symmetric traceless, antisymmetric and
    bulk parts.
    Returns:
        Tuple[np.ndarray, np.ndarray, np.ndarray]: sym, asym, bulk
    """
    N = tensor.shape[0]
    transposed = tensor_transpose_np_core(tensor)
    trace_part = np.trace(tensor) / N if N else 0.0
    bulk = (trace_part * np.eye(N)).astype(tensor.dtype)
    sym = (0.5 * (tensor + transposed) - bulk).astype(tensor.dtype)
    asym = (0.5 * (tensor - transposed)).astype(tensor.dtype)
    return sym, asym, bulk


def tensor_invariants_np_core(
    tensor : np.ndarray) -> Tuple:
    """
    Compute the trace, second invariant and determinant
    Args:
        tensor (np.ndarray): N,N array
    Returns:
        Tuple: I1, I2, I3
    """
    trace = np.trace(tensor)
    A2 = np.einsum('ik,kj->ij', tensor, tensor)
    trace_A2 = np.trace(A2)
    I1 = trace
    I2 = 0.5 * (trace**2 - trace_A2)
    I3 = np.linalg.det(tensor)

    return I1, I2, I3
