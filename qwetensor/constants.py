import numpy as np
from numba import types

##############################################################################
# Global constants
##############################################################################

DEFAULT_DIM = 3             # Euclidean 3-space
DEFAULT_DTYPE = np.float64  # default scalar

CURSOR_BACKEND = "cursor"
NUMBA_BACKEND = "numba"
NUMPY_BACKEND = "numpy"
BACKENDS = (CURSOR_BACKEND, NUMBA_BACKEND, NUMPY_BACKEND)
DEFAULT_BACKEND = CURSOR_BACKEND

# storage dtypes with compiled kernels
NUMBA_DTYPES = (np.dtype(np.float32), np.dtype(np.float64))


##############################################################################
# Type signatures for Numba functions
##############################################################################

# Elementwise addition / subtraction
sig_binary_32 = types.float32[:,:](
    types.float32[:,:],
    types.float32[:,:]
    )
sig_binary_64 = types.float64[:,:](
    types.float64[:,:],
    types.float64[:,:]
    )

# Scalar multiplication
sig_scale_32 = types.float32[:,:](
    types.float32[:,:],
    types.float32
    )
sig_scale_64 = types.float64[:,:](
    types.float64[:,:],
    types.float64
    )

# Tensor vector products, A_ij v_j and v_i A_ij
sig_tensor_vector_32 = types.float32[:](
    types.float32[:,:],
    types.float32[:]
    )
sig_tensor_vector_64 = types.float64[:](
    types.float64[:,:],
    types.float64[:]
    )

# Double contractions
sig_double_contraction_32 = types.float32(
    types.float32[:,:],
    types.float32[:,:]
    )
sig_double_contraction_64 = types.float64(
    types.float64[:,:],
    types.float64[:,:]
    )

# Single argument tensor -> tensor (transpose)
sig_unary_32 = types.float32[:,:](
    types.float32[:,:]
    )
sig_unary_64 = types.float64[:,:](
    types.float64[:,:]
    )

# Tensor -> scalar (magnitude)
sig_reduce_32 = types.float32(
    types.float32[:,:]
    )
sig_reduce_64 = types.float64(
    types.float64[:,:]
    )

# Outer product of two vectors
sig_outer_product_32 = types.float32[:,:](
    types.float32[:],
    types.float32[:]
    )
sig_outer_product_64 = types.float64[:,:](
    types.float64[:],
    types.float64[:]
    )

# Orthogonal decomposition, writes into three preallocated outputs
sig_decomp_32 = types.void(
    types.float32[:,:],             # tensor: (N, N)
    types.float32[:,:],             # out_sym: (N, N)
    types.float32[:,:],             # out_asym: (N, N)
    types.float32[:,:],             # out_bulk: (N, N)
    types.UniTuple(types.boolean, 3)  # compute_flags: (bool, bool, bool)
    )
sig_decomp_64 = types.void(
    types.float64[:,:],
    types.float64[:,:],
    types.float64[:,:],
    types.float64[:,:],
    types.UniTuple(types.boolean, 3)
    )
