"""
qwetensor: fixed-dimension tensor algebra

Provides a statically sized two-index tensor over a real scalar type, with
addition, scalar, vector and tensor products, double contractions, transpose,
invariants and orthogonal decomposition, for stress/strain, rotation and
inertia work in three-dimensional Euclidean space.

Every operation is written as a fold/map over row-major and column-major
cursors, with numba and numpy cores selected per Tensor specialization
(``Tensor[N, dtype, backend]``) or per TensorOperations instance.
"""

# Import main classes
from .tensor import Tensor, tensor_type
from .operations import TensorOperations
from .cursors import RowCursor, ColCursor, CursorRange
from .constants import DEFAULT_DIM, DEFAULT_DTYPE, BACKENDS


# Import traversal primitives and cores for advanced users
from .traversal import (
    transform,
    transform_pairwise,
    inner_product,
    copy_into
)
from .core_functions import (
    tensor_add_nb_core,
    tensor_scale_nb_core,
    tensor_dot_vector_ij_j_nb_core,
    tensor_dot_tensor_ik_kj_nb_core,
    tensor_double_contraction_ij_ij_nb_core,
    tensor_double_contraction_ji_ij_nb_core,
    tensor_transpose_nb_core,
    tensor_add_np_core,
    tensor_scale_np_core,
    tensor_dot_vector_ij_j_np_core,
    tensor_dot_tensor_ik_kj_np_core,
    tensor_double_contraction_ij_ij_np_core,
    tensor_double_contraction_ji_ij_np_core,
    tensor_transpose_np_core
)

# Version info
__version__ = "1.0.0"

# Define public API
__all__ = [
    'Tensor',
    'tensor_type',
    'TensorOperations',
    'RowCursor',
    'ColCursor',
    'CursorRange',
    'DEFAULT_DIM',
    'DEFAULT_DTYPE',
    'BACKENDS',
    # Traversal primitives
    'transform',
    'transform_pairwise',
    'inner_product',
    'copy_into',
    # Core functions for advanced use
    'tensor_add_nb_core',
    'tensor_scale_nb_core',
    'tensor_dot_vector_ij_j_nb_core',
    'tensor_dot_tensor_ik_kj_nb_core',
    'tensor_double_contraction_ij_ij_nb_core',
    'tensor_double_contraction_ji_ij_nb_core',
    'tensor_transpose_nb_core',
    'tensor_add_np_core',
    'tensor_scale_np_core',
    'tensor_dot_vector_ij_j_np_core',
    'tensor_dot_tensor_ik_kj_np_core',
    'tensor_double_contraction_ij_ij_np_core',
    'tensor_double_contraction_ji_ij_np_core',
    'tensor_transpose_np_core'
]
