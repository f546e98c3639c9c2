import threading

import numpy as np
import pytest

import qwetensor
from qwetensor import (
    BACKENDS,
    Tensor,
    TensorOperations,
    tensor_type,
)


DTYPES = [np.float64, np.float32, np.int64]


def make_pair(rng, dim, dtype):
    T = Tensor[dim, dtype]
    if np.dtype(dtype).kind == "f":
        a = rng.standard_normal((dim, dim)).astype(dtype)
        b = rng.standard_normal((dim, dim)).astype(dtype)
    else:
        a = rng.integers(-9, 10, size=(dim, dim)).astype(dtype)
        b = rng.integers(-9, 10, size=(dim, dim)).astype(dtype)
    return T(a), T(b), a, b


def close(x, y, dtype):
    rtol = 1e-4 if np.dtype(dtype) == np.float32 else 1e-10
    return np.allclose(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64), rtol=rtol, atol=rtol)


##########################################################################################
# Configuration
##########################################################################################

def test_default_backend_is_cursor():
    assert TensorOperations().backend == "cursor"
    assert Tensor.backend == "cursor"
    assert Tensor.operations.backend == "cursor"
    assert Tensor[2, np.float32].backend == "cursor"


def test_use_numba_shorthand():
    assert TensorOperations(use_numba=True).backend == "numba"


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        TensorOperations(backend="cuda")
    with pytest.raises(ValueError):
        tensor_type(3, np.float64, "fortran")
    with pytest.raises(ValueError):
        Tensor[3, np.float64, "fortran"]


def test_backend_is_part_of_the_specialization(backend):
    N = Tensor[3, np.float64, backend]
    assert N is tensor_type(3, np.float64, backend)
    assert N.backend == backend
    assert N.operations.backend == backend
    # indexing a specialization keeps its backend
    assert N[2].backend == backend
    assert N[2, np.float32].backend == backend
    assert (backend == "cursor") == (N is Tensor)


@pytest.mark.parametrize("name", ["numba", "numpy"])
def test_backend_shows_in_the_class_name(name):
    assert Tensor[2, np.float64, name].__name__ == f"Tensor[2, float64, {name}]"
    assert Tensor[2, np.float64, "cursor"].__name__ == "Tensor[2, float64]"


def test_no_module_level_backend_switch():
    for name in ("set_default_backend", "get_default_backend", "default_operations"):
        assert not hasattr(qwetensor, name)


def test_operators_do_not_depend_on_other_threads(rng):
    a = rng.standard_normal((3, 3))
    N = Tensor[3, np.float64, "numpy"]
    started = threading.Event()
    seen = []

    def worker():
        started.wait()
        A = Tensor(a)
        result = A + A
        seen.append((type(result).backend, type(A * A).operations.backend))

    thread = threading.Thread(target=worker)
    thread.start()
    # the main thread works on another backend while the worker runs
    B = N(a)
    started.set()
    assert type(B * B).backend == "numpy"
    thread.join()

    assert seen == [("cursor", "cursor")]
    assert Tensor.operations.backend == "cursor"


##########################################################################################
# Every core agrees with plain numpy
##########################################################################################

@pytest.mark.parametrize("name", BACKENDS)
@pytest.mark.parametrize("dtype", DTYPES)
@pytest.mark.parametrize("dim", [0, 1, 2, 3, 4])
def test_cores_match_numpy(rng, name, dtype, dim):
    ops = TensorOperations(backend=name)
    A, B, a, b = make_pair(rng, dim, dtype)
    v = np.arange(1, dim + 1, dtype=dtype)

    assert close(ops.tensor_add(A, B), a + b, dtype)
    assert close(ops.tensor_subtract(A, B), a - b, dtype)
    assert close(ops.tensor_scale(A, 3), a * 3, dtype)
    assert close(ops.tensor_dot_vector_ij_j(A, v), a @ v, dtype)
    assert close(ops.vector_dot_tensor_i_ij(v, A), v @ a, dtype)
    assert close(ops.tensor_dot_tensor_ik_kj(A, B), a @ b, dtype)
    assert close(ops.tensor_double_contraction_ij_ij(A, B), np.sum(a * b), dtype)
    assert close(ops.tensor_double_contraction_ji_ij(A, B), np.sum(a.T * b), dtype)
    assert np.array_equal(ops.tensor_transpose(A).to_numpy(), a.T)
    assert close(ops.tensor_trace(A), np.trace(a), dtype)
    assert close(ops.tensor_magnitude(A), np.sqrt(np.sum(a.astype(np.float64) ** 2)), dtype)
    assert close(ops.tensor_outer_product(type(A), v, v), np.outer(v, v), dtype)


@pytest.mark.parametrize("name", BACKENDS)
@pytest.mark.parametrize("dtype", DTYPES)
def test_results_keep_specialization(rng, name, dtype):
    ops = TensorOperations(backend=name)
    A, B, _, _ = make_pair(rng, 3, dtype)
    for result in (ops.tensor_add(A, B), ops.tensor_scale(A, 2),
                   ops.tensor_dot_tensor_ik_kj(A, B), ops.tensor_transpose(A)):
        assert type(result) is type(A)
        assert result.to_numpy().dtype == np.dtype(dtype)


@pytest.mark.parametrize("name", BACKENDS)
def test_backends_agree_with_each_other(rng, name):
    A, B, _, _ = make_pair(rng, 3, np.float64)
    reference = TensorOperations(backend="numpy")
    ops = TensorOperations(backend=name)
    assert np.allclose(ops.tensor_dot_tensor_ik_kj(A, B).to_numpy(),
                       reference.tensor_dot_tensor_ik_kj(A, B).to_numpy())
    assert np.isclose(ops.tensor_double_contraction_ji_ij(A, B),
                      reference.tensor_double_contraction_ji_ij(A, B))


def test_operations_reject_mismatched_types():
    ops = TensorOperations()
    with pytest.raises(TypeError):
        ops.tensor_add(Tensor(), Tensor[2]())
    with pytest.raises(TypeError):
        ops.tensor_dot_tensor_ik_kj(Tensor(), Tensor[3, np.float32]())


def test_scale_rejects_non_real_scalar():
    ops = TensorOperations()
    with pytest.raises(TypeError):
        ops.tensor_scale(Tensor(), 1j)
    with pytest.raises(TypeError):
        ops.tensor_scale(Tensor(), "2")


##########################################################################################
# Invariants and decomposition
##########################################################################################

@pytest.mark.parametrize("name", BACKENDS)
@pytest.mark.parametrize("dim", [2, 3, 4])
def test_invariants(rng, name, dim):
    A, _, a, _ = make_pair(rng, dim, np.float64)
    I1, I2, I3 = TensorOperations(backend=name).tensor_invariants(A)
    assert np.isclose(I1, np.trace(a))
    assert np.isclose(I2, 0.5 * (np.trace(a) ** 2 - np.trace(a @ a)))
    assert np.isclose(I3, np.linalg.det(a))


def test_invariants_of_identity(tensor_cls):
    I1, I2, I3 = tensor_cls.identity().invariants()
    assert np.isclose(I1, 3.0)
    assert np.isclose(I2, 3.0)
    assert np.isclose(I3, 1.0)


@pytest.mark.parametrize("dim", [1, 2, 3, 4])
def test_decomposition_parts(rng, tensor_cls, dim):
    A = tensor_cls[dim](rng.standard_normal((dim, dim)))
    sym, asym, bulk = A.decompose(all=True)

    assert np.allclose((sym + asym + bulk).to_numpy(), A.to_numpy())
    assert np.allclose(sym.to_numpy(), sym.T.to_numpy())
    assert np.isclose(sym.trace(), 0.0)
    assert np.allclose(asym.to_numpy(), -asym.T.to_numpy())
    assert np.allclose(bulk.to_numpy(), A.trace() / dim * np.eye(dim))


def test_decomposition_selection(rng, tensor_cls):
    A = tensor_cls(rng.standard_normal((3, 3)))
    sym, asym, bulk = A.decompose(all=True)
    assert A.decompose(sym=True) == sym
    assert A.decompose(asym=True) == asym
    assert A.decompose(bulk=True) == bulk
    pair = A.decompose(sym=True, bulk=True)
    assert isinstance(pair, tuple) and len(pair) == 2
    assert pair[0] == sym and pair[1] == bulk


def test_decomposition_of_symmetric_tensor_has_no_asym_part(tensor_cls):
    stress = tensor_cls([[10.0, 2.0, 0.0], [2.0, -4.0, 1.0], [0.0, 1.0, 6.0]])
    assert stress.decompose(asym=True) == tensor_cls()
    assert np.allclose(stress.decompose(bulk=True).to_numpy(), 4.0 * np.eye(3))


def test_decomposition_needs_a_component(tensor_cls):
    with pytest.raises(ValueError):
        tensor_cls().decompose()


def test_decomposition_needs_floats(tensor_cls):
    with pytest.raises(TypeError):
        tensor_cls[3, np.int64]().decompose(all=True)


def test_magnitude(tensor_cls):
    A = tensor_cls([[3.0, 0.0, 0.0], [0.0, 0.0, 4.0], [0.0, 0.0, 0.0]])
    assert np.isclose(A.magnitude(), 5.0)
    assert np.isclose(A.magnitude() ** 2, A.double_contraction_ij_ij(A))
