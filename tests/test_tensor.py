import copy

import numpy as np
import pytest

from qwetensor import DEFAULT_DIM, Tensor, tensor_type


def test_default_specialization_is_tensor():
    assert Tensor.dim == DEFAULT_DIM == 3
    assert Tensor.dtype == np.float64
    assert Tensor[3] is Tensor
    assert Tensor[3, np.float64] is Tensor
    assert tensor_type() is Tensor


def test_specializations_are_cached():
    assert Tensor[2] is tensor_type(2)
    assert Tensor[2, "float32"] is Tensor[2, np.float32]
    assert Tensor[2] is not Tensor[2, np.float32]
    assert Tensor[4].dim == 4
    assert Tensor[4]().shape == (4, 4)
    assert issubclass(Tensor[2], Tensor)


@pytest.mark.parametrize("dim", [-1, -3])
def test_negative_dimension_rejected(dim):
    with pytest.raises(ValueError):
        tensor_type(dim)


@pytest.mark.parametrize("dim", [2.5, "3", True, None])
def test_non_integer_dimension_rejected(dim):
    with pytest.raises(TypeError):
        tensor_type(dim)


@pytest.mark.parametrize("dtype", [np.complex128, np.bool_, object, "U3"])
def test_non_real_scalar_types_rejected(dtype):
    with pytest.raises(TypeError):
        tensor_type(3, dtype)


def test_empty_constructor_is_zero():
    t = Tensor()
    assert t.to_numpy().shape == (3, 3)
    assert np.array_equal(t.to_numpy(), np.zeros((3, 3)))
    assert Tensor[2, np.int64]().to_numpy().dtype == np.int64


def test_nested_sequence_constructor_copies():
    rows = [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [7.0, 8.0, 9.0]]
    t = Tensor(rows)
    rows[0][0] = 100.0
    assert t[0, 0] == 1.0
    assert t[2, 1] == 8.0

    arr = np.arange(9.0).reshape(3, 3)
    t = Tensor(arr)
    arr[1, 1] = -1.0
    assert t[1, 1] == 4.0


def test_zero_dimensional_tensor():
    t = Tensor[0]([])
    assert t.shape == (0, 0)
    assert list(t.row_major()) == []
    assert t == Tensor[0]()


@pytest.mark.parametrize("rows", [
    [[1, 2, 3], [4, 5, 6]],
    [[1, 2, 3], [4, 5, 6], [7, 8, 9], [1, 1, 1]],
    [[1, 2, 3], [4, 5], [7, 8, 9]],
    [[1, 2, 3], [4, 5, 6], [7, 8, 9, 10]],
])
def test_malformed_rows_rejected(rows):
    with pytest.raises(ValueError):
        Tensor(rows)


def test_complex_rows_rejected():
    with pytest.raises(TypeError):
        Tensor([[1j, 0, 0], [0, 0, 0], [0, 0, 0]])


def test_narrowing_rows_warns():
    with pytest.warns(UserWarning, match="float32"):
        Tensor[3, np.float32]([[0.1] * 3] * 3)
    with pytest.warns(UserWarning, match="int64"):
        Tensor[3, np.int64]([[0.5] * 3] * 3)


def test_element_access_read_write():
    t = Tensor()
    t[1, 1] = 0.312
    t[0][2] = 2.00004
    assert t[0, 1] == 0.0
    assert t[1, 1] == 0.312
    assert t[0, 2] == 2.00004
    # same indices, same cell
    t[2, 0] = 1.5
    assert t[2, 0] == t[2, 0] == 1.5


def test_row_view_writes_through():
    t = Tensor()
    row = t[2]
    row[1] = 4.0
    assert t[2, 1] == 4.0


def test_row_assignment():
    t = Tensor()
    t[1] = [1, 2, 3]
    assert np.array_equal(t[1], [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        t[1] = [1, 2]


@pytest.mark.parametrize("key", [3, -1, (0, 3), (3, 0), (-1, 0), (0, -1)])
def test_out_of_range_index(key):
    t = Tensor()
    with pytest.raises(IndexError):
        t[key]
    with pytest.raises(IndexError):
        t[key] = 1.0


def test_wrong_index_arity():
    with pytest.raises(IndexError):
        Tensor()[0, 0, 0]


def test_non_integer_index():
    with pytest.raises(TypeError):
        Tensor()[1.0, 0]


def test_complex_cell_rejected():
    t = Tensor()
    with pytest.raises(TypeError):
        t[0, 0] = 1 + 2j


def test_copy_is_independent():
    a = Tensor(np.arange(9.0).reshape(3, 3))
    for b in (a.copy(), copy.copy(a), copy.deepcopy(a)):
        assert b == a
        assert type(b) is type(a)
        b[0, 0] = -7.0
        assert a[0, 0] == 0.0


def test_to_numpy_is_independent():
    a = Tensor(np.eye(3))
    arr = a.to_numpy()
    arr[0, 0] = 5.0
    assert a[0, 0] == 1.0
    assert np.array_equal(np.asarray(a), np.eye(3))


def test_equality():
    a = Tensor(np.eye(3))
    assert a == Tensor.identity()
    assert a != Tensor()
    assert Tensor[2]() != Tensor[3]()
    assert Tensor[3, np.float32]() != Tensor()
    with pytest.raises(TypeError):
        hash(a)


def test_repr_and_str():
    t = Tensor[2]([[1.0, 2.0], [3.0, 4.0]])
    assert repr(t) == "Tensor[2, float64]([[1.0, 2.0], [3.0, 4.0]])"
    assert str(t) == "1.0 2.0\n3.0 4.0"
    assert repr(Tensor()).startswith("Tensor([[0.0")


def test_identity_and_outer():
    assert np.array_equal(Tensor[4].identity().to_numpy(), np.eye(4))
    t = Tensor.outer([1, 2, 3], [4, 5, 6])
    assert np.array_equal(t.to_numpy(), np.outer([1, 2, 3], [4, 5, 6]))
    with pytest.raises(ValueError):
        Tensor.outer([1, 2], [1, 2, 3])
