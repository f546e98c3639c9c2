import numpy as np
import pytest

from qwetensor import BACKENDS, tensor_type


@pytest.fixture(params=BACKENDS)
def backend(request):
    """Run the test once per backend."""
    return request.param


@pytest.fixture
def tensor_cls(backend):
    """The 3-D float64 Tensor class running on ``backend``. Index it for other N and dtypes."""
    return tensor_type(3, np.float64, backend)


@pytest.fixture
def rng():
    return np.random.default_rng(20240531)
