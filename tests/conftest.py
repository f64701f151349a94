import pytest
import torch

from qcorrect.codes import steane_code


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--register-size",
        action="store",
        type=int,
        default=None,
        help="Override the register sizes used by the normalisation property tests.",
    )
    parser.addoption(
        "--seed",
        action="store",
        type=int,
        default=1234,
        help="Seed of the torch.Generator handed to tests through the 'rng' fixture.",
    )


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "register_size" not in metafunc.fixturenames:
        return
    option = metafunc.config.getoption("--register-size")
    values = [int(option)] if option is not None else [1, 3, 7]
    metafunc.parametrize("register_size", values)


@pytest.fixture
def rng(request: pytest.FixtureRequest) -> torch.Generator:
    return torch.Generator().manual_seed(request.config.getoption("--seed"))


@pytest.fixture(scope="session")
def code():
    return steane_code()
