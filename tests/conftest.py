import random
from pathlib import Path

import pytest

from treetrace import AVLTree, RedBlackTree


def pytest_addoption(parser):
    parser.addoption("--benchmark", action="store_true", default=False, help="run benchmark tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "benchmark: mark benchmark tests")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--benchmark"):
        return
    benchmark_skip_marker = pytest.mark.skip(reason="use --benchmark marker to run")
    for item in items:
        filename = Path(str(item.fspath)).name
        if "benchmark" in item.keywords or filename.startswith('test_benchmark'):
            item.add_marker(benchmark_skip_marker)


@pytest.fixture(params=[AVLTree, RedBlackTree], ids=["avl", "rb"])
def any_tree(request):
    yield request.param()


@pytest.fixture
def shuffled_keys():
    rng = random.Random(1234)
    keys = rng.sample(range(1000), 200)
    yield keys
