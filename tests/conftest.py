import logging

import pytest
from PySide6.QtCore import QCoreApplication

from dsmanalysis.logging_config import setup_logging
from dsmanalysis.model.matrix import MatrixEngine


def pytest_configure(config):
    """Set up test environment before tests run."""
    setup_logging(level=logging.INFO)


@pytest.fixture(scope="session")
def qt_app():
    """A Qt core application; signals and QThread objects need one per process."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def symmetric_matrix():
    return MatrixEngine(symmetric=True)


@pytest.fixture
def asymmetric_matrix():
    return MatrixEngine(symmetric=False)


@pytest.fixture
def chain_matrix():
    """Symmetric matrix A, B, C with A -> B (weight 2) and B -> C (weight 1)."""
    matrix = MatrixEngine(symmetric=True)
    a, col_a = matrix.add_symmetric_item("A")
    b, col_b = matrix.add_symmetric_item("B")
    c, col_c = matrix.add_symmetric_item("C")
    matrix.modify_connection(a.uid, col_b.uid, "", 2.0)
    matrix.modify_connection(b.uid, col_c.uid, "", 1.0)
    return matrix


@pytest.fixture
def two_cluster_matrix():
    """
    Symmetric matrix with two obvious clusters: {P1, P2, P3} and {Q1, Q2, Q3}
    fully connected inside, plus one weak link between them.
    """
    matrix = MatrixEngine(symmetric=True)
    pairs = {name: matrix.add_symmetric_item(name) for name in ("P1", "Q1", "P2", "Q2", "P3", "Q3")}
    for cluster in (("P1", "P2", "P3"), ("Q1", "Q2", "Q3")):
        for src in cluster:
            for dst in cluster:
                if src != dst:
                    matrix.modify_connection_symmetric(pairs[src][0].uid, pairs[dst][1].uid, "", 3.0)
    matrix.modify_connection_symmetric(pairs["P1"][0].uid, pairs["Q1"][1].uid, "", 1.0)
    matrix.history.mark_current_as_checkpoint()
    return matrix
