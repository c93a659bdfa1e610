import pytest

from dsmanalysis.analysis.clustering import ThebeauParameters
from dsmanalysis.controller.workers import ClusterWorker


@pytest.fixture
def params():
    return ThebeauParameters(optimal_size_cluster=3.0, iterations=50, seed=3)


def collect(worker):
    emitted = {"progress": [], "result": [], "error": []}
    worker.progress_updated.connect(lambda p, msg: emitted["progress"].append(p))
    worker.result_ready.connect(emitted["result"].append)
    worker.error_occurred.connect(emitted["error"].append)
    return emitted


def test_run_emits_result(qt_app, two_cluster_matrix, params):
    worker = ClusterWorker(two_cluster_matrix, params)
    emitted = collect(worker)

    worker.run()

    assert emitted["error"] == []
    assert len(emitted["result"]) == 1
    result = emitted["result"][0]
    assert result.iterations_run == 50
    assert emitted["progress"][0] == 0
    assert emitted["progress"][-1] == 100
    assert max(emitted["progress"][:-1]) <= 99


def test_stop_before_run_cancels(qt_app, two_cluster_matrix, params):
    worker = ClusterWorker(two_cluster_matrix, params)
    emitted = collect(worker)

    worker.stop()
    worker.run()

    assert emitted["result"][0].cancelled
    assert emitted["result"][0].iterations_run == 0


def test_worker_uses_a_copy(qt_app, two_cluster_matrix, params):
    worker = ClusterWorker(two_cluster_matrix, params)
    assert worker.matrix is not two_cluster_matrix
    worker.run()
    assert all(row.group == "(None)" for row in two_cluster_matrix.rows)


def test_errors_are_reported(qt_app, asymmetric_matrix, params):
    worker = ClusterWorker(asymmetric_matrix, params)
    emitted = collect(worker)

    worker.run()

    assert emitted["result"] == []
    assert len(emitted["error"]) == 1
    assert "symmetric" in emitted["error"][0]
