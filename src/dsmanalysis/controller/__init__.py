"""
The CONTROLLER layer connects documents to Qt: it serializes access to a
MatrixEngine, groups mutations into undoable units and runs long analyses
in background threads.
"""
from dsmanalysis.controller.session import DocumentSession
from dsmanalysis.controller.workers import ClusterWorker

__all__ = ["DocumentSession", "ClusterWorker"]
