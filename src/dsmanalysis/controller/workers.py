"""
Background Workers (Threading)
==============================
QThread subclasses for long-running analyses.

Why is this file needed?
------------------------
1. Responsiveness: Thebeau clustering runs thousands of iterations, each
   scoring a full copy of the matrix. On the main thread the GUI would freeze.
2. Signals: Progress, results and errors reach the GUI through Qt Signals,
   which are safe to emit from the worker thread.

The worker clusters its own copy of the matrix; the caller decides whether to
apply the result (e.g. DocumentSession.replace_matrix).

Classes:
    ClusterWorker: Runs the ClusterOptimizer.
"""
import logging
from typing import Optional

from PySide6.QtCore import QThread, Signal

from dsmanalysis.analysis.clustering import ClusterOptimizer, ThebeauParameters
from dsmanalysis.model.matrix import MatrixEngine

logger = logging.getLogger(__name__)


class ClusterWorker(QThread):
    # Signals to update the UI from the background
    progress_updated = Signal(int, str)  # e.g., (10, "Clustering... 10% done.")
    result_ready = Signal(object)  # ClusterResult
    error_occurred = Signal(str)

    def __init__(self, matrix: MatrixEngine, parameters: Optional[ThebeauParameters] = None):
        super().__init__()
        self.matrix = matrix.copy()
        self.parameters = parameters or ThebeauParameters()
        self.is_running = True

    def run(self):
        try:
            logger.info("Starting clustering in background thread...")
            self.progress_updated.emit(0, "Starting clustering...")

            # ---- Progress callback ----
            def progress_callback(percentage: int) -> None:
                percentage = min(percentage, 99)  # 100% only once the result is out
                self.progress_updated.emit(percentage, f"Clustering... {percentage}% done.")

            optimizer = ClusterOptimizer(self.parameters)
            result = optimizer.run(
                self.matrix,
                should_stop=lambda: not self.is_running,
                progress_callback=progress_callback,
            )

            if result.cancelled:
                self.progress_updated.emit(100, "Clustering cancelled.")
            else:
                self.progress_updated.emit(100, "Clustering finished.")
            self.result_ready.emit(result)

        except Exception as e:
            logger.error(f"Error in ClusterWorker: {e}")
            self.error_occurred.emit(str(e))

    def stop(self) -> None:
        self.is_running = False
