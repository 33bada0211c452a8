from unittest.mock import patch

import pandas as pd
import pytest

from analysis.metrics import (
    TRACKER_CSV_COLUMNS,
    MetricsSnapshot,
    PerformanceTracker,
    current_process_memory,
)


@pytest.mark.unit
class TestPerformanceTracker:
    """Test counter and timing behaviour."""

    def setup_method(self):
        self.tracker = PerformanceTracker("test", measure_memory=False)

    def test_initial_state(self):
        assert self.tracker.comparisons == 0
        assert self.tracker.assignments == 0
        assert self.tracker.array_accesses == 0
        assert self.tracker.elapsed_ns == 0
        assert self.tracker.memory_used == 0

    def test_increments(self):
        self.tracker.increment_comparisons()
        self.tracker.increment_comparisons(4)
        self.tracker.increment_assignments()
        self.tracker.increment_array_accesses(3)

        assert self.tracker.comparisons == 5
        assert self.tracker.assignments == 1
        assert self.tracker.array_accesses == 3

    def test_reset(self):
        self.tracker.increment_comparisons(10)
        self.tracker.start_measurement(5)
        self.tracker.stop_measurement()
        self.tracker.reset()

        assert self.tracker.comparisons == 0
        assert self.tracker.elapsed_ns == 0

    def test_timing_is_non_negative(self):
        self.tracker.start_measurement(10)
        self.tracker.stop_measurement()
        assert self.tracker.elapsed_ns >= 0
        assert self.tracker.input_size == 10

    def test_memory_probe(self):
        readings = iter([2048, 1024])
        tracker = PerformanceTracker("test", memory_probe=lambda: next(readings))
        tracker.start_measurement(1)
        tracker.stop_measurement()
        assert tracker.memory_used == -1024

    def test_memory_not_read_when_disabled(self):
        probe_calls = []
        tracker = PerformanceTracker(
            "test", measure_memory=False, memory_probe=lambda: probe_calls.append(1)
        )
        tracker.start_measurement(1)
        tracker.stop_measurement()
        assert probe_calls == []

    def test_collect_garbage(self):
        tracker = PerformanceTracker("test", measure_memory=False, collect_garbage=True)
        with patch("analysis.metrics.gc.collect") as mock_collect:
            tracker.start_measurement(1)
        mock_collect.assert_called_once()

    def test_snapshot(self):
        self.tracker.increment_comparisons(3)
        self.tracker.increment_assignments(2)
        self.tracker.increment_array_accesses(6)
        self.tracker.start_measurement(6)
        self.tracker.stop_measurement()

        snapshot = self.tracker.snapshot()

        assert isinstance(snapshot, MetricsSnapshot)
        assert snapshot.comparisons == 3
        assert snapshot.assignments == 2
        assert snapshot.accesses == 6
        assert snapshot.memory_delta == 0

    def test_snapshot_is_detached(self):
        snapshot = self.tracker.snapshot()
        self.tracker.increment_comparisons()
        assert snapshot.comparisons == 0

    def test_metrics_string(self):
        self.tracker.increment_comparisons(7)
        self.tracker.start_measurement(9)
        self.tracker.stop_measurement()

        text = self.tracker.metrics_string()
        assert text.startswith("n=9, time=")
        assert "cmp=7" in text
        assert text.endswith("mem=0B")

    def test_log_summary(self):
        with patch("analysis.metrics.logger") as mock_logger:
            self.tracker.log_summary()
        mock_logger.info.assert_called()

    def test_export_to_csv_appends_rows(self, tmp_path):
        csv_path = tmp_path / "tracker" / "metrics.csv"

        self.tracker.start_measurement(9)
        self.tracker.increment_comparisons(17)
        self.tracker.increment_assignments(2)
        self.tracker.increment_array_accesses(18)
        self.tracker.stop_measurement()
        self.tracker.export_to_csv(csv_path)

        self.tracker.reset()
        self.tracker.start_measurement(4)
        self.tracker.increment_comparisons(8)
        self.tracker.stop_measurement()
        self.tracker.export_to_csv(csv_path)

        lines = csv_path.read_text().splitlines()
        assert lines[0] == ",".join(TRACKER_CSV_COLUMNS)
        assert sum(line.startswith("Algorithm,") for line in lines) == 1
        assert len(lines) == 3

        rows = pd.read_csv(csv_path)
        assert list(rows["InputSize"]) == [9, 4]
        assert list(rows["Comparisons"]) == [17, 8]
        assert list(rows["Assignments"]) == [2, 0]
        assert list(rows["ArrayAccesses"]) == [18, 0]
        assert list(rows["MemoryBytes"]) == [0, 0]
        assert set(rows["Algorithm"]) == {"test"}


@pytest.mark.unit
class TestMetricsSnapshot:
    """Test the immutable snapshot."""

    def test_elapsed_ms(self):
        snapshot = MetricsSnapshot(1, 2, 3, 2_500_000, 0)
        assert snapshot.elapsed_ms == pytest.approx(2.5)

    def test_to_dict(self):
        data = MetricsSnapshot(1, 2, 3, 1_000_000, 64).to_dict()
        assert data == {
            "comparisons": 1,
            "assignments": 2,
            "accesses": 3,
            "elapsed_ns": 1_000_000,
            "memory_delta": 64,
            "elapsed_ms": 1.0,
        }

    def test_frozen(self):
        snapshot = MetricsSnapshot(1, 2, 3, 4, 5)
        with pytest.raises(AttributeError):
            snapshot.comparisons = 10


@pytest.mark.unit
def test_current_process_memory_is_positive():
    assert current_process_memory() > 0
