"""
Unit tests for the measurement aggregator.

Tests per-process rollups, threshold classification, ordering, and the
tolerance rules for malformed documents.
"""

import pytest

from procload.analysis import analyze, fold_measurements, iter_samples
from procload.models import ReportOptions, TimeRange
from procload.sources import parse_document
from procload.validation import ValidationError


def _measurement(timestamp, *samples):
    return {"timestamp": timestamp, "processes": list(samples)}


def _sample(pid, cpu, command="proc", mem=0.0):
    return {"pid": pid, "cpu": cpu, "mem": mem, "time": "0:00", "command": command}


@pytest.mark.unit
class TestProcessRollups:
    """Test cases for per-pid statistics."""

    def test_distinct_pid_count(self, sample_document):
        result = analyze(sample_document)
        assert result.total_processes == 4
        assert result.measurement_count == 3

    def test_average_is_mean_of_full_history(self, sample_document):
        stats = fold_measurements(sample_document["measurements"])

        train = stats[100]
        assert train.avg_cpu == 50.0
        assert train.max_cpu == 90.0
        assert train.min_cpu == 10.0
        assert train.max_mem == 7.5
        assert train.sample_count == 3
        assert train.timestamps == [
            "2025-06-22 17:46:17",
            "2025-06-22 17:46:22",
            "2025-06-22 17:46:27",
        ]

    def test_average_matches_recomputation_for_awkward_values(self):
        values = [0.1, 0.2, 0.3, 33.3, 66.7, 12.05]
        measurements = [_measurement(f"t{i}", _sample(1, v)) for i, v in enumerate(values)]

        stats = fold_measurements(measurements)[1]

        assert stats.avg_cpu == sum(values) / len(values)
        assert stats.sample_count == len(values)

    def test_command_is_fixed_by_first_sample(self):
        measurements = [
            _measurement("t1", _sample(42, 5.0, command="bash")),
            _measurement("t2", _sample(42, 7.0, command="java -jar app.jar")),
        ]

        stats = fold_measurements(measurements)[42]

        assert stats.command == "bash"
        assert stats.max_cpu == 7.0

    def test_pid_order_follows_first_encounter(self, sample_document):
        stats = fold_measurements(sample_document["measurements"])
        assert list(stats) == [100, 200, 300, 400]


@pytest.mark.unit
class TestClassification:
    """Test cases for high-load and critical classification."""

    def test_default_thresholds(self, sample_document):
        result = analyze(sample_document)

        assert [p.pid for p in result.high_load_processes] == [400, 100, 200]
        assert [p.pid for p in result.critical_processes] == [400, 100]

    def test_worker_scenario(self, worker_document):
        options = ReportOptions(cpu_warning_threshold=80, cpu_critical_threshold=90)

        result = analyze(worker_document, options)

        assert len(result.high_load_processes) == 1
        assert len(result.critical_processes) == 1
        worker = result.critical_processes[0]
        assert worker.pid == 100
        assert worker.max_cpu == 95.0
        assert worker.avg_cpu == 62.5
        assert result.high_load_processes[0] is worker

    def test_threshold_is_inclusive(self):
        document = {"measurements": [_measurement("t", _sample(1, 80.0), _sample(2, 79.9))]}

        result = analyze(document, ReportOptions(cpu_warning_threshold=80, cpu_critical_threshold=80))

        assert [p.pid for p in result.high_load_processes] == [1]
        assert [p.pid for p in result.critical_processes] == [1]

    @pytest.mark.parametrize(
        "warning,critical",
        [(80, 90), (90, 80), (0, 100), (100, 0), (50, 50)],
    )
    def test_critical_is_subset_of_high_load(self, sample_document, warning, critical):
        result = analyze(
            sample_document,
            ReportOptions(cpu_warning_threshold=warning, cpu_critical_threshold=critical),
        )

        high_ids = [id(p) for p in result.high_load_processes]
        assert all(id(p) in high_ids for p in result.critical_processes)
        # Same relative order as the high-load list.
        assert [high_ids.index(id(p)) for p in result.critical_processes] == sorted(
            high_ids.index(id(p)) for p in result.critical_processes
        )

    def test_inverted_thresholds_mark_every_high_load_process_critical(self, sample_document):
        result = analyze(
            sample_document, ReportOptions(cpu_warning_threshold=90, cpu_critical_threshold=50)
        )

        assert [p.pid for p in result.high_load_processes] == [400, 100]
        assert result.critical_processes == result.high_load_processes

    def test_sorted_descending_and_stable_on_ties(self):
        document = {
            "measurements": [
                _measurement("t1", _sample(5, 85.0), _sample(6, 99.0), _sample(7, 85.0)),
                _measurement("t2", _sample(8, 85.0), _sample(9, 90.0)),
            ]
        }

        result = analyze(document)
        peaks = [p.max_cpu for p in result.high_load_processes]

        assert peaks == sorted(peaks, reverse=True)
        assert [p.pid for p in result.high_load_processes] == [6, 9, 5, 7, 8]


@pytest.mark.unit
class TestLoadMetrics:
    """Test cases for load average and per-core load."""

    def test_load_per_core(self, sample_document):
        result = analyze(sample_document)

        assert result.load_average == (2.0, 1.5, 1.0)
        assert result.cpu_cores == 4
        assert result.load_per_core == 0.5

    def test_malformed_load_average(self):
        document = {"system_info": {"cpu_cores": 2, "load_average": "abc"}, "measurements": []}

        result = analyze(document)

        assert result.load_average == (0.0, 0.0, 0.0)
        assert result.load_per_core == 0

    @pytest.mark.parametrize("cores", [0, -4, None, "many", 2.7, "2.7", float("inf")])
    def test_invalid_core_count_defaults_to_one(self, cores):
        document = {
            "system_info": {"cpu_cores": cores, "load_average": "3.0 2.0 1.0"},
            "measurements": [],
        }

        result = analyze(document)

        assert result.cpu_cores == 1
        assert result.load_per_core == 3.0

    def test_missing_system_info(self):
        result = analyze({"measurements": []})

        assert result.cpu_cores == 1
        assert result.load_average == (0.0, 0.0, 0.0)
        assert result.load_per_core == 0.0

    def test_camel_case_keys_are_accepted(self):
        document = {
            "systemInfo": {"cpuCores": 8, "loadAverage": "4.0 3.0 2.0"},
            "measurements": [],
        }

        result = analyze(document)

        assert result.cpu_cores == 8
        assert result.load_per_core == 0.5


@pytest.mark.unit
class TestDocumentEdgeCases:
    """Test cases for empty and malformed documents."""

    def test_empty_measurements(self, empty_document):
        result = analyze(empty_document)

        assert result.total_processes == 0
        assert result.high_load_processes == ()
        assert result.critical_processes == ()
        assert result.time_range == TimeRange(start=None, end=None)
        assert result.measurement_count == 0

    def test_time_range(self, sample_document):
        result = analyze(sample_document)

        assert result.time_range.start == "2025-06-22 17:46:17"
        assert result.time_range.end == "2025-06-22 17:46:27"

    @pytest.mark.parametrize("measurements", [None, "[]", {"a": 1}, 42])
    def test_malformed_measurements_raise(self, measurements):
        document = {"measurements": measurements}

        with pytest.raises(ValidationError) as exc_info:
            analyze(document)

        assert "measurements" in str(exc_info.value)
        assert exc_info.value.field_name == "measurements"

    def test_missing_measurements_raise(self):
        with pytest.raises(ValidationError):
            analyze({"system_info": {"cpu_cores": 4}})

    def test_bad_measurements_contribute_nothing(self):
        document = {
            "measurements": [
                {"timestamp": "t1"},
                {"timestamp": "t2", "processes": "not a list"},
                "garbage",
                _measurement("t4", _sample(1, 85.0)),
            ]
        }

        result = analyze(document)

        assert result.total_processes == 1
        assert result.measurement_count == 4
        assert result.time_range.start == "t1"
        assert result.time_range.end == "t4"
        assert result.high_load_processes[0].timestamps == ["t4"]

    def test_bad_samples_are_skipped(self):
        measurement = _measurement(
            "t",
            "not a sample",
            {"cpu": 99.0, "command": "no pid"},
            {"pid": 2, "cpu": "n/a"},
            {"pid": float("inf"), "cpu": 50.0},
            {"pid": float("nan"), "cpu": 50.0},
            {"pid": 3, "cpu": "12.5"},
            {"pid": 4, "cpu": 20.0},
        )

        samples = list(iter_samples(measurement))

        assert [s["pid"] for s in samples] == [3, 4]
        assert samples[0]["cpu"] == 12.5
        assert samples[1]["mem"] == 0.0
        assert samples[1]["command"] == ""

    def test_analyze_does_not_mutate_document(self, sample_document):
        import copy

        original = copy.deepcopy(sample_document)

        analyze(sample_document)

        assert sample_document == original

    def test_repeated_calls_are_independent(self, sample_document, worker_document):
        first = analyze(sample_document)
        analyze(worker_document)
        second = analyze(sample_document)

        assert first.to_dict() == second.to_dict()

    def test_integral_float_core_count_is_kept(self):
        document = {"system_info": {"cpu_cores": 4.0, "load_average": "2.0"}, "measurements": []}

        assert analyze(document).cpu_cores == 4

    def test_overflowing_pid_from_json_is_skipped(self):
        document = parse_document(
            '{"measurements": [{"timestamp": "t", "processes": ['
            '{"pid": 1e400, "cpu": 5}, {"pid": Infinity, "cpu": 7}, {"pid": 3, "cpu": 9}]}]}'
        )

        result = analyze(document)

        assert result.total_processes == 1
        assert list(fold_measurements(document["measurements"])) == [3]
