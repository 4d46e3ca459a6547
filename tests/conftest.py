"""
Pytest configuration and shared fixtures for the procload test suite.

This module provides sample monitoring documents, configuration files and
other shared fixtures for all test modules.
"""

import json
import shutil
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fixed_now():
    """A fixed render time so reports are reproducible."""
    return datetime(2025, 6, 22, 18, 0, 0)


# ============================================================================
# Document Fixtures
# ============================================================================


def make_sample(pid: int, cpu: float, command: str = "worker", mem: float = 1.0) -> Dict[str, Any]:
    return {"pid": pid, "cpu": cpu, "mem": mem, "time": "0:01", "command": command}


@pytest.fixture
def sample_document():
    """A monitoring document with three measurements and four processes."""
    return {
        "execution_timestamp": "2025-06-22T17:46:17",
        "system_info": {
            "cpu_cores": 4,
            "load_average": "2.00 1.50 1.00",
            "uptime": "3 days, 4:05",
        },
        "monitoring_config": {
            "cpu_threshold": 80,
            "interval_seconds": 5,
            "measurement_count": 3,
        },
        "measurements": [
            {
                "timestamp": "2025-06-22 17:46:17",
                "processes": [
                    make_sample(100, 10.0, "python train.py", mem=5.0),
                    make_sample(200, 85.0, "node server.js", mem=2.0),
                    make_sample(300, 1.0, "sshd"),
                ],
            },
            {
                "timestamp": "2025-06-22 17:46:22",
                "processes": [
                    make_sample(100, 50.0, "python train.py", mem=7.5),
                    make_sample(200, 82.0, "node server.js", mem=2.5),
                    make_sample(400, 95.0, "ffmpeg -i input.mp4", mem=3.0),
                ],
            },
            {
                "timestamp": "2025-06-22 17:46:27",
                "processes": [
                    make_sample(100, 90.0, "python train.py", mem=6.0),
                    make_sample(300, 2.0, "sshd"),
                ],
            },
        ],
    }


@pytest.fixture
def worker_document():
    """Two measurements of a single pid 100 at 30% then 95% CPU."""
    return {
        "execution_timestamp": "2025-06-22T17:46:17",
        "system_info": {"cpu_cores": 2, "load_average": "0.50 0.40 0.30", "uptime": "1:00"},
        "measurements": [
            {"timestamp": "t1", "processes": [make_sample(100, 30.0, "worker")]},
            {"timestamp": "t2", "processes": [make_sample(100, 95.0, "worker")]},
        ],
    }


@pytest.fixture
def empty_document():
    """A structurally valid document without any measurements."""
    return {"measurements": []}


@pytest.fixture
def document_file(temp_dir, sample_document):
    """Write the sample document to a JSON file."""
    path = temp_dir / "cpu_monitor_log_20250622_174617.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_file(temp_dir):
    """Create a temporary config.toml."""
    path = temp_dir / "config.toml"
    path.write_text(
        "\n".join([
            "[general]",
            'log_level = "WARNING"',
            "",
            "[report]",
            "cpu_warning_threshold = 50.0",
            "cpu_critical_threshold = 85.0",
            "include_recommendations = false",
            'output_format = "text"',
            "",
            "[collect]",
            "interval_seconds = 0.5",
            "measurement_count = 2",
            "top_processes = 3",
            "",
            "[export]",
            'compression = "zstd"',
            "",
        ]),
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def isolate_config(temp_dir):
    """Point the configuration at a missing file so built-in defaults apply."""
    from procload.config import clear_config_cache, set_config_path

    set_config_path(temp_dir / "missing-config.toml")

    yield

    clear_config_cache()
    set_config_path(Path(__file__).parent.parent / "conf" / "config.toml")
