"""
Configuration validation utilities.

This module turns the raw TOML tables into validated configuration models.
Every key is optional; missing keys take the model defaults.
"""

import logging
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    CollectConfig,
    ExportConfig,
    OUTPUT_FORMATS,
    ReportOptions,
)
from ..validation import (
    ValidationError,
    validate_boolean,
    validate_enum_choice,
    validate_positive_float,
    validate_positive_integer,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
COMPRESSIONS = ["snappy", "gzip", "brotli", "lz4", "zstd"]


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name, {})
    if not isinstance(section, dict):
        raise ValidationError(f"[{name}] must be a table", field_name=name, value=section)
    return section


def validate_report_options(report_data: Dict[str, Any]) -> ReportOptions:
    """
    Validate the [report] table.

    Args:
        report_data: Raw report settings from TOML

    Returns:
        Validated ReportOptions instance

    Raises:
        ValidationError: If validation fails
    """
    defaults = ReportOptions()
    return ReportOptions(
        cpu_warning_threshold=validate_positive_float(
            report_data.get("cpu_warning_threshold", defaults.cpu_warning_threshold),
            min_value=0.0,
            field_name="report.cpu_warning_threshold",
        ),
        cpu_critical_threshold=validate_positive_float(
            report_data.get("cpu_critical_threshold", defaults.cpu_critical_threshold),
            min_value=0.0,
            field_name="report.cpu_critical_threshold",
        ),
        include_recommendations=validate_boolean(
            report_data.get("include_recommendations", defaults.include_recommendations),
            field_name="report.include_recommendations",
        ),
        output_format=validate_enum_choice(
            report_data.get("output_format", defaults.output_format),
            choices=OUTPUT_FORMATS,
            field_name="report.output_format",
            case_sensitive=False,
        ),
    )


def validate_collect_config(collect_data: Dict[str, Any]) -> CollectConfig:
    """Validate the [collect] table."""
    defaults = CollectConfig()
    return CollectConfig(
        interval_seconds=validate_positive_float(
            collect_data.get("interval_seconds", defaults.interval_seconds),
            min_value=0.1,
            max_value=3600.0,
            field_name="collect.interval_seconds",
        ),
        measurement_count=validate_positive_integer(
            collect_data.get("measurement_count", defaults.measurement_count),
            min_value=1,
            max_value=10000,
            field_name="collect.measurement_count",
        ),
        top_processes=validate_positive_integer(
            collect_data.get("top_processes", defaults.top_processes),
            min_value=1,
            field_name="collect.top_processes",
        ),
        cpu_threshold=validate_positive_float(
            collect_data.get("cpu_threshold", defaults.cpu_threshold),
            min_value=0.0,
            field_name="collect.cpu_threshold",
        ),
    )


def validate_app_config(config_data: Dict[str, Any]) -> AppConfig:
    """
    Validate a complete parsed config.toml.

    Args:
        config_data: Parsed TOML document

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If any section is invalid
    """
    general = _section(config_data, "general")
    export = _section(config_data, "export")

    log_level = validate_enum_choice(
        general.get("log_level", "INFO"),
        choices=LOG_LEVELS,
        field_name="general.log_level",
        case_sensitive=False,
    )
    compression = validate_enum_choice(
        export.get("compression", ExportConfig().compression),
        choices=COMPRESSIONS,
        field_name="export.compression",
    )

    app_config = AppConfig(
        log_level=log_level,
        report=validate_report_options(_section(config_data, "report")),
        collect=validate_collect_config(_section(config_data, "collect")),
        export=ExportConfig(compression=compression),
    )
    if app_config.report.cpu_critical_threshold < app_config.report.cpu_warning_threshold:
        logger.warning(
            "report.cpu_critical_threshold is below report.cpu_warning_threshold; "
            "every high-load process will be reported as critical"
        )
    return app_config
