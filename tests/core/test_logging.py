"""
Tests for the logging setup

Console lines carry the report-run id, and file output is split by category
with an error/ mirror and date-based cleanup.
"""

import json
import logging

import pytest

from src.agents.interplay.alerts import check_and_alert_critical_violations
from src.agents.interplay.output_analysis import OutputAnalysis
from src.core.logging import RunContext, get_logger, setup_logging
from src.core.logging import config as logging_config
from src.core.logging.formatters import JsonFormatter
from src.core.logging.handlers import cleanup_old_logs, detect_category


def read_category(log_dir, category):
    return "".join(
        path.read_text(encoding="utf-8")
        for path in sorted((log_dir / category).glob(f"{category}_*.log"))
    )


# ============================================================================
# TEST FIXTURES
# ============================================================================

@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_TO_FILE", "true")
    monkeypatch.setenv("LOG_FORMAT", "text")
    monkeypatch.setenv("ENV", "development")
    return tmp_path


@pytest.fixture
def configured_logging(log_dir, monkeypatch, capsys):
    """Run setup_logging against a temp LOG_DIR; undo it afterwards."""
    monkeypatch.setattr(logging_config, "_logging_initialized", False)
    root = logging.getLogger()
    level = root.level
    before = list(root.handlers)

    setup_logging(level="INFO", use_json=False, console=True)
    added = [h for h in root.handlers if h not in before]

    yield log_dir

    for handler in added:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


# ============================================================================
# CONSOLE
# ============================================================================

class TestConsoleOutput:
    """Run id prefix on the development console format"""

    def test_line_inside_run_carries_run_id(self, configured_logging, capsys):
        logger = get_logger("console_check", category="pipeline")

        with RunContext(run_id="3f9c1a2b-5d6e-4f70-8a9b-0c1d2e3f4a5b"):
            logger.info("[ORCHESTRATOR] Report started")
        logger.info("[ORCHESTRATOR] Outside any run")

        lines = capsys.readouterr().out.splitlines()
        started = [line for line in lines if "Report started" in line]
        outside = [line for line in lines if "Outside any run" in line]
        assert len(started) == 1
        assert "| [3f9c1a2b] [ORCHESTRATOR] Report started" in started[0]
        assert "pipeline.console_check" in started[0]
        assert "[3f9c1a2b]" not in outside[0]

    def test_json_formatter_includes_run_id(self):
        record = logging.LogRecord("interplay.scout", logging.INFO, __file__, 1, "Triage done", None, None)

        with RunContext(run_id="abc12345"):
            entry = json.loads(JsonFormatter().format(record))

        assert entry["run_id"] == "abc12345"
        assert entry["logger"] == "interplay.scout"
        assert entry["message"] == "Triage done"


# ============================================================================
# FILE ROUTING
# ============================================================================

class TestFileRouting:
    """Category files under LOG_DIR"""

    @pytest.mark.parametrize("logger_name,category", [
        ("interplay.alerts", "alert"),
        ("src.agents.interplay.constraint_validation", "alert"),
        ("src.agents.interplay.metrics.ReportMetricsBuilder", "performance"),
        ("src.agents.interplay.sem_agent.SEMAgent", "agent"),
        ("src.agents.interplay.scout", "pipeline"),
        ("httpx", "app"),
    ])
    def test_detect_category(self, logger_name, category):
        assert detect_category(logger_name) == category

    def test_alerts_go_to_alert_file(self, configured_logging):
        with RunContext(run_id="7d3e9f10"):
            alerts = check_and_alert_critical_violations(OutputAnalysis(roas_mentions=2), "lead-gen", "report-9")

        assert [a.code for a in alerts] == ["LEADGEN_ROAS_LEAK"]
        alert_text = read_category(configured_logging, "alert")
        assert "[7d3e9f10] [ALERT] LEADGEN_ROAS_LEAK" in alert_text
        assert "LEADGEN_ROAS_LEAK" not in read_category(configured_logging, "pipeline")

    def test_errors_are_mirrored(self, configured_logging):
        logger = get_logger("orchestrator_mirror_check", category="pipeline")

        logger.error("[ORCHESTRATOR] Report failed: boom")
        logger.info("[ORCHESTRATOR] Report completed")

        pipeline_text = read_category(configured_logging, "pipeline")
        error_text = read_category(configured_logging, "error")
        assert "Report failed: boom" in pipeline_text
        assert "Report completed" in pipeline_text
        assert "Report failed: boom" in error_text
        assert "Report completed" not in error_text


# ============================================================================
# RETENTION
# ============================================================================

class TestCleanup:
    """Dated files past retention are deleted"""

    def test_old_files_removed(self, log_dir):
        alert_dir = log_dir / "alert"
        alert_dir.mkdir()
        (alert_dir / "alert_2020-01-01.log").write_text("old", encoding="utf-8")
        (alert_dir / "alert_2999-01-01.log").write_text("future", encoding="utf-8")
        (alert_dir / "notes.log").write_text("undated", encoding="utf-8")

        assert cleanup_old_logs(retention_days=15) == 1
        assert sorted(p.name for p in alert_dir.iterdir()) == ["alert_2999-01-01.log", "notes.log"]
