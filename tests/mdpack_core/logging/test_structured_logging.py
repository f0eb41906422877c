"""结构化日志测试"""

import io
import json

import pytest
from loguru import logger

from mdpack.core.logging import LogConfig, StructuredLogger, configure_logging, current_trace_id, log_context


@pytest.fixture()
def stream():
    buffer = io.StringIO()
    configure_logging("DEBUG", console_stream=buffer)
    yield buffer
    configure_logging()


def _records(buffer):
    return [json.loads(text) for text in buffer.getvalue().splitlines()]


class TestStructuredLogging:
    """测试JSON日志输出"""

    def test_payload_fields(self, stream):
        logger.bind(resource="sse.d1", error_code="OUTPUT_IO_ERROR").error("cannot open")

        (record,) = _records(stream)
        assert record["level"] == "ERROR"
        assert record["message"] == "cannot open"
        assert record["resource"] == "sse.d1"
        assert record["error_code"] == "OUTPUT_IO_ERROR"
        assert record["trace_id"]

    def test_context_propagates_resource_and_trace(self, stream):
        with log_context(trace_id="abc123", resource="szse.m5", folder="/data"):
            logger.info("inside")
            assert current_trace_id() == "abc123"
        logger.info("outside")

        inside, outside = _records(stream)
        assert inside["trace_id"] == "abc123"
        assert inside["resource"] == "szse.m5"
        assert inside["context"] == {"folder": "/data"}
        assert outside["resource"] is None
        assert outside["trace_id"] != "abc123"

    def test_level_filter(self, stream):
        configure_logging("WARNING", console_stream=stream)
        logger.info("hidden")
        logger.warning("shown")
        assert [record["message"] for record in _records(stream)] == ["shown"]

    def test_file_output(self, tmp_path):
        path = tmp_path / "logs" / "mdpack.log"
        structured = StructuredLogger(
            LogConfig(level="INFO", console_output=False, file_output=True, file_path=str(path))
        )
        try:
            with structured.context(resource="sse.wt") as trace_id:
                structured.logger.info("written")
        finally:
            configure_logging()

        (record,) = [json.loads(text) for text in path.read_text().splitlines()]
        assert record["message"] == "written"
        assert record["trace_id"] == trace_id
        assert record["resource"] == "sse.wt"


def test_public_surface():
    import mdpack.core.logging as logging_package

    assert set(logging_package.__all__) == {
        "LogConfig",
        "StructuredLogger",
        "configure_logging",
        "current_trace_id",
        "log_context",
        "logger",
    }
