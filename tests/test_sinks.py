"""Tests for diagnostic sinks"""

import io
import logging

import pytest

from retryables.infrastructure.sinks import (
    DISCARD,
    DiagnosticSink,
    LoggerSink,
    NullSink,
    SinkFactory,
    StreamSink,
)


class TestNullSink:
    def test_discard_is_shared_null_sink(self):
        """Test the shared default is a NullSink"""
        assert isinstance(DISCARD, NullSink)
        assert isinstance(DISCARD, DiagnosticSink)
        DISCARD.write("ignored")


class TestStreamSink:
    """Tests for StreamSink"""

    def test_appends_newline_terminated_lines(self):
        """Test each write appends one line"""
        stream = io.StringIO()
        sink = StreamSink(stream)

        sink.write("Attempt 1/3 failed: boom")
        sink.write("Attempt 2/3 failed: boom")

        assert stream.getvalue() == "Attempt 1/3 failed: boom\nAttempt 2/3 failed: boom\n"

    def test_defaults_to_stderr(self, capsys):
        """Test the default stream is stderr"""
        StreamSink().write("to stderr")
        assert capsys.readouterr().err == "to stderr\n"

    def test_stdout_target_resolved_at_write_time(self, capsys):
        """Test the stdout target honours stream swaps made after creation"""
        sink = SinkFactory.create("stdout")
        sink.write("to stdout")
        assert capsys.readouterr().out == "to stdout\n"

    def test_unknown_target(self):
        """Test unknown stream targets are rejected"""
        with pytest.raises(ValueError, match="Unknown stream target"):
            StreamSink(target="stdlog")

    def test_rejects_non_writable(self):
        """Test objects without write() are rejected"""
        with pytest.raises(ValueError, match="write"):
            StreamSink(object())


class TestLoggerSink:
    """Tests for LoggerSink"""

    def test_logs_at_configured_level(self, caplog):
        """Test lines are emitted on the given logger and level"""
        sink = LoggerSink(logging.getLogger("retryables.test"), level="INFO")

        with caplog.at_level(logging.INFO, logger="retryables.test"):
            sink.write("Attempt 1/2 failed: boom")

        assert caplog.records[-1].levelno == logging.INFO
        assert caplog.records[-1].getMessage() == "Attempt 1/2 failed: boom"

    def test_default_level_is_warning(self):
        """Test default level"""
        assert LoggerSink().level == logging.WARNING

    def test_unknown_level(self):
        """Test unknown level names are rejected"""
        with pytest.raises(ValueError, match="Unknown log level"):
            LoggerSink(level="LOUD")


class TestSinkFactory:
    """Tests for SinkFactory"""

    def test_null(self):
        assert SinkFactory.create("null") is DISCARD

    def test_stream_kinds(self):
        """Test stderr and stdout sinks"""
        assert isinstance(SinkFactory.create("stderr"), StreamSink)
        assert isinstance(SinkFactory.create("STDOUT"), StreamSink)

    def test_logging(self):
        """Test logging sink honours logger_name and level"""
        sink = SinkFactory.create("logging", {"logger_name": "app.retry", "level": "ERROR"})

        assert isinstance(sink, LoggerSink)
        assert sink.logger.name == "app.retry"
        assert sink.level == logging.ERROR

    def test_unknown_sink(self):
        """Test unknown sink kinds are rejected"""
        with pytest.raises(ValueError, match="Unknown diagnostic sink"):
            SinkFactory.create("syslog")
