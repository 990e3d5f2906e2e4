"""Tests for console.py module."""

from unittest.mock import patch

from kube_pod_exec import console


class TestConsoleOutput:
    """Tests for console output functions."""

    def test_warning_message(self):
        """Test warning message format."""
        with patch.object(console.console, "print") as mock_print:
            console.warning("Be careful")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "⚠" in call_arg
            assert "Be careful" in call_arg

    def test_error_message(self):
        """Test error message format."""
        with patch.object(console.console, "print") as mock_print:
            console.error("Something failed")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "✗" in call_arg
            assert "Something failed" in call_arg

    def test_step_message(self):
        """Test step message format."""
        with patch.object(console.console, "print") as mock_print:
            console.step("Sub-step here")
            mock_print.assert_called_once()
            call_arg = mock_print.call_args[0][0]
            assert "•" in call_arg
            assert "Sub-step here" in call_arg


class TestConsoleTarget:
    """Tests for where diagnostics are written."""

    def test_console_writes_to_stderr(self):
        """Test diagnostics never go to stdout."""
        assert console.console.stderr is True

    def test_highlight(self):
        """Test highlight markup wrapping."""
        assert console.highlight("dev") == "[highlight]dev[/highlight]"
