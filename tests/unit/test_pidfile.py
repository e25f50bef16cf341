"""Unit tests for read_pid_file."""

import pytest
from procwarden.exceptions import InvalidPidFile
from procwarden.system.pidfile import read_pid_file


class TestReadPidFile:
    """Tests for PID file parsing."""

    @pytest.mark.parametrize("content", ["4242", "4242\n", "  4242 \n\n", "\t4242"])
    def test_strips_surrounding_whitespace(self, pid_file, content):
        assert read_pid_file(pid_file(content)) == 4242

    def test_accepts_string_path(self, pid_file):
        assert read_pid_file(str(pid_file("17"))) == 17

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidPidFile, match="does not exist"):
            read_pid_file(tmp_path / "absent.pid")

    @pytest.mark.parametrize("content", ["", "abc", "12 34", "4.2"])
    def test_non_numeric_content(self, pid_file, content):
        with pytest.raises(InvalidPidFile, match="not an integer"):
            read_pid_file(pid_file(content))

    @pytest.mark.parametrize("content", ["0", "-5"])
    def test_non_positive_pid(self, pid_file, content):
        with pytest.raises(InvalidPidFile, match="not a valid process id"):
            read_pid_file(pid_file(content))

    def test_error_keeps_path(self, tmp_path):
        path = tmp_path / "absent.pid"
        with pytest.raises(InvalidPidFile) as exc_info:
            read_pid_file(path)

        assert exc_info.value.path == path
