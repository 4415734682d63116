"""Unit tests for LogKeeper.

Tests level gating, the dispatcher, fatal paths, mail hooks and the
synchronized setters.

Author: Odiseo
Version: 1.0.0
"""

from __future__ import annotations

import os
import re
import signal
import threading
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from logkeeper import keeper as keeper_module
from logkeeper.core.exceptions import InvalidLevelError
from logkeeper.core.levels import Level
from logkeeper.keeper import LogKeeper, RawWriter
from logkeeper.models.mail_config import MailConfig

LINE_RE = re.compile(r"^\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2} \[(DEBUG|INFO|WARN|ERROR|FATAL)\] .*$")


def read_log(path: str) -> list[str]:
    return Path(path).read_text().splitlines()


class TestLevels:
    """Tests for threshold gating and level entry points."""

    def test_threshold_drops_lower_levels(self, make_keeper, log_path):
        """Records below the threshold never reach the file."""
        keeper = make_keeper(level="WARN")
        keeper.debug("d")
        keeper.info("i")
        keeper.warn("w")
        keeper.error("e")
        keeper.flush()

        lines = read_log(log_path)
        assert [line.split(" ", 2)[2] for line in lines] == ["[WARN] w", "[ERROR] e"]

    def test_disabled_level_skips_rendering(self, make_keeper):
        """Arguments below the threshold are never converted to text."""
        keeper = make_keeper(level="ERROR")
        arg = MagicMock()
        arg.__str__ = MagicMock(return_value="x")

        keeper.log(Level.INFO, arg)
        keeper.logf(Level.DEBUG, "%s", arg)

        arg.__str__.assert_not_called()
        assert keeper.enabled_for(Level.ERROR)
        assert not keeper.enabled_for(Level.WARN)

    def test_print_style_join(self, make_keeper, log_path):
        """Arguments are joined with single spaces."""
        keeper = make_keeper()
        keeper.info("port", 8080, None)
        keeper.flush()

        assert read_log(log_path)[0].endswith("[INFO] port 8080 None")

    def test_format_style(self, make_keeper, log_path):
        """The f-variants apply printf-style formatting."""
        keeper = make_keeper()
        keeper.warnf("retry %s in %.1fs", "upload", 2.5)
        keeper.debugf("100%")
        keeper.flush()

        lines = read_log(log_path)
        assert lines[0].endswith("[WARN] retry upload in 2.5s")
        assert lines[1].endswith("[DEBUG] 100%")

    def test_format_error_still_logged(self, make_keeper, log_path):
        """A bad format string is logged instead of raising."""
        keeper = make_keeper()
        keeper.errorf("%d items", "many")
        keeper.flush()

        assert "%d items" in read_log(log_path)[0]

    def test_every_line_well_formed(self, make_keeper, log_path):
        """Each level produces one header-prefixed line."""
        keeper = make_keeper()
        keeper.debug("a")
        keeper.infof("b")
        keeper.warning("c")
        keeper.errorf("%s", "d")
        keeper.flush()

        lines = read_log(log_path)
        assert len(lines) == 4
        assert all(LINE_RE.match(line) for line in lines)

    def test_set_level(self, make_keeper, log_path):
        """Raising the threshold at runtime filters later records."""
        keeper = make_keeper()
        keeper.set_level(Level.ERROR)
        keeper.warn("hidden")
        keeper.error("shown")
        keeper.flush()

        assert keeper.level is Level.ERROR
        assert len(read_log(log_path)) == 1

    def test_invalid_level_rejected(self, make_keeper):
        """An out-of-range level raises and leaves the threshold alone."""
        keeper = make_keeper(level="INFO")
        with pytest.raises(InvalidLevelError):
            keeper.set_level(7)
        assert keeper.level is Level.INFO


class TestConcurrency:
    """Tests for concurrent writers."""

    def test_records_written_once_and_whole(self, make_keeper, log_path):
        """Concurrent records are neither lost, duplicated nor interleaved."""
        keeper = make_keeper()

        def worker(tid: int) -> None:
            for i in range(200):
                keeper.infof("thread %d record %d", tid, i)

        threads = [threading.Thread(target=worker, args=(t,)) for t in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        keeper.flush()

        lines = read_log(log_path)
        assert len(lines) == 8 * 200
        assert all(LINE_RE.match(line) for line in lines)
        messages = {line.split("[INFO] ", 1)[1] for line in lines}
        assert messages == {f"thread {t} record {i}" for t in range(8) for i in range(200)}


class TestOutput:
    """Tests for console echo, flush and file output switches."""

    def test_flush_idempotent(self, make_keeper, log_path):
        """Repeated flushes do not duplicate data."""
        keeper = make_keeper()
        keeper.info("once")
        keeper.flush()
        keeper.flush()

        assert len(read_log(log_path)) == 1

    def test_console_echo(self, make_keeper, capsys):
        """Records are echoed to stderr unless the console is disabled."""
        keeper = make_keeper(console_disabled=False)
        keeper.info("visible")

        assert "[INFO] visible\n" in capsys.readouterr().err

    def test_console_disabled(self, make_keeper, capsys):
        """No echo when the console is disabled."""
        keeper = make_keeper()
        keeper.info("quiet")

        assert "quiet" not in capsys.readouterr().err

    def test_file_disabled(self, make_keeper, log_path, capsys):
        """With file output off only the echo remains."""
        keeper = make_keeper(file_disabled=True, console_disabled=False)
        keeper.info("console only")
        keeper.flush()

        assert not os.path.exists(log_path)
        assert "console only" in capsys.readouterr().err

    def test_toggle_file_output(self, make_keeper, log_path):
        """Disabling closes the file; enabling resumes appending."""
        keeper = make_keeper()
        keeper.info("before")
        keeper.set_file_output_disabled(True)
        keeper.info("while disabled")
        keeper.set_file_output_disabled(False)
        keeper.info("after")
        keeper.flush()

        messages = [line.split("[INFO] ", 1)[1] for line in read_log(log_path)]
        assert messages == ["before", "after"]

    def test_set_path(self, make_keeper, log_path, tmp_path):
        """Switching paths flushes the old file and opens the new one."""
        keeper = make_keeper()
        keeper.info("old")
        new_path = str(tmp_path / "other" / "new.log")
        keeper.set_path(new_path)
        keeper.info("new")
        keeper.flush()

        assert read_log(log_path)[0].endswith("old")
        assert read_log(new_path)[0].endswith("new")
        assert keeper.config.path == new_path

    def test_call_info(self, make_keeper, log_path):
        """Call-site capture names this test file."""
        keeper = make_keeper()
        keeper.set_call_info(True)
        keeper.set_short_path(True)
        keeper.info("where")
        keeper.flush()

        line = read_log(log_path)[0]
        assert re.search(r"\[unit/test_keeper\.py:\d+\] where$", line)

    def test_explicit_call_site(self, make_keeper, log_path):
        """emit accepts a call site instead of walking the stack."""
        keeper = make_keeper(call_info=True)
        keeper.emit(Level.ERROR, "from elsewhere", call_site=("/srv/jobs/run.py", 12))
        keeper.flush()

        assert read_log(log_path)[0].endswith("[ERROR] [/srv/jobs/run.py:12] from elsewhere")


class TestRawWriter:
    """Tests for the file-like writer."""

    def test_write_text(self, make_keeper, log_path):
        """Text written through the handle lands in the log file."""
        keeper = make_keeper()
        out = keeper.writer()
        print("subprocess output", file=out)
        out.flush()

        assert isinstance(out, RawWriter)
        assert read_log(log_path) == ["subprocess output"]

    def test_write_bytes(self, make_keeper, log_path):
        """Bytes are written unchanged."""
        keeper = make_keeper()
        assert keeper.writer().write(b"raw bytes\n") == len(b"raw bytes\n")
        keeper.flush()

        assert read_log(log_path) == ["raw bytes"]


class TestFatal:
    """Tests for fatal logging and fatal I/O errors."""

    def test_fatal_terminates_with_status_1(self, make_keeper, log_path, terminate):
        """fatal writes the record, flushes and exits 1."""
        keeper = make_keeper()
        keeper.fatal("cannot continue")

        terminate.assert_called_once_with(1)
        assert read_log(log_path)[0].endswith("[FATAL] cannot continue")

    def test_fatalf(self, make_keeper, log_path, terminate):
        """fatalf formats before exiting."""
        keeper = make_keeper()
        keeper.fatalf("lost %d workers", 3)

        terminate.assert_called_once_with(1)
        assert read_log(log_path)[0].endswith("[FATAL] lost 3 workers")

    def test_open_failure_is_fatal(self, make_keeper, tmp_path, terminate, capsys):
        """A log file that cannot be created ends the process."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        keeper = make_keeper(path=str(blocker / "app.log"))

        keeper.info("lost record")

        terminate.assert_called_once_with(1)
        err = capsys.readouterr().err
        assert "Exiting because of error" in err
        assert "lost record" in err

    def test_write_failure_mails_file(self, make_keeper, log_path, mail_config, mail_transport, terminate):
        """A write error flushes what it can and mails the file."""
        keeper = make_keeper(mail_transport=mail_transport, mail_enabled=True, mail=mail_config)
        keeper.info("last good record")

        with patch.object(keeper._engine, "append", side_effect=OSError("No space left on device")):
            keeper.info("doomed")

        terminate.assert_called_once_with(1)
        mail_transport.assert_called_once()
        _, name, body = mail_transport.call_args[0]
        assert name == "app.log"
        assert "last good record" in body


class TestMail:
    """Tests for mail hooks."""

    def test_mail_on_rotation(self, make_keeper, log_path, mail_config, mail_transport):
        """A size rotation mails the file being closed."""
        keeper = make_keeper(
            mail_transport=mail_transport,
            mail_enabled=True,
            mail=mail_config,
            max_size=200,
        )
        keeper.info("a" * 100)
        keeper.info("b" * 100)

        mail_transport.assert_called_once()
        mail, name, body = mail_transport.call_args[0]
        assert mail == mail_config
        assert name == "app.log"
        assert "a" * 100 in body
        assert "b" * 100 not in body

    def test_no_mail_when_disabled(self, make_keeper, mail_transport):
        """Rotation does not mail while mail is disabled."""
        keeper = make_keeper(mail_transport=mail_transport, max_size=200)
        keeper.info("a" * 100)
        keeper.info("b" * 100)

        mail_transport.assert_not_called()

    def test_send_log_mail(self, make_keeper, mail_config, mail_transport):
        """An explicit request mails the flushed current file."""
        keeper = make_keeper(mail_transport=mail_transport, mail_enabled=True, mail=mail_config)
        keeper.info("on demand")

        assert keeper.send_log_mail() is True
        assert "on demand" in mail_transport.call_args[0][2]

    def test_send_log_mail_without_file(self, make_keeper, mail_config, mail_transport):
        """Nothing is sent before the first record opened a file."""
        keeper = make_keeper(mail_transport=mail_transport, mail_enabled=True, mail=mail_config)

        assert keeper.send_log_mail() is False
        mail_transport.assert_not_called()

    def test_incomplete_mail_config_is_fatal(self, make_keeper, terminate, capsys):
        """Enabling mail with missing settings exits with status 1."""
        make_keeper(mail_enabled=True, mail=MailConfig(host="smtp.test.com"))

        terminate.assert_called_once_with(1)
        assert "incomplete" in capsys.readouterr().err

    def test_set_mail_enabled_checks_config(self, make_keeper, terminate):
        """Turning mail on at runtime validates the settings."""
        keeper = make_keeper()
        keeper.set_mail_enabled(True)

        terminate.assert_called_once_with(1)
        assert keeper.config.mail_enabled is False

    def test_set_mail_config_and_recipients(self, make_keeper, mail_config, mail_transport):
        """Mail settings can be replaced at runtime."""
        keeper = make_keeper(mail_transport=mail_transport)
        keeper.set_mail_config(mail_config)
        keeper.set_mail_recipients(["oncall@test.com"])
        keeper.set_mail_enabled(True)
        keeper.info("x")

        assert keeper.send_log_mail() is True
        assert mail_transport.call_args[0][0].recipients == ["oncall@test.com"]


class TestRotationHooks:
    """Tests for day-change side effects."""

    def test_day_change_starts_one_sweep(self, make_keeper, log_path):
        """Only the first record of a new day starts a retention sweep."""
        keeper = make_keeper(max_storage_days=7)
        keeper.info("today")

        with patch("logkeeper.keeper.start_sweep") as mock_sweep:
            keeper.write(b"2999/01/01 00:00:00 [INFO] first of the day\n")
            keeper.write(b"2999/01/01 00:00:01 [INFO] second of the day\n")

        mock_sweep.assert_called_once_with(os.path.dirname(log_path), ".log", 7)


class TestSetters:
    """Tests for synchronized setters and snapshots."""

    def test_numeric_setters(self, make_keeper):
        """Size, retention and interval setters update the config."""
        keeper = make_keeper()
        keeper.set_max_size(4096)
        keeper.set_max_storage_days(-1)
        keeper.set_flush_interval(timedelta(seconds=2))

        config = keeper.config
        assert config.max_size == 4096
        assert config.max_storage_days == -1
        assert config.flush_interval == 2.0

    def test_zero_setters_use_defaults(self, make_keeper):
        """Zero values fall back to defaults."""
        keeper = make_keeper(max_size=100)
        keeper.set_max_size(0)
        assert keeper.config.max_size == 256 * 1024 * 1024

    def test_storage_days_zero_uses_default(self, make_keeper):
        """Zero storage days restores the 60-day window; negative disables."""
        keeper = make_keeper(max_storage_days=5)
        keeper.set_max_storage_days(0)
        assert keeper.config.max_storage_days == 60

        keeper.set_max_storage_days(-1)
        assert keeper.config.max_storage_days == -1

    def test_config_is_snapshot(self, make_keeper):
        """Mutating the returned config does not affect the logger."""
        keeper = make_keeper()
        snapshot = keeper.config
        snapshot.max_size = 1

        assert keeper.config.max_size != 1

    def test_constructor_copies_config(self, make_config):
        """The caller's config object is not shared with the logger."""
        config = make_config()
        with LogKeeper(config) as keeper:
            config.call_info = True
            assert keeper.config.call_info is False


def wait_called(mock, timeout: float = 5.0) -> bool:
    pause = threading.Event()
    for _ in range(int(timeout / 0.01)):
        if mock.called:
            return True
        pause.wait(0.01)
    return mock.called


class TestShutdown:
    """Tests for the signal shutdown path."""

    def test_sigterm_logs_flushes_and_exits_0(self, make_keeper, log_path, terminate):
        """A termination signal leaves a WARN record and exits cleanly."""
        keeper = make_keeper(handle_signals=True)
        keeper.info("working")

        os.kill(os.getpid(), signal.SIGTERM)

        assert wait_called(terminate)
        terminate.assert_called_once_with(0)
        lines = read_log(log_path)
        assert lines[0].endswith("[INFO] working")
        assert lines[-1].endswith("[WARN] Exit by SIGTERM")

    def test_sigterm_flushes_every_logger(self, make_keeper, tmp_path, terminate):
        """Independent loggers are all flushed before the single exit."""
        path_a = str(tmp_path / "a" / "a.log")
        path_b = str(tmp_path / "b" / "b.log")
        a = make_keeper(path=path_a, handle_signals=True)
        b = make_keeper(path=path_b, handle_signals=True)
        a.info("record in a")
        b.info("record in b")

        os.kill(os.getpid(), signal.SIGTERM)

        assert wait_called(terminate)
        terminate.assert_called_once_with(0)
        for path, text in ((path_a, "record in a"), (path_b, "record in b")):
            lines = read_log(path)
            assert lines[0].endswith(text)
            assert lines[-1].endswith("[WARN] Exit by SIGTERM")

    def test_hook_installed_when_enabled(self, make_keeper):
        """handle_signals installs the shared hook from the main thread."""
        make_keeper(handle_signals=True)

        assert signal.getsignal(signal.SIGTERM) == keeper_module._signal_hook._handle_signal

    def test_hook_survives_closing_another_logger(self, make_keeper):
        """Closing one logger keeps the handlers for the others."""
        first = make_keeper(handle_signals=True)
        second = make_keeper(handle_signals=True)

        first.close()

        assert signal.getsignal(signal.SIGTERM) == keeper_module._signal_hook._handle_signal
        second.close()

    def test_close_restores_handlers(self, make_keeper):
        """Closing the last registered logger restores the previous handlers."""
        before = signal.getsignal(signal.SIGTERM)
        keeper = make_keeper(handle_signals=True)
        keeper.close()

        assert signal.getsignal(signal.SIGTERM) == before
        assert not keeper._signals_registered

    def test_background_flush(self, make_keeper, log_path):
        """The daemon flushes without an explicit call."""
        keeper = make_keeper(flush_interval=0.01)
        keeper.info("eventually on disk")

        pause = threading.Event()
        for _ in range(500):
            if os.path.exists(log_path) and Path(log_path).read_text():
                break
            pause.wait(0.01)
        lines = read_log(log_path)
        assert len(lines) == 1
        assert lines[0].endswith("eventually on disk")
