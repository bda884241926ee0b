"""Tests for the fallback package — platform notifiers and the chain."""

import base64
import subprocess
from unittest.mock import MagicMock, patch

from termnotify.fallback.chain import FallbackChain
from termnotify.fallback.linux import LinuxFallback
from termnotify.fallback.macos import MacOSFallback, _applescript_escape
from termnotify.fallback.windows import WindowsFallback, _ps_escape, build_script
from termnotify.osc.encode import Urgency
from tests.fakes.fallback import FakeFallback


def _ok(returncode: int = 0) -> MagicMock:
    return MagicMock(returncode=returncode)


class TestLinuxFallback:
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_available(self, _mock_system, _mock_which):
        assert LinuxFallback().is_available()

    @patch("termnotify.fallback.linux.shutil.which", return_value=None)
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_no_notify_send(self, _mock_system, _mock_which):
        assert not LinuxFallback().is_available()

    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Darwin")
    def test_wrong_os(self, _mock_system, mock_which):
        assert not LinuxFallback().is_available()
        mock_which.assert_not_called()

    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_availability_memoized(self, mock_system, _mock_which):
        fb = LinuxFallback()
        fb.is_available()
        fb.is_available()
        assert mock_system.call_count == 1
        fb.reset()
        fb.is_available()
        assert mock_system.call_count == 2

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok())
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_send_command(self, _mock_system, _mock_which, mock_run):
        assert LinuxFallback(timeout=3).send("body", "title", Urgency.CRITICAL)
        cmd = mock_run.call_args[0][0]
        assert cmd == [
            "/usr/bin/notify-send",
            "--urgency=critical",
            "--app-name=termnotify",
            "title",
            "body",
        ]
        assert mock_run.call_args.kwargs["timeout"] == 3

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok())
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_send_defaults(self, _mock_system, _mock_which, mock_run):
        LinuxFallback().send("body\x07")
        cmd = mock_run.call_args[0][0]
        assert "--urgency=normal" in cmd
        assert cmd[-2:] == ["Notification", "body"]

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok(1))
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_nonzero_exit(self, _mock_system, _mock_which, _mock_run):
        assert LinuxFallback().send("body") is False

    @patch(
        "termnotify.fallback.base.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="notify-send", timeout=1),
    )
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_timeout(self, _mock_system, _mock_which, _mock_run):
        assert LinuxFallback(timeout=1).send("body") is False

    @patch("termnotify.fallback.base.subprocess.run", side_effect=FileNotFoundError)
    @patch("termnotify.fallback.linux.shutil.which", return_value="/usr/bin/notify-send")
    @patch("termnotify.fallback.linux.platform.system", return_value="Linux")
    def test_os_error(self, _mock_system, _mock_which, _mock_run):
        assert LinuxFallback().send("body") is False

    @patch("termnotify.fallback.base.subprocess.run")
    @patch("termnotify.fallback.linux.platform.system", return_value="Windows")
    def test_unavailable_send_noop(self, _mock_system, mock_run):
        assert LinuxFallback().send("body") is False
        mock_run.assert_not_called()


class TestMacOSFallback:
    def test_applescript_escape(self):
        assert _applescript_escape('say "hi" \\o/') == 'say \\"hi\\" \\\\o/'

    @patch("termnotify.fallback.macos.shutil.which", return_value="/usr/bin/osascript")
    @patch("termnotify.fallback.macos.platform.system", return_value="Darwin")
    def test_available(self, _mock_system, _mock_which):
        assert MacOSFallback().is_available()

    @patch("termnotify.fallback.macos.platform.system", return_value="Linux")
    def test_wrong_os(self, _mock_system):
        assert not MacOSFallback().is_available()

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok())
    @patch("termnotify.fallback.macos.shutil.which", return_value="/usr/bin/osascript")
    @patch("termnotify.fallback.macos.platform.system", return_value="Darwin")
    def test_send_script(self, _mock_system, _mock_which, mock_run):
        assert MacOSFallback().send('Build "api" done', "CI")
        cmd = mock_run.call_args[0][0]
        assert cmd[:2] == ["/usr/bin/osascript", "-e"]
        assert cmd[2] == 'display notification "Build \\"api\\" done" with title "CI"'

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok())
    @patch("termnotify.fallback.macos.shutil.which", return_value="/usr/bin/osascript")
    @patch("termnotify.fallback.macos.platform.system", return_value="Darwin")
    def test_default_title(self, _mock_system, _mock_which, mock_run):
        MacOSFallback().send("body")
        assert 'with title "Notification"' in mock_run.call_args[0][0][2]


class TestWindowsFallback:
    def test_ps_escape(self):
        assert _ps_escape("it's") == "it''s"

    def test_build_script(self):
        script = build_script("can't stop", "it's $HOME")
        assert "$balloon.BalloonTipTitle = 'it''s $HOME'" in script
        assert "$balloon.BalloonTipText = 'can''t stop'" in script
        assert "ShowBalloonTip(5000)" in script

    @patch("termnotify.fallback.windows.shutil.which", return_value="C:\\ps\\powershell.exe")
    @patch("termnotify.fallback.windows.platform.system", return_value="Windows")
    def test_available_on_windows(self, _mock_system, _mock_which):
        assert WindowsFallback().is_available()

    @patch("termnotify.fallback.windows._is_wsl", return_value=True)
    @patch("termnotify.fallback.windows.shutil.which", return_value="/mnt/c/powershell.exe")
    @patch("termnotify.fallback.windows.platform.system", return_value="Linux")
    def test_available_on_wsl(self, _mock_system, _mock_which, _mock_wsl):
        assert WindowsFallback().is_available()

    @patch("termnotify.fallback.windows._is_wsl", return_value=False)
    @patch("termnotify.fallback.windows.platform.system", return_value="Linux")
    def test_plain_linux(self, _mock_system, _mock_wsl):
        assert not WindowsFallback().is_available()

    @patch("termnotify.fallback.base.subprocess.run", return_value=_ok())
    @patch("termnotify.fallback.windows.shutil.which", return_value="C:\\ps\\powershell.exe")
    @patch("termnotify.fallback.windows.platform.system", return_value="Windows")
    def test_send_encoded_command(self, _mock_system, _mock_which, mock_run):
        assert WindowsFallback().send("body", "title")
        cmd = mock_run.call_args[0][0]
        assert cmd[:4] == ["C:\\ps\\powershell.exe", "-NoProfile", "-NonInteractive",
                           "-EncodedCommand"]
        decoded = base64.b64decode(cmd[4]).decode("utf-16-le")
        assert decoded == build_script("body", "title")


class TestFallbackChain:
    def test_first_available_wins(self):
        a = FakeFallback(available=False, name="a")
        b = FakeFallback(available=True, name="b")
        c = FakeFallback(available=True, name="c")
        chain = FallbackChain([a, b, c])
        assert chain.get_available() is b
        assert chain.send("hi", "T", 2)
        assert b.sent == [("hi", "T", 2)]
        assert c.sent == []

    def test_none_available(self):
        chain = FallbackChain([FakeFallback(available=False)])
        assert chain.get_available() is None
        assert not chain.can_fallback()
        assert chain.send("hi") is False

    def test_empty_chain(self):
        assert FallbackChain([]).send("hi") is False

    def test_provider_failure_propagates(self):
        chain = FallbackChain([FakeFallback(available=True, result=False)])
        assert chain.send("hi") is False

    def test_register(self):
        chain = FallbackChain([])
        fake = FakeFallback()
        chain.register(fake)
        assert chain.providers == [fake]

    def test_default_order(self):
        chain = FallbackChain(timeout=2.5)
        assert [p.name for p in chain.providers] == ["linux", "macos", "windows"]
        assert all(p.timeout == 2.5 for p in chain.providers)

    def test_reset(self):
        fake = FakeFallback()
        chain = FallbackChain([fake])
        chain.can_fallback()
        chain.can_fallback()
        assert fake.checks == 1
        chain.reset()
        chain.can_fallback()
        assert fake.checks == 2
