import subprocess
from unittest.mock import MagicMock, patch

import pytest

from monitoring.service_prober import SYSTEMD, WINDOWS_SC, ServiceProber, default_probe_command

SC_RUNNING = """
SERVICE_NAME: XblGameSave
        TYPE               : 20  WIN32_SHARE_PROCESS
        STATE              : 4  RUNNING
                                (STOPPABLE, NOT_PAUSABLE, IGNORES_SHUTDOWN)
"""

SC_STOPPED = """
SERVICE_NAME: XblGameSave
        TYPE               : 20  WIN32_SHARE_PROCESS
        STATE              : 1  STOPPED
"""


@patch('monitoring.service_prober.subprocess.run')
def test_systemd_active_is_running(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout="active\n", stderr="")
    prober = ServiceProber(command=SYSTEMD, timeout=5)

    assert prober.is_running("nginx") is True
    mock_run.assert_called_once_with(
        ["systemctl", "is-active", "nginx"], capture_output=True, text=True, timeout=5
    )


@patch('monitoring.service_prober.subprocess.run')
def test_systemd_inactive_is_not_running(mock_run):
    mock_run.return_value = MagicMock(returncode=3, stdout="inactive\n", stderr="")
    assert ServiceProber(command=SYSTEMD).is_running("nginx") is False


@patch('monitoring.service_prober.subprocess.run')
def test_systemd_failed_is_not_running(mock_run):
    mock_run.return_value = MagicMock(returncode=3, stdout="failed\n", stderr="")
    assert ServiceProber(command=SYSTEMD).is_running("nginx") is False


@patch('monitoring.service_prober.subprocess.run')
def test_sc_query_running(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout=SC_RUNNING, stderr="")
    prober = ServiceProber(command=WINDOWS_SC)

    assert prober.is_running("XblGameSave") is True
    assert mock_run.call_args[0][0] == ["sc", "query", "XblGameSave"]


@patch('monitoring.service_prober.subprocess.run')
def test_sc_query_stopped(mock_run):
    mock_run.return_value = MagicMock(returncode=0, stdout=SC_STOPPED, stderr="")
    assert ServiceProber(command=WINDOWS_SC).is_running("XblGameSave") is False


@patch('monitoring.service_prober.subprocess.run')
def test_unknown_service_assumed_running(mock_run):
    mock_run.return_value = MagicMock(returncode=1060, stdout="", stderr="The specified service does not exist")
    assert ServiceProber(command=WINDOWS_SC).is_running("Nope") is True


@pytest.mark.parametrize("error", [
    FileNotFoundError("systemctl"),
    PermissionError("denied"),
    subprocess.TimeoutExpired(cmd="systemctl", timeout=10),
])
def test_probe_errors_assumed_running(error):
    with patch('monitoring.service_prober.subprocess.run', side_effect=error):
        assert ServiceProber(command=SYSTEMD).is_running("nginx") is True


def test_default_command_matches_platform():
    with patch('monitoring.service_prober.sys.platform', 'win32'):
        assert default_probe_command() is WINDOWS_SC
    with patch('monitoring.service_prober.sys.platform', 'linux'):
        assert default_probe_command() is SYSTEMD
