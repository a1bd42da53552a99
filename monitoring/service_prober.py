"""
Service Prober
Asks the OS service manager whether a named service is running.
"""
import logging
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeCommand:
    """How to query one platform's service manager."""
    argv_prefix: Sequence[str]
    answer_codes: Sequence[int]
    is_running: Callable[[str], bool]

    def argv(self, service_name: str) -> list:
        return [*self.argv_prefix, service_name]


# sc exits non-zero for unknown services (1060) or access errors
WINDOWS_SC = ProbeCommand(
    argv_prefix=("sc", "query"),
    answer_codes=(0,),
    is_running=lambda output: "RUNNING" in output,
)

# systemctl is-active: 0 = active, 3 = inactive/failed; 4 = no such unit
SYSTEMD = ProbeCommand(
    argv_prefix=("systemctl", "is-active"),
    answer_codes=(0, 3),
    is_running=lambda output: output.strip() == "active",
)


def default_probe_command() -> ProbeCommand:
    return WINDOWS_SC if sys.platform.startswith("win") else SYSTEMD


class ServiceProber:
    """Check whether services are running.

    Any failure to query is treated as "running" so transient probe errors
    never turn into alert storms.
    """

    def __init__(self, command: ProbeCommand = None, timeout: int = 10):
        self.command = command or default_probe_command()
        self.timeout = timeout

    def is_running(self, service_name: str) -> bool:
        argv = self.command.argv(service_name)
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error("Timed out after %ss checking service %s", self.timeout, service_name)
            return True
        except Exception as e:
            logger.error("Failed to check status of service %s: %s", service_name, e)
            return True

        if result.returncode not in self.command.answer_codes:
            logger.error(
                "Failed to check status of service %s: %s exited with %s (%s)",
                service_name,
                " ".join(argv),
                result.returncode,
                (result.stderr or result.stdout or "").strip(),
            )
            return True

        return self.command.is_running(result.stdout or "")
