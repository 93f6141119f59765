"""Current Wi-Fi network lookup via NetworkManager or wireless-tools."""

import logging
import subprocess
from typing import Optional


logger = logging.getLogger(__name__)

BACKENDS = ('nmcli', 'iwgetid')


def strip_ssid_quotes(ssid: str) -> str:
    """Remove the line ending and quote characters tools add around an SSID."""
    return ssid.strip("\r\n").replace('"', '')


class NetworkMonitor:
    """Queries the SSID of the currently associated Wi-Fi network."""

    def __init__(self, backend: str = 'nmcli', interface: str = ""):
        """
        Initialize network monitor.

        Args:
            backend: 'nmcli' (NetworkManager) or 'iwgetid'
            interface: Wireless interface name (empty = any)
        """
        if backend not in BACKENDS:
            raise ValueError(f"Unknown network backend: {backend}")
        self.backend = backend
        self.interface = interface

    def _build_command(self) -> list[str]:
        if self.backend == 'iwgetid':
            cmd = ['iwgetid', '--raw']
            if self.interface:
                cmd.append(self.interface)
            return cmd

        cmd = ['nmcli', '-t', '-f', 'ACTIVE,SSID', 'device', 'wifi', 'list']
        if self.interface:
            cmd.extend(['ifname', self.interface])
        # A listing may otherwise start a Wi-Fi scan
        cmd.extend(['--rescan', 'no'])
        return cmd

    def _run_command(self, cmd: list[str]) -> Optional[str]:
        """
        Execute a lookup command.

        Returns:
            Command stdout, or None on failure
        """
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=5
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            # iwgetid exits non-zero when not associated
            logger.debug(f"Command failed: {' '.join(cmd)}\n{e.stderr or e.stdout}")
            return None
        except subprocess.TimeoutExpired:
            logger.error(f"Command timed out: {' '.join(cmd)}")
            return None
        except FileNotFoundError:
            logger.error(f"Command not found: {cmd[0]}")
            return None

    def _parse_nmcli(self, output: str) -> Optional[str]:
        for line in output.splitlines():
            # Terse output escapes ':' inside fields as '\:'
            active, sep, ssid = line.partition(':')
            if sep and active == 'yes':
                ssid = strip_ssid_quotes(ssid.replace('\\:', ':'))
                return ssid or None
        return None

    def get_current_ssid(self) -> Optional[str]:
        """
        Get the SSID of the connected network.

        Returns:
            SSID without quotes, or None if not connected
        """
        output = self._run_command(self._build_command())
        if output is None:
            return None

        if self.backend == 'nmcli':
            ssid = self._parse_nmcli(output)
        else:
            ssid = strip_ssid_quotes(output) or None

        logger.debug(f"Current SSID: {ssid}")
        return ssid
