"""
Wireless detector.

Each platform gets its own WirelessProbe. The helper tools report state as
plain text, so parsing lives in pure functions that can be tested against
captured output. Detection never raises: missing data becomes Unknown/None.
"""

import asyncio
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .models import ComponentState, WifiReading, UNKNOWN_WIFI


_DEFAULT_HELPER_TIMEOUT = 5.0


# ----------------------------------------------------------------------
# Pure parsing helpers
# ----------------------------------------------------------------------

def percent_to_dbm(percent: int) -> int:
    """Map signal quality to a rough dBm estimate: 100% -> -50, 0% -> -100."""
    pct = max(0, min(100, int(percent)))
    return -100 + (pct * 50) // 100


def reading_from(ssid: Optional[str], percent: Optional[int]) -> WifiReading:
    """Wi-Fi is Up if the helper gave us anything at all."""
    state = ComponentState.UP if (ssid is not None or percent is not None) else ComponentState.UNKNOWN
    dbm = percent_to_dbm(percent) if percent is not None else None
    return WifiReading(state, ssid, dbm)


def parse_netsh_output(text: str) -> Tuple[Optional[str], Optional[int]]:
    """
    Extract (ssid, signal percent) from `netsh wlan show interfaces`.

    Lines look like `    SSID                   : HomeNet`. Only lines that
    start with "SSID" count, so "BSSID" and "AP BSSID" never match.
    Later interfaces overwrite earlier ones.
    """
    ssid: Optional[str] = None
    percent: Optional[int] = None

    for line in text.splitlines():
        trimmed = line.strip()
        if ":" not in trimmed:
            continue
        value = trimmed.split(":", 1)[1].strip()

        if trimmed.startswith("SSID"):
            if value and value != "not available":
                ssid = value
        elif trimmed.startswith("Signal"):
            try:
                percent = int(value.rstrip("%").strip())
            except ValueError:
                logger.debug(f"Unparsable netsh signal value: {value!r}")

    return ssid, percent


def _split_nmcli_fields(line: str) -> List[str]:
    """Split a terse nmcli row; `\\:` and `\\\\` escapes are read left to right."""
    fields: List[str] = []
    current: List[str] = []
    chars = iter(line)
    for ch in chars:
        if ch == "\\":
            current.append(next(chars, ""))
        elif ch == ":":
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def parse_nmcli_output(text: str) -> Tuple[Optional[str], Optional[int]]:
    """
    Extract (ssid, signal percent) for the active row of
    `nmcli -t -f ACTIVE,SSID,SIGNAL dev wifi`.
    """
    for line in text.splitlines():
        fields = _split_nmcli_fields(line.strip())
        if len(fields) < 3:
            continue
        active, ssid, signal = fields[0], fields[1], fields[2]
        if active.lower() not in {"yes", "true", "*"}:
            continue
        try:
            percent: Optional[int] = int(signal)
        except ValueError:
            percent = None
        return (ssid or None), percent
    return None, None


# ----------------------------------------------------------------------
# Helper process
# ----------------------------------------------------------------------

async def run_helper(args: Sequence[str], timeout: float) -> Optional[str]:
    """Run a helper tool and return its stdout, or None if it could not run."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as e:
        logger.debug(f"{args[0]} unavailable: {e}")
        return None

    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug(f"{args[0]} did not answer within {timeout}s; killing it")
        proc.kill()
        await proc.wait()
        return None

    if proc.returncode != 0:
        logger.debug(f"{args[0]} exited with {proc.returncode}; ignoring its output")
        return None
    return stdout.decode("utf-8", errors="replace")


# ----------------------------------------------------------------------
# Probes
# ----------------------------------------------------------------------

class WirelessProbe(ABC):
    """Reads wireless association state for the current platform."""

    @abstractmethod
    async def read(self) -> WifiReading:
        """Return the current reading; must not raise for missing data."""


class UnknownWirelessProbe(WirelessProbe):
    """Used where no platform-specific path exists."""

    async def read(self) -> WifiReading:
        return UNKNOWN_WIFI


class CommandWirelessProbe(WirelessProbe):
    """Runs a helper tool and parses its text output."""

    command: Tuple[str, ...] = ()

    def __init__(self, timeout: float = _DEFAULT_HELPER_TIMEOUT):
        self.timeout = timeout

    @abstractmethod
    def parse(self, text: str) -> Tuple[Optional[str], Optional[int]]:
        """Turn helper output into (ssid, signal percent)."""

    async def read(self) -> WifiReading:
        text = await run_helper(self.command, self.timeout)
        if text is None:
            return UNKNOWN_WIFI
        ssid, percent = self.parse(text)
        reading = reading_from(ssid, percent)
        logger.debug(f"{self.command[0]}: state={reading.state} ssid={reading.ssid!r} dbm={reading.signal_dbm}")
        return reading


class NetshWirelessProbe(CommandWirelessProbe):
    """Windows: `netsh wlan show interfaces`."""

    command = ("netsh", "wlan", "show", "interfaces")

    def parse(self, text: str) -> Tuple[Optional[str], Optional[int]]:
        return parse_netsh_output(text)


class NmcliWirelessProbe(CommandWirelessProbe):
    """Linux with NetworkManager: terse `nmcli dev wifi` listing."""

    command = ("nmcli", "-t", "-f", "ACTIVE,SSID,SIGNAL", "dev", "wifi")

    def parse(self, text: str) -> Tuple[Optional[str], Optional[int]]:
        return parse_nmcli_output(text)


def select_wireless_probe(platform: Optional[str] = None, timeout: float = _DEFAULT_HELPER_TIMEOUT) -> WirelessProbe:
    """Pick the probe for a platform string as found in sys.platform."""
    platform = platform or sys.platform
    if platform == "win32":
        return NetshWirelessProbe(timeout=timeout)
    if platform.startswith("linux"):
        return NmcliWirelessProbe(timeout=timeout)
    return UnknownWirelessProbe()


async def detect_wifi(probe: Optional[WirelessProbe] = None) -> WifiReading:
    """Best-effort wireless detection; never raises for missing data."""
    probe = probe or select_wireless_probe()
    return await probe.read()
