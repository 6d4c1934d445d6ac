"""
Network Diagnoser - single-shot local network health check.

Flow:
  1. Collect non-loopback interface addresses (fatal if the OS refuses)
  2. Detect wireless state (always, even when no interface exists)
  3. No interface -> terminal result, nothing is probed
  4. Probe the gateway on TCP/80
  5. Optionally sweep a subnet with a bounded worker pool
  6. Assemble the immutable NetDiagnosis

Confidence is a heuristic, not a measurement: an interface-absence verdict
(0.9) is treated as more certain than a full probe sweep (0.8).
"""

import ipaddress
import time
from typing import Callable, List, Optional, Sequence, Union

from loguru import logger

from .interfaces import IPAddress, collect_interfaces
from .models import ComponentState, NetDiagnosis, WifiReading
from .prober import ProbeFunc, SubnetSweeper, probe_tcp
from .settings import Settings
from .wireless import WirelessProbe, detect_wifi, select_wireless_probe


EARLY_EXIT_CONFIDENCE = 0.9
FULL_RUN_CONFIDENCE = 0.8

GatewayArg = Union[ipaddress.IPv4Address, str, None]


class NetworkDiagnoser:
    """Runs the diagnosis pipeline with injectable collaborators."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        wireless_probe: Optional[WirelessProbe] = None,
        interface_collector: Optional[Callable[[], Sequence[IPAddress]]] = None,
        prober: Optional[ProbeFunc] = None,
    ):
        self.settings = settings or Settings()
        self.local_timeout = self.settings.local_timeout
        self.port = int(self.settings.get('probe_port', 80))

        self.wireless_probe = wireless_probe or select_wireless_probe(timeout=self.settings.wifi_timeout)
        self.collect_interfaces = interface_collector or collect_interfaces
        self.probe = prober or probe_tcp
        self.sweeper = SubnetSweeper(
            port=self.port,
            timeout=self.local_timeout,
            max_concurrent=int(self.settings.get('sweep_concurrency', 32)),
            rate_per_sec=float(self.settings.get('sweep_rate_per_sec', 200)),
            probe=self.probe,
        )

    # ──────────────────────────────────────────────────────────────────
    # Main entry
    # ──────────────────────────────────────────────────────────────────

    async def diagnose(self, gateway: GatewayArg = None, subnet: Optional[str] = None) -> NetDiagnosis:
        t0 = time.monotonic()
        gateway_ip = _parse_gateway(gateway)

        # ── 1. Interfaces ───────────────────────────────────────────────
        addresses = self.collect_interfaces()
        interface_up = ComponentState.UP if addresses else ComponentState.DOWN

        # ── 2. Wi-Fi ────────────────────────────────────────────────────
        wifi = await detect_wifi(self.wireless_probe)

        # ── 3. Early exit ───────────────────────────────────────────────
        if interface_up == ComponentState.DOWN:
            logger.info("No usable interface → skipping reachability probes")
            return self._interface_down_result(wifi)

        # ── 4. Gateway ──────────────────────────────────────────────────
        notes: List[str] = []
        gateway_reachable = await self._check_gateway(gateway_ip, notes)

        # ── 5. Subnet sweep ─────────────────────────────────────────────
        lan_hosts_reachable = 0
        if subnet is not None:
            lan_hosts_reachable = await self._sweep_subnet(subnet, gateway_ip, notes)

        result = NetDiagnosis.assemble(
            interface_up=interface_up,
            wifi=wifi,
            gateway_reachable=gateway_reachable,
            lan_hosts_reachable=lan_hosts_reachable,
            confidence=FULL_RUN_CONFIDENCE,
            notes=notes,
        )
        logger.info(
            f"diagnose {time.monotonic() - t0:.2f}s → interface={interface_up} "
            f"wifi={wifi.state} gateway={gateway_reachable} lan_hosts={lan_hosts_reachable}"
        )
        return result

    # ──────────────────────────────────────────────────────────────────
    # Stages
    # ──────────────────────────────────────────────────────────────────

    def _interface_down_result(self, wifi: WifiReading) -> NetDiagnosis:
        notes = ["No non-loopback interfaces with addresses detected"]
        if wifi.state != ComponentState.UP:
            notes.append("No Wi-Fi interface or radio appears off")
        return NetDiagnosis.assemble(
            interface_up=ComponentState.DOWN,
            wifi=wifi,
            gateway_reachable=ComponentState.DOWN,
            ap_reachable=ComponentState.UNKNOWN,
            lan_hosts_reachable=0,
            confidence=EARLY_EXIT_CONFIDENCE,
            notes=notes,
        )

    async def _check_gateway(self, gateway: Optional[ipaddress.IPv4Address], notes: List[str]) -> ComponentState:
        if gateway is None:
            notes.append("No gateway provided")
            return ComponentState.UNKNOWN

        if await self.probe(str(gateway), self.port, self.local_timeout):
            logger.debug(f"Gateway {gateway} answered on port {self.port}")
            return ComponentState.UP

        notes.append(f"Gateway {gateway} not reachable on port {self.port}")
        return ComponentState.DOWN

    async def _sweep_subnet(
        self,
        subnet: str,
        gateway: Optional[ipaddress.IPv4Address],
        notes: List[str],
    ) -> int:
        try:
            network = ipaddress.IPv4Network(subnet, strict=False)
        except ValueError:
            logger.warning(f"Invalid subnet string: {subnet!r}")
            notes.append(f"Invalid subnet string: {subnet}")
            return 0

        # the broadcast address is swept too; only the network identity and gateway are skipped
        targets = (ip for ip in network if ip != network.network_address and ip != gateway)
        logger.info(
            f"Sweeping {network} on port {self.port} "
            f"({self.sweeper.max_concurrent} workers, {self.sweeper.rate_per_sec:g}/s)"
        )
        found = await self.sweeper.count_reachable(targets)
        logger.info(f"Sweep of {network} → {found} host(s) reachable")
        return found


def _parse_gateway(gateway: GatewayArg) -> Optional[ipaddress.IPv4Address]:
    if gateway is None or isinstance(gateway, ipaddress.IPv4Address):
        return gateway
    return ipaddress.IPv4Address(gateway.strip())


async def diagnose(
    gateway: GatewayArg = None,
    subnet: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> NetDiagnosis:
    """Run one diagnosis with the platform's default collaborators."""
    return await NetworkDiagnoser(settings).diagnose(gateway, subnet)
