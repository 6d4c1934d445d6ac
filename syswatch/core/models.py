"""
Shared data models for the diagnosis engine.
NetDiagnosis is frozen: one instance per run, never mutated afterwards.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Sequence, Tuple


class ComponentState(Enum):
    """Health of a probed component."""
    UP = "Up"
    DEGRADED = "Degraded"   # reserved, no probe produces it yet
    DOWN = "Down"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


class WifiReading(NamedTuple):
    """Wireless association state as reported by a WirelessProbe."""
    state: ComponentState
    ssid: Optional[str] = None
    signal_dbm: Optional[int] = None


UNKNOWN_WIFI = WifiReading(ComponentState.UNKNOWN, None, None)


@dataclass(frozen=True)
class NetDiagnosis:
    """Result of a single diagnosis run."""
    interface_up: ComponentState
    wifi_on: ComponentState
    ssid: Optional[str]
    signal_dbm: Optional[int]
    ap_reachable: ComponentState      # gateway proxy, no AP-layer probe exists
    gateway_reachable: ComponentState
    lan_hosts_reachable: int
    dns_ok: ComponentState
    external_connect_ms: Optional[int]
    http_ok: ComponentState
    passive_bytes_seen: Optional[int]
    confidence: float
    notes: Tuple[str, ...] = ()

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0.0, 1.0], got {self.confidence}")
        if self.lan_hosts_reachable < 0:
            raise ValueError(f"lan_hosts_reachable cannot be negative: {self.lan_hosts_reachable}")

    @classmethod
    def assemble(
        cls,
        *,
        interface_up: ComponentState,
        wifi: WifiReading,
        gateway_reachable: ComponentState,
        lan_hosts_reachable: int,
        confidence: float,
        notes: Sequence[str] = (),
        ap_reachable: Optional[ComponentState] = None,
    ) -> "NetDiagnosis":
        """
        Build a diagnosis from stage outcomes.

        Every field is set here exactly once; checks that are not implemented
        (DNS, HTTP, external connect, passive capture) get their reserved
        defaults. ap_reachable mirrors gateway_reachable unless given.
        """
        return cls(
            interface_up=interface_up,
            wifi_on=wifi.state,
            ssid=wifi.ssid,
            signal_dbm=wifi.signal_dbm,
            ap_reachable=gateway_reachable if ap_reachable is None else ap_reachable,
            gateway_reachable=gateway_reachable,
            lan_hosts_reachable=lan_hosts_reachable,
            dns_ok=ComponentState.UNKNOWN,
            external_connect_ms=None,
            http_ok=ComponentState.UNKNOWN,
            passive_bytes_seen=None,
            confidence=confidence,
            notes=tuple(notes),
        )

    @property
    def is_terminal(self) -> bool:
        """True when the run stopped early because no interface was found."""
        return self.interface_up == ComponentState.DOWN

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, ComponentState):
                data[key] = value.value
        data["notes"] = list(self.notes)
        return data
