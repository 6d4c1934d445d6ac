"""
Report rendering for NetDiagnosis.
"""

import json
from typing import List

from .models import NetDiagnosis


HEADER = "=== Network Diagnosis Report ==="
FOOTER = "=" * len(HEADER)


def render(diag: NetDiagnosis) -> str:
    """Human-readable report; absent optional fields are left out entirely."""
    lines: List[str] = [HEADER]
    lines.append(f"Interface: {diag.interface_up}")
    lines.append(f"Wi-Fi: {diag.wifi_on}")

    if diag.ssid is not None:
        lines.append(f"SSID: {diag.ssid}")
    if diag.signal_dbm is not None:
        lines.append(f"Signal Strength: {diag.signal_dbm} dBm")

    lines.append(f"Access Point Reachable (via gateway): {diag.ap_reachable}")
    lines.append(f"Gateway Reachable: {diag.gateway_reachable}")
    lines.append(f"LAN Hosts Reachable: {diag.lan_hosts_reachable}")
    lines.append(f"DNS OK: {diag.dns_ok}")

    if diag.external_connect_ms is not None:
        lines.append(f"External Connect Time: {diag.external_connect_ms} ms")
    lines.append(f"HTTP OK: {diag.http_ok}")

    if diag.passive_bytes_seen is not None:
        lines.append(f"Passive Bytes Seen: {diag.passive_bytes_seen}")

    lines.append(f"Confidence: {diag.confidence:.1f}")

    if diag.notes:
        lines.append("Notes:")
        lines.extend(f"  - {note}" for note in diag.notes)

    lines.append(FOOTER)
    return "\n".join(lines) + "\n"


def render_json(diag: NetDiagnosis) -> str:
    return json.dumps(diag.to_dict(), indent=2) + "\n"
