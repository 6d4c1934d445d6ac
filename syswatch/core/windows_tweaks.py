"""
Windows UI/privacy recommendations.

Reads a handful of HKCU values and reports whether the recommended setting is
already applied. Read-only; nothing is ever written to the registry.
"""

import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger


SEARCH_KEY = r"Software\Microsoft\Windows\CurrentVersion\Search"
ADVANCED_KEY = r"Software\Microsoft\Windows\CurrentVersion\Explorer\Advanced"

# value name -> key it lives under
_VALUES = {
    "BingSearchEnabled": SEARCH_KEY,
    "CortanaConsent": SEARCH_KEY,
    "TaskbarDa": ADVANCED_KEY,
}


@dataclass(frozen=True)
class Recommendation:
    title: str
    applied: Optional[bool]   # None: settings could not be read
    detail: str


class RegistryValues:
    """Snapshot of the DWORDs we care about; a missing key maps to KEY_MISSING."""

    KEY_MISSING = object()

    def __init__(self, values: Dict[str, object]):
        self.values = values

    def key_readable(self, name: str) -> bool:
        return self.values.get(name) is not self.KEY_MISSING

    def get(self, name: str) -> Optional[int]:
        value = self.values.get(name)
        return None if value is self.KEY_MISSING else value


def read_registry() -> RegistryValues:
    """Read the relevant values from HKEY_CURRENT_USER (Windows only)."""
    if sys.platform != "win32":
        raise OSError("Windows registry is only available on Windows")

    import winreg

    values: Dict[str, object] = {}
    for name, path in _VALUES.items():
        try:
            key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, path)
        except OSError as e:
            logger.debug(f"Cannot open HKCU\\{path}: {e}")
            values[name] = RegistryValues.KEY_MISSING
            continue
        try:
            values[name], _ = winreg.QueryValueEx(key, name)
        except OSError:
            values[name] = None
        finally:
            winreg.CloseKey(key)
    return RegistryValues(values)


def evaluate(registry: RegistryValues) -> List[Recommendation]:
    """Turn registry values into recommendations."""
    recs: List[Recommendation] = []

    title = "Disable Bing web search and Cortana from Windows Search"
    if not registry.key_readable("BingSearchEnabled"):
        recs.append(Recommendation(title, None, "Could not read Search settings."))
    elif registry.get("BingSearchEnabled") == 0 and registry.get("CortanaConsent") == 0:
        recs.append(Recommendation(title, True, "Done"))
    else:
        recs.append(Recommendation(title, False, "Bing web search or Cortana is still enabled."))

    title = "Disable News and Interests menu"
    if not registry.key_readable("TaskbarDa"):
        recs.append(Recommendation(title, None, "Could not read taskbar settings."))
    elif registry.get("TaskbarDa") == 0:
        recs.append(Recommendation(title, True, "News & Interests (weather/news hover menu) is disabled."))
    else:
        recs.append(Recommendation(title, False, "News & Interests is still enabled."))

    return recs


def render_recommendations(recs: List[Recommendation]) -> str:
    lines = ["Windows recommended settings:"]
    for rec in recs:
        if rec.applied is None:
            lines.append(f"WARNING: {rec.detail}")
            continue
        lines.append(f"RECOMMENDATION: {rec.title}:")
        mark = "[x]" if rec.applied else "[ ]"
        lines.append(f"     {mark} {rec.detail}")
    return "\n".join(lines) + "\n"
