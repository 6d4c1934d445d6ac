from .models import ComponentState, WifiReading, NetDiagnosis
from .settings import Settings
from .interfaces import collect_interfaces, InterfaceCollectionError
from .wireless import WirelessProbe, detect_wifi, select_wireless_probe, percent_to_dbm
from .prober import probe_tcp, SubnetSweeper
from .diagnosis import NetworkDiagnoser, diagnose
from .report import render, render_json

__all__ = [
    'ComponentState',
    'WifiReading',
    'NetDiagnosis',
    'Settings',
    'collect_interfaces',
    'InterfaceCollectionError',
    'WirelessProbe',
    'detect_wifi',
    'select_wireless_probe',
    'percent_to_dbm',
    'probe_tcp',
    'SubnetSweeper',
    'NetworkDiagnoser',
    'diagnose',
    'render',
    'render_json',
]
