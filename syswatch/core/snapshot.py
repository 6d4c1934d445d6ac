"""
One-shot system snapshot: CPU, memory, first disk and the busiest processes.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional

import psutil
from loguru import logger


@dataclass(frozen=True)
class ProcessSample:
    name: str
    cpu_percent: float
    memory_mb: int


@dataclass(frozen=True)
class DiskSample:
    mountpoint: str
    free_gb: int
    total_gb: int


@dataclass(frozen=True)
class SystemSnapshot:
    cpu_percent: float
    memory_used_mb: int
    memory_total_mb: int
    disk: Optional[DiskSample]
    top_processes: List[ProcessSample] = field(default_factory=list)

    @property
    def memory_percent(self) -> float:
        if self.memory_total_mb == 0:
            return 0.0
        return self.memory_used_mb / self.memory_total_mb * 100


def _first_disk() -> Optional[DiskSample]:
    partitions = psutil.disk_partitions(all=False)
    if not partitions:
        return None
    mount = partitions[0].mountpoint
    try:
        usage = psutil.disk_usage(mount)
    except OSError as e:
        logger.warning(f"Could not read disk usage for {mount}: {e}")
        return None
    gb = 1024 ** 3
    return DiskSample(mountpoint=mount, free_gb=usage.free // gb, total_gb=usage.total // gb)


def _top_processes(limit: int, interval: float) -> List[ProcessSample]:
    procs = []
    for proc in psutil.process_iter(['name']):
        try:
            proc.cpu_percent(None)  # first call only primes the counter
            procs.append(proc)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue

    time.sleep(interval)

    samples: List[ProcessSample] = []
    for proc in procs:
        try:
            samples.append(ProcessSample(
                name=proc.info.get('name') or f"pid {proc.pid}",
                cpu_percent=proc.cpu_percent(None),
                memory_mb=proc.memory_info().rss // (1024 * 1024),
            ))
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue

    samples.sort(key=lambda s: s.cpu_percent, reverse=True)
    return samples[:limit]


def take_snapshot(top: int = 5, interval: float = 0.5) -> SystemSnapshot:
    """Sample the host once."""
    cpu = psutil.cpu_percent(interval=interval)
    memory = psutil.virtual_memory()
    mb = 1024 * 1024
    return SystemSnapshot(
        cpu_percent=cpu,
        memory_used_mb=(memory.total - memory.available) // mb,
        memory_total_mb=memory.total // mb,
        disk=_first_disk(),
        top_processes=_top_processes(top, interval),
    )


def render_snapshot(snapshot: SystemSnapshot, online: Optional[bool] = None) -> str:
    lines = [f"CPU Usage: {snapshot.cpu_percent:.1f}%"]
    lines.append(
        f"Memory Usage: {snapshot.memory_used_mb}/{snapshot.memory_total_mb} MB "
        f"({snapshot.memory_percent:.1f}%)"
    )
    if snapshot.disk is not None:
        lines.append(f"Disk: {snapshot.disk.free_gb} GB free / {snapshot.disk.total_gb} GB total")
    if online is not None:
        lines.append(f"Network: {'Online' if online else 'Offline'}")

    lines.append("")
    lines.append("Top Processes (by CPU):")
    for proc in snapshot.top_processes:
        lines.append(f"{proc.name:<30} CPU: {proc.cpu_percent:>5.1f}%   Memory: {proc.memory_mb} MB")
    return "\n".join(lines) + "\n"
