"""
Reachability prober.
Single-attempt TCP connects with a hard timeout, plus a bounded worker pool
for sweeping a subnet. Negative outcomes are results, never exceptions.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, Optional
from ipaddress import IPv4Address

from loguru import logger


ProbeFunc = Callable[[str, int, float], Awaitable[bool]]


async def probe_tcp(host: str, port: int, timeout: float) -> bool:
    """Return True only if a TCP connection completes within `timeout` seconds."""
    try:
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.debug(f"TCP {host}:{port} timed out after {timeout:.3f}s")
        return False
    except OSError as e:
        logger.debug(f"TCP {host}:{port} failed: {e}")
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass  # peer reset during close; the connect itself succeeded
    return True


class _LaunchLimiter:
    """Spaces probe launches at least 1/rate seconds apart."""

    def __init__(self, rate_per_sec: float):
        self.interval = 1.0 / rate_per_sec if rate_per_sec > 0 else 0.0
        self._lock = asyncio.Lock()
        self._next_slot = 0.0

    async def wait(self):
        if not self.interval:
            return
        async with self._lock:
            now = asyncio.get_running_loop().time()
            if self._next_slot > now:
                await asyncio.sleep(self._next_slot - now)
                now = self._next_slot
            self._next_slot = now + self.interval


class SubnetSweeper:
    """Counts how many addresses accept a TCP connection on `port`."""

    def __init__(
        self,
        port: int = 80,
        timeout: float = 0.4,
        max_concurrent: int = 32,
        rate_per_sec: float = 200,
        probe: Optional[ProbeFunc] = None,
    ):
        self.port = port
        self.timeout = timeout
        self.max_concurrent = max(1, max_concurrent)
        self.rate_per_sec = rate_per_sec
        self.probe = probe or probe_tcp

    async def count_reachable(self, addresses: Iterable[IPv4Address]) -> int:
        """Probe every address with a fixed-size worker pool; only the total is kept."""
        pending = iter(addresses)
        limiter = _LaunchLimiter(self.rate_per_sec)

        async def worker() -> int:
            found = 0
            for ip in pending:
                await limiter.wait()
                if await self.probe(str(ip), self.port, self.timeout):
                    logger.debug(f"Host {ip} answered on port {self.port}")
                    found += 1
            return found

        counts = await asyncio.gather(*(worker() for _ in range(self.max_concurrent)))
        return sum(counts)
