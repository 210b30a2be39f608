import asyncio
import logging
from typing import Any, Optional

from src.drive.models import TransportMode
from src.drive.transport_protocol import TransportProtocol

logger = logging.getLogger(__name__)

RATE_LIMIT_ADVISORY = (
    "The GitHub server proxy appears to be missing. If you do not install it with "
    "application credentials, you are likely to be rate limited by GitHub very quickly"
)


class TransportSelector:
    """Chooses between the proxied and direct transports exactly once.

    The probe is a no-op request through the proxy. It is started at
    construction when an event loop is running, otherwise by the first call.
    Task creation never yields, so every early caller awaits the same task.
    A finished probe answers callers on any loop. A probe that never finished
    on its own loop (still pending elsewhere, or cancelled when that loop shut
    down) is started again on the caller's loop.
    """

    def __init__(self, proxied: TransportProtocol, direct: TransportProtocol):
        self.proxied = proxied
        self.direct = direct
        self._probe: Optional["asyncio.Task[TransportMode]"] = None
        self._probe_loop: Optional[asyncio.AbstractEventLoop] = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return
        self._start_probe()

    def _start_probe(self) -> "asyncio.Task[TransportMode]":
        loop = asyncio.get_running_loop()
        probe = self._probe
        if probe is None or probe.cancelled() or (self._probe_loop is not loop and not probe.done()):
            self._probe = loop.create_task(self._run_probe())
            self._probe_loop = loop
        return self._probe

    async def _run_probe(self) -> TransportMode:
        try:
            await self.proxied.request("")
        except Exception as exc:
            logger.debug(f"GitHub proxy probe failed: {exc}")
            logger.warning(RATE_LIMIT_ADVISORY)
            return TransportMode.DIRECT
        logger.info("Using the GitHub server proxy")
        return TransportMode.PROXIED

    async def mode(self) -> TransportMode:
        probe = self._start_probe()
        if probe.done():
            return probe.result()
        return await asyncio.shield(probe)

    async def request(self, api_path: str) -> Any:
        if await self.mode() is TransportMode.PROXIED:
            return await self.proxied.request(api_path)
        return await self.direct.request(api_path)
