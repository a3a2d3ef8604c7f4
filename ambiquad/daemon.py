"""
Ambient light daemon: capture, sampling tick, light output and web API.

The capture thread keeps the frame buffer fresh; an asyncio task samples
the bands of the latest frame every ``sample_interval_s`` and pushes the
resulting color to the light. Region edits arrive from the web API and are
applied synchronously between ticks.
"""

import asyncio
import logging
from typing import Optional, Tuple

from aiohttp import web

from .cv import (
    BandColors,
    CameraCapture,
    Color,
    FrameBuffer,
    FrameProcessor,
    boost_color,
    load_corners,
    mix_colors,
    save_corners,
    to_rgb8,
)
from .geometry import Corners
from .net import LogOnlyLight, WizLightClient
from .utils.config import SETTINGS, Settings

log = logging.getLogger(__name__)


def light_color(colors: BandColors) -> Optional[Color]:
    """
    Color for the light from one frame's band colors.

    Mixes the first left and first right sub-regions; when neither band
    exists, all sub-regions are mixed. None when nothing was sampled.
    """
    sides = [band[0] for band in (colors["left"], colors["right"]) if band]
    if sides:
        return mix_colors(sides)
    return mix_colors(c for band in colors.values() for c in band)


class AmbientDaemon:
    def __init__(
        self,
        settings: Settings = SETTINGS,
        capture: Optional[CameraCapture] = None,
        light=None,
    ):
        self.settings = settings
        self.frame_buffer = capture.frame_buffer if capture else FrameBuffer()
        self.capture = capture
        if light is None:
            light = (
                WizLightClient(settings.light_ip, settings.light_port, settings.dimming)
                if settings.light_ip else LogOnlyLight()
            )
        self.light = light
        self.processor: Optional[FrameProcessor] = None
        self.last_color: Optional[Tuple[int, int, int]] = None
        self._tick_task: Optional[asyncio.Task] = None
        self._runner: Optional[web.AppRunner] = None
        self._stopped = asyncio.Event()

    def configure(self, width: int, height: int, corners: Optional[Corners] = None) -> FrameProcessor:
        """Build the frame processor for the actual canvas size and apply the region."""
        s = self.settings
        processor = FrameProcessor(
            width, height,
            row_bands=s.row_bands,
            column_bands=s.column_bands,
            dim_alpha=s.preview_alpha,
        )
        corners = corners or load_corners(s.config_dir)
        processor.set_corners(*corners)
        self.processor = processor
        log.info(
            f"Canvas {width}x{height}, bands: {s.row_bands} per side, "
            f"{s.column_bands} top/bottom; region {corners.to_dict()}"
        )
        return processor

    def set_corners(self, corners: Corners, persist: bool = True) -> None:
        if self.processor is None:
            raise RuntimeError("Daemon not configured")
        self.processor.set_corners(*corners)
        if persist:
            save_corners(corners, self.settings.config_dir)
        log.info(f"Region updated: {corners.to_dict()}")

    def sample(self) -> Optional[BandColors]:
        """Band colors of the latest frame, or None when there is nothing to sample."""
        latest = self.frame_buffer.get_latest()
        if latest is None or self.processor is None:
            return None
        frame, _ = latest
        try:
            return self.processor.sample_bands(frame)
        except ValueError as e:
            log.warning(f"Skipping frame: {e}")
            return None

    def tick(self) -> Optional[Tuple[int, int, int]]:
        """
        One sampling step: sample, mix, boost, send.

        When no color can be produced the light keeps its previous color
        and nothing is sent.
        """
        colors = self.sample()
        if colors is None:
            return None
        color = light_color(colors)
        if color is None:
            log.debug("No sample this tick - holding previous color")
            return None
        if self.settings.boost:
            color = boost_color(color)
        rgb = to_rgb8(color)
        self.light.set_color(rgb)
        self.last_color = rgb
        return rgb

    async def _tick_loop(self) -> None:
        interval = self.settings.sample_interval_s
        log.info(f"Sampling every {interval:.3f}s")
        while True:
            await asyncio.sleep(interval)
            self.tick()

    def status(self) -> dict:
        st = {
            "configured": self.processor is not None,
            "last_color": self.last_color,
            "light": self.light.stats,
            "capture": self.capture.get_status() if self.capture else None,
        }
        if self.processor is not None:
            st["canvas"] = {"width": self.processor.width, "height": self.processor.height}
        return st

    async def start(self, with_web: bool = True) -> None:
        if self.capture is None:
            raise RuntimeError("No capture configured")
        width, height = self.capture.open()
        self.configure(width, height)
        self.light.start()
        self.light.set_state(True)
        self.capture.start()
        self._tick_task = asyncio.create_task(self._tick_loop())
        if with_web:
            await self._start_web()
        log.info("Ambient daemon started")

    async def _start_web(self) -> None:
        from .web.server import make_app

        self._runner = web.AppRunner(make_app(self))
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.settings.web_host, self.settings.web_port)
        await site.start()
        log.info(f"Web API on http://{self.settings.web_host}:{self.settings.web_port}")

    async def wait(self) -> None:
        await self._stopped.wait()

    async def stop(self) -> None:
        log.info("Stopping ambient daemon...")
        if self._tick_task:
            self._tick_task.cancel()
            try:
                await self._tick_task
            except asyncio.CancelledError:
                pass
            self._tick_task = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        if self.capture:
            self.capture.stop()
        self.light.stop()
        self._stopped.set()
        log.info("Ambient daemon stopped")


async def run_daemon(settings: Settings = SETTINGS, with_web: bool = True):
    """
    Entry point used by cli.py: asyncio.run(run_daemon(settings))
    """
    capture = CameraCapture(settings.camera, settings.frame_width, settings.frame_height)
    d = AmbientDaemon(settings, capture=capture)
    await d.start(with_web=with_web)
    try:
        await d.wait()
    finally:
        await d.stop()
