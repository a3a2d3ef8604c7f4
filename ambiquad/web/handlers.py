import json
import logging

import cv2
from aiohttp import web

from ..cv import color_to_dict
from ..daemon import light_color
from .validation import validate_region_payload

log = logging.getLogger(__name__)


# ---------- helpers ----------

def _daemon(request: web.Request):
    return request.app["daemon"]


def _json(data, status=200):
    return web.json_response(data, status=status)


def _processor_or_error(request: web.Request):
    processor = _daemon(request).processor
    if processor is None:
        raise web.HTTPServiceUnavailable(
            text=json.dumps({"error": "not configured"}), content_type="application/json"
        )
    return processor


# ---------- API handlers ----------

async def api_ping(request: web.Request):
    return _json({"ok": True})


async def api_status(request: web.Request):
    """Get daemon status: canvas, light and capture statistics."""
    return _json(_daemon(request).status())


async def api_region_get(request: web.Request):
    """Current region corners and canvas size."""
    processor = _processor_or_error(request)
    return _json({
        "corners": processor.coordinates().to_dict(),
        "canvas": {"width": processor.width, "height": processor.height},
    })


async def api_region_set(request: web.Request):
    """Move the region; corners are clamped to the canvas and persisted."""
    processor = _processor_or_error(request)
    try:
        body = await request.json()
    except ValueError:
        return _json({"error": "invalid JSON"}, 400)

    try:
        corners = validate_region_payload(body, processor.width, processor.height)
    except ValueError as e:
        return _json({"error": str(e)}, 400)

    try:
        _daemon(request).set_corners(corners)
    except IOError as e:
        return _json({"error": str(e)}, 500)
    return _json({"ok": True, "corners": corners.to_dict()})


async def api_bands(request: web.Request):
    """Corners of every band sub-region, for drawing overlays."""
    processor = _processor_or_error(request)
    return _json({
        name: [corners.to_dict() for corners in quads]
        for name, quads in processor.band_corners().items()
    })


async def api_colors(request: web.Request):
    """Band colors of the latest frame and the color sent to the light."""
    colors = _daemon(request).sample()
    if colors is None:
        return _json({"error": "no frame available"}, 503)
    return _json({
        "bands": {name: [color_to_dict(c) for c in band] for name, band in colors.items()},
        "light": color_to_dict(light_color(colors)),
    })


async def api_preview(request: web.Request):
    """JPEG preview of the latest frame with the outside of the region dimmed."""
    processor = _processor_or_error(request)
    latest = _daemon(request).frame_buffer.get_latest()
    if latest is None:
        return _json({"error": "no frame available"}, 503)
    frame, _ = latest
    try:
        preview = processor.mask_frame(frame)
    except ValueError as e:
        return _json({"error": str(e)}, 409)

    # JPEG has no alpha: blend onto black so dimmed pixels show darker
    alpha = preview[..., 3:4].astype("float32") / 255.0
    bgr = cv2.cvtColor((preview[..., :3] * alpha).astype("uint8"), cv2.COLOR_RGB2BGR)
    ok, buf = cv2.imencode(".jpg", bgr, [cv2.IMWRITE_JPEG_QUALITY, 80])
    if not ok:
        log.error("JPEG encoding failed")
        return _json({"error": "encoding failed"}, 500)
    return web.Response(body=buf.tobytes(), content_type="image/jpeg")
