"""Non-blocking UDP client for WiZ smart lights.

Colors are sent fire-and-forget: the socket never blocks the sampling tick,
and a color that cannot be sent right away is dropped since the next tick
replaces it anyway.

Messages are compact JSON ``setPilot`` / ``setState`` calls on port 38899.

A run of send errors (light rebooted, Wi-Fi dropped) replaces the socket.
"""

import json
import logging
import socket
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

WIZ_PORT = 38899

# Send failures in a row before the socket is replaced
MAX_CONSECUTIVE_ERRORS = 10


class WizLightClient:
    """Non-blocking UDP color sender to a WiZ light."""

    def __init__(self, ip: str, port: int = WIZ_PORT, dimming: int = 100):
        """Initialize light client.

        Args:
            ip: Light IP address
            port: UDP control port
            dimming: Brightness sent with every color (10-100)
        """
        if not 10 <= dimming <= 100:
            raise ValueError(f"dimming must be within 10-100, got {dimming}")
        self.addr = (ip, port)
        self.dimming = dimming
        self._sock: Optional[socket.socket] = None
        self._packets_sent = 0
        self._packets_dropped = 0
        self._first_send_logged = False
        self._last_color: Optional[Tuple[int, int, int]] = None

        self._consecutive_errors = 0
        self._socket_recreations = 0

    def start(self) -> None:
        """Open the non-blocking UDP socket."""
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock.setblocking(False)
        logger.info(f"Light client started: sending colors to {self.addr[0]}:{self.addr[1]} (UDP)")

    def stop(self) -> None:
        """Close the socket and log totals."""
        if self._sock:
            self._sock.close()
            self._sock = None
        logger.info(
            f"Light client stopped ({self._packets_sent} sent, "
            f"{self._packets_dropped} dropped)"
        )

    def set_color(self, rgb: Tuple[int, int, int]) -> bool:
        """Send an RGB color (cold and warm white disabled).

        Args:
            rgb: (r, g, b), each 0-255

        Returns:
            True when the color left the socket, False when it was dropped
        """
        r, g, b = rgb
        sent = self._send({
            "method": "setPilot",
            "params": {"r": r, "g": g, "b": b, "c": 0, "w": 0, "dimming": self.dimming},
        })
        if sent:
            self._last_color = (r, g, b)
        return sent

    def set_state(self, on: bool) -> bool:
        """Switch the light on or off."""
        return self._send({"method": "setState", "params": {"state": bool(on)}})

    def _send(self, msg: dict) -> bool:
        if self._sock is None:
            logger.warning("Light client not started")
            return False

        try:
            data = json.dumps(msg, separators=(",", ":")).encode("utf-8")
            self._sock.sendto(data, self.addr)
            self._packets_sent += 1
            self._consecutive_errors = 0

            if not self._first_send_logged:
                self._first_send_logged = True
                logger.info(f"First packet sent to light at {self.addr[0]}:{self.addr[1]}")

            logger.debug(f"UDP sent: {msg['method']} {msg['params']}")
            return True

        except BlockingIOError:
            self._packets_dropped += 1
            self._consecutive_errors += 1
            logger.debug("UDP packet dropped (would block)")
            self._check_and_recover()
            return False

        except OSError as e:
            self._packets_dropped += 1
            self._consecutive_errors += 1
            logger.warning(f"Send to light {self.addr[0]}:{self.addr[1]} failed: {e}")
            self._check_and_recover()
            return False

    def _check_and_recover(self) -> None:
        """Replace the socket once MAX_CONSECUTIVE_ERRORS sends failed in a row."""
        if self._consecutive_errors >= MAX_CONSECUTIVE_ERRORS:
            logger.warning(
                f"{self._consecutive_errors} failed sends to the light - replacing socket"
            )
            self._recreate_socket()

    def _recreate_socket(self) -> None:
        """Close the current socket and open a fresh one."""
        if self._sock:
            try:
                self._sock.close()
            except OSError:
                pass

        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            self._sock.setblocking(False)
            self._consecutive_errors = 0
            self._socket_recreations += 1
            logger.info(
                f"Light socket replaced (#{self._socket_recreations})"
            )
        except OSError as e:
            self._sock = None
            logger.error(f"Could not open a new light socket: {e}")

    @property
    def stats(self) -> dict:
        """Get client statistics."""
        return {
            "packets_sent": self._packets_sent,
            "packets_dropped": self._packets_dropped,
            "consecutive_errors": self._consecutive_errors,
            "socket_recreations": self._socket_recreations,
            "last_color": self._last_color,
            "target": f"{self.addr[0]}:{self.addr[1]}",
        }


class LogOnlyLight:
    """Stand-in used when no light IP is configured: colors are only logged."""

    def __init__(self):
        self._last_color: Optional[Tuple[int, int, int]] = None
        self._updates = 0

    def start(self) -> None:
        logger.info("No light configured - colors will only be logged")

    def stop(self) -> None:
        pass

    def set_color(self, rgb: Tuple[int, int, int]) -> bool:
        self._last_color = tuple(rgb)
        self._updates += 1
        logger.debug(f"Light color (dry run): {self._last_color}")
        return True

    def set_state(self, on: bool) -> bool:
        return True

    @property
    def stats(self) -> dict:
        return {"updates": self._updates, "last_color": self._last_color, "target": None}
