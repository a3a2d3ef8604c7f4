import os
from dataclasses import dataclass
from pathlib import Path


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, str(default)))


def _env_bool(name: str, default: bool) -> bool:
    return os.environ.get(name, "true" if default else "false").strip().lower() in ("1", "true", "yes", "on")


DEFAULT_CONFIG_DIR = Path(
    os.environ.get("AMBIQUAD_CONFIG_DIR", str(Path.home() / ".local/share/ambiquad"))
)

# Camera: requested capture size; the actual size reported by the device wins
CAMERA = _env_int("AMBIQUAD_CAMERA", 0)
FRAME_WIDTH = _env_int("AMBIQUAD_FRAME_WIDTH", 640)
FRAME_HEIGHT = _env_int("AMBIQUAD_FRAME_HEIGHT", 480)

# Sampling
ROW_BANDS = _env_int("AMBIQUAD_ROW_BANDS", 1)
COLUMN_BANDS = _env_int("AMBIQUAD_COLUMN_BANDS", 0)
SAMPLE_INTERVAL_S = _env_float("AMBIQUAD_SAMPLE_INTERVAL", 0.1)
PREVIEW_ALPHA = _env_int("AMBIQUAD_PREVIEW_ALPHA", 50)
BOOST = _env_bool("AMBIQUAD_BOOST", True)

# Light (empty IP = dry run, colors are only logged)
LIGHT_IP = os.environ.get("AMBIQUAD_LIGHT_IP", "").strip()
LIGHT_PORT = _env_int("AMBIQUAD_LIGHT_PORT", 38899)
DIMMING = _env_int("AMBIQUAD_DIMMING", 100)

# Web API
WEB_HOST = os.environ.get("AMBIQUAD_WEB_HOST", "0.0.0.0")
WEB_PORT = _env_int("AMBIQUAD_WEB_PORT", 8788)

@dataclass
class Settings:
    camera: int = CAMERA
    frame_width: int = FRAME_WIDTH
    frame_height: int = FRAME_HEIGHT
    row_bands: int = ROW_BANDS
    column_bands: int = COLUMN_BANDS
    sample_interval_s: float = SAMPLE_INTERVAL_S
    preview_alpha: int = PREVIEW_ALPHA
    boost: bool = BOOST
    light_ip: str = LIGHT_IP
    light_port: int = LIGHT_PORT
    dimming: int = DIMMING
    web_host: str = WEB_HOST
    web_port: int = WEB_PORT
    config_dir: Path = DEFAULT_CONFIG_DIR
    log_level: str = os.environ.get("AMBIQUAD_LOGLEVEL", "INFO")

SETTINGS = Settings()
