from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# -----------------------------
# Settings persistence
# -----------------------------

CONFIG_PATH = Path.home() / ".plot_digitizer_config.json"

# characters Excel does not allow in a worksheet title
_BAD_SHEET_CHARS = re.compile(r"[\\/?*\[\]:]")


@dataclass
class DigitizerSettings:
    # calibration markers
    calibration_marker_radius: int = 5
    calibration_marker_fill: str = "#3498db"
    calibration_marker_outline: str = "white"
    calibration_marker_width: int = 2
    # digitized point markers
    point_marker_radius: int = 3
    point_marker_fill: str = "red"

    table_decimals: int = 4
    export_filename: str = "plot_data.xlsx"
    sheet_name: str = "Plot Data"

    loupe_size: int = 12                # image pixels shown in the loupe
    loupe_zoom: int = 10
    fit_image: bool = True

    last_image_dir: str = ""
    log_level: str = "INFO"

    def __post_init__(self):
        self.table_decimals = max(0, int(self.table_decimals))
        self.loupe_size = max(2, int(self.loupe_size))
        self.loupe_zoom = max(1, int(self.loupe_zoom))
        if not self.sheet_name or _BAD_SHEET_CHARS.search(self.sheet_name):
            logger.warning("Invalid sheet name %r; using %r", self.sheet_name, "Plot Data")
            self.sheet_name = "Plot Data"

    def format_value(self, v: float) -> str:
        return f"{float(v):.{self.table_decimals}f}"


def load_settings(path: Optional[Path] = None) -> DigitizerSettings:
    """
    Read settings from JSON, merged over the defaults.

    Unknown keys are ignored. A missing or unreadable file yields defaults.
    """
    path = Path(path) if path is not None else CONFIG_PATH
    if not path.exists():
        return DigitizerSettings()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("settings file must hold a JSON object")
        known = {f.name for f in fields(DigitizerSettings)}
        merged = {**asdict(DigitizerSettings()), **{k: v for k, v in data.items() if k in known}}
        return DigitizerSettings(**merged)
    except (OSError, ValueError, TypeError) as e:
        # If config is corrupt, fall back without blocking app usage.
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return DigitizerSettings()


def save_settings(settings: DigitizerSettings, path: Optional[Path] = None) -> None:
    path = Path(path) if path is not None else CONFIG_PATH
    path.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
    logger.debug("Saved settings to %s", path)
