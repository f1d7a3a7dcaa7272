from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from settings import Settings, get_settings


@dataclass(frozen=True)
class CLIConfig:
    settings: Settings
    output_path: Path


def load_config(output_path: Optional[Path] = None) -> CLIConfig:
    settings = get_settings()
    path = output_path if output_path is not None else Path(settings.data_path)
    return CLIConfig(settings=settings, output_path=path)
