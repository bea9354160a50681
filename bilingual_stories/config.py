from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"

DEFAULTS = {
    "host": "127.0.0.1",
    "port": 8766,
    "log_level": "INFO",
    "input_files": [],
    "data_dir": "data",
    "fail_on_warnings": False,
}


@dataclass
class Settings:
    host: str = DEFAULTS["host"]
    port: int = DEFAULTS["port"]
    log_level: str = DEFAULTS["log_level"]
    input_files: list[str] = field(default_factory=lambda: list(DEFAULTS["input_files"]))
    data_dir: str = DEFAULTS["data_dir"]
    fail_on_warnings: bool = DEFAULTS["fail_on_warnings"]

    @property
    def project_root(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def data_full_path(self) -> Path:
        return self.project_root / self.data_dir

    def resolved_input_files(self) -> list[Path]:
        if self.input_files:
            root = self.project_root
            return [root / f for f in self.input_files]
        return sorted(self.data_full_path.glob("*.txt"))

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "log_level": self.log_level,
            "input_files": self.input_files,
            "data_dir": self.data_dir,
            "fail_on_warnings": self.fail_on_warnings,
        }


def load_settings() -> Settings:
    if CONFIG_PATH.exists():
        raw = json.loads(CONFIG_PATH.read_text())
        known = {f.name for f in Settings.__dataclass_fields__.values()}
        filtered = {k: v for k, v in raw.items() if k in known}
        return Settings(**filtered)
    return Settings()


def save_settings(settings: Settings) -> None:
    CONFIG_PATH.write_text(json.dumps(settings.to_dict(), indent=4) + "\n")
