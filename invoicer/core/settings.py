from __future__ import annotations

from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging


from invoicer.core.paths import settings_path, default_history_path, default_download_dir

logger = logging.getLogger(__name__)

# Path to the settings.json (runtime-aware)
SETTINGS_PATH = settings_path()

HISTORY_BACKENDS = ("sqlite", "json")


def _default_issuer_lines() -> List[str]:
	return [
		"123 Business Street",
		"Business City, BC 12345",
		"contact@acmecorp.com | (555) 123-4567",
	]


@dataclass
class Settings:
	issuer_name: str = "ACME CORPORATION"
	# Address/contact lines drawn under the issuer name
	issuer_lines: List[str] = field(default_factory=_default_issuer_lines)
	footer_message: str = "Thank you for your business!"
	currency_symbol: str = "$"
	invoice_prefix: str = "INV-"
	# strftime pattern for the issue date printed on the invoice
	date_format: str = "%m/%d/%Y"
	# 'sqlite' (SQLModel) or 'json' (single-key JSON file)
	history_backend: str = "sqlite"
	# Optional path for the history store; defaults next to settings.json
	history_path: Optional[str] = None
	# Optional folder for generated PDFs; defaults to ~/Downloads
	download_dir: Optional[str] = None
	# Populate an empty history with demo entries on first start
	seed_samples: bool = True
	# Open the PDF in the default viewer after generating it
	open_after_download: bool = True

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		if merged["history_backend"] not in HISTORY_BACKENDS:
			logger.warning("Unknown history backend %r; using sqlite", merged["history_backend"])
			merged["history_backend"] = "sqlite"
		if not isinstance(merged["issuer_lines"], list):
			merged["issuer_lines"] = [str(merged["issuer_lines"])]
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)

	def resolved_history_path(self) -> Path:
		if self.history_path:
			return Path(self.history_path).expanduser()
		return default_history_path(self.history_backend)

	def resolved_download_dir(self) -> Path:
		if self.download_dir:
			return Path(self.download_dir).expanduser()
		return default_download_dir()


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else SETTINGS_PATH


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	"""
	Load settings from JSON (UTF-8). If the file is missing, write defaults and return them.
	"""
	p = _coerce_path(path)
	if not p.exists():
		settings = Settings()
		try:
			save_settings(settings, p)
		except OSError:
			logger.exception("Could not write default settings to %s", p)
		return settings

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError):
		# If unreadable/corrupt, fall back to defaults (do not overwrite automatically)
		logger.warning("Settings file %s is unreadable; using defaults", p)
		return Settings()

	return Settings.from_dict(raw if isinstance(raw, dict) else {})


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
	"""Save settings to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	# Pretty JSON, keep Unicode
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
