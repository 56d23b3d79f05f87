from __future__ import annotations

import json
from pathlib import Path

from invoicer.core.currency import fmt_money, round_money_dec, to_decimal
from invoicer.core.settings import Settings, load_settings, save_settings


def test_missing_file_writes_defaults(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    s = load_settings(p)
    assert s == Settings()
    assert json.loads(p.read_text(encoding="utf-8"))["issuer_name"] == "ACME CORPORATION"


def test_round_trip_and_unknown_keys(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    save_settings(Settings(issuer_name="Globex", history_backend="json"), p)
    raw = json.loads(p.read_text(encoding="utf-8"))
    raw["legacy_flag"] = True
    p.write_text(json.dumps(raw), encoding="utf-8")

    s = load_settings(p)
    assert s.issuer_name == "Globex"
    assert s.history_backend == "json"
    assert not hasattr(s, "legacy_flag")


def test_corrupt_file_falls_back_without_overwriting(tmp_path: Path) -> None:
    p = tmp_path / "settings.json"
    p.write_text("{oops", encoding="utf-8")
    assert load_settings(p) == Settings()
    assert p.read_text(encoding="utf-8") == "{oops"


def test_unknown_backend_falls_back_to_sqlite() -> None:
    assert Settings.from_dict({"history_backend": "redis"}).history_backend == "sqlite"


def test_resolved_paths(tmp_path: Path) -> None:
    s = Settings(history_path=str(tmp_path / "h.db"), download_dir=str(tmp_path / "dl"))
    assert s.resolved_history_path() == tmp_path / "h.db"
    assert s.resolved_download_dir() == tmp_path / "dl"
    assert Settings(history_backend="json").resolved_history_path().name == "invoices.json"


def test_money_helpers() -> None:
    assert fmt_money("1100", "$") == "$1100.00"
    assert fmt_money(25.5, "$") == "$25.50"
    assert fmt_money("-3.5", "$") == "-$3.50"
    assert str(round_money_dec("17.555")) == "17.56"
    assert to_decimal("not a number") == 0
