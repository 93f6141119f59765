from __future__ import annotations

import sqlite3
from pathlib import Path

from dwall.rules import Rule, RuleMode
from dwall.storage import TABLE, WallpaperStore


def _store(tmp_path: Path) -> WallpaperStore:
    store = WallpaperStore(tmp_path / "data" / "dwall.db")
    store.init_db()
    return store


def _rule(position: int, name: str = "home", mode: RuleMode = RuleMode.NETWORK) -> Rule:
    return Rule(position=position, name=name, mode=mode, info="HomeWifi", filename=f"{position}.jpg")


def test_empty_store(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.get_wallpaper_list() == []
    assert store.get_wallpaper(0) is None
    assert store.next_position() == 0


def test_list_is_ordered_by_position(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.insert_wallpaper(_rule(3, "c"))
    store.insert_wallpaper(_rule(1, "a"))
    store.insert_wallpaper(_rule(2, "b"))

    assert [r.position for r in store.get_wallpaper_list()] == [1, 2, 3]
    assert store.next_position() == 4


def test_insert_replaces_same_position(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.insert_wallpaper(_rule(1, "old"))
    store.insert_wallpaper(_rule(1, "new"))

    rules = store.get_wallpaper_list()
    assert len(rules) == 1
    assert rules[0].name == "new"


def test_round_trips_mode_enum(tmp_path: Path) -> None:
    store = _store(tmp_path)
    rule = Rule(position=0, name="night", mode=RuleMode.TIME, info="22:00 06:00", filename="n.png")
    store.insert_wallpaper(rule)

    assert store.get_wallpaper(0) == rule


def test_unknown_mode_label_loads_as_unset(tmp_path: Path) -> None:
    store = _store(tmp_path)
    with sqlite3.connect(store.db_path) as conn:
        conn.execute(
            f"INSERT INTO {TABLE} VALUES (?, ?, ?, ?, ?)",
            (5, "legacy", "Bluetooth", "x", None),
        )

    rule = store.get_wallpaper(5)
    assert rule is not None
    assert rule.mode is RuleMode.UNSET
    assert rule.filename == ""


def test_clear_and_insert(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.insert_wallpaper(_rule(9, "stale"))
    store.clear_and_insert([_rule(0, "a"), _rule(1, "b")])

    assert [r.name for r in store.get_wallpaper_list()] == ["a", "b"]


def test_delete(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.insert_wallpaper(_rule(1))

    assert store.delete_wallpaper(1) is True
    assert store.delete_wallpaper(1) is False
    assert store.get_wallpaper_list() == []
