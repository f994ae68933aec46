from __future__ import annotations

import json
from pathlib import Path

import pytest

from high_score_store import HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore


def test_missing_file_reads_as_zero(tmp_path: Path) -> None:
    assert JsonHighScoreStore(tmp_path / "nope.json").load_high_score() == 0


def test_save_then_load(tmp_path: Path) -> None:
    file_path = tmp_path / "nested" / "high_score.json"
    store = JsonHighScoreStore(file_path)
    store.save_high_score(420)

    assert json.loads(file_path.read_text(encoding="utf-8")) == {"high_score": 420}
    assert JsonHighScoreStore(file_path).load_high_score() == 420
    assert [p.name for p in file_path.parent.iterdir()] == ["high_score.json"]


def test_save_overwrites_previous_value(tmp_path: Path) -> None:
    store = JsonHighScoreStore(tmp_path / "high_score.json")
    store.save_high_score(10)
    store.save_high_score(25)
    assert store.load_high_score() == 25


@pytest.mark.parametrize(
    "content",
    ["{broken", "[]", '{"high_score": "lots"}', '{"high_score": -3}', '{"high_score": true}', "{}"],
)
def test_corrupt_content_reads_as_zero(tmp_path: Path, content: str, caplog) -> None:
    file_path = tmp_path / "high_score.json"
    file_path.write_text(content, encoding="utf-8")
    assert JsonHighScoreStore(file_path).load_high_score() == 0
    assert "high score" in caplog.text.lower()


def test_memory_store() -> None:
    store = MemoryHighScoreStore(initial=7)
    assert store.load_high_score() == 7
    store.save_high_score(9)
    assert store.load_high_score() == 9
    assert store.save_count == 1


def test_stores_satisfy_protocol(tmp_path: Path) -> None:
    assert isinstance(JsonHighScoreStore(tmp_path / "x.json"), HighScoreStore)
    assert isinstance(MemoryHighScoreStore(), HighScoreStore)
