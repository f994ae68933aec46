# -*- coding: utf-8 -*-
########################
# high_score_store.py
########################
# Purpose:
# - Persist the single best score between runs.
#
# Design notes:
# - File format is a small UTF-8 JSON object: {"high_score": <int>}
# - Writes go to a temp file in the same directory followed by os.replace, so a crash
#   never leaves a half-written file behind.
# - A missing file loads as 0. An unreadable or corrupt file also loads as 0, with a warning.
# - Save errors propagate to the caller (GameSession logs them).
#
########################
# Interfaces:
# Public protocols:
# - HighScoreStore: load_high_score() -> int, save_high_score(int) -> None
#
# Public classes:
# - class JsonHighScoreStore(file_path: pathlib.Path)
# - class MemoryHighScoreStore(initial: int = 0)
#
########################

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class HighScoreStore(Protocol):
    def load_high_score(self) -> int: ...

    def save_high_score(self, high_score: int) -> None: ...


class JsonHighScoreStore:
    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load_high_score(self) -> int:
        try:
            raw_text = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except OSError as exception:
            logger.warning("Could not read high score file %s: %s", self._file_path, exception)
            return 0

        try:
            payload = json.loads(raw_text)
        except json.JSONDecodeError as exception:
            logger.warning("High score file %s is not valid JSON: %s", self._file_path, exception)
            return 0

        value = payload.get("high_score") if isinstance(payload, dict) else None
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning("High score file %s has no valid high_score value", self._file_path)
            return 0
        return int(value)

    def save_high_score(self, high_score: int) -> None:
        value = max(0, int(high_score))
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        file_descriptor, temp_name = tempfile.mkstemp(
            prefix=".high_score.", suffix=".tmp", dir=str(self._file_path.parent)
        )
        try:
            with os.fdopen(file_descriptor, "w", encoding="utf-8") as handle:
                json.dump({"high_score": value}, handle)
            os.replace(temp_name, self._file_path)
        except BaseException:
            try:
                os.unlink(temp_name)
            except OSError:
                pass
            raise
        logger.info("Saved high score %d to %s", value, self._file_path)


class MemoryHighScoreStore:
    """In-process store for demo runs and tests."""

    def __init__(self, initial: int = 0) -> None:
        self._high_score = int(initial)
        self.save_count = 0

    def load_high_score(self) -> int:
        return self._high_score

    def save_high_score(self, high_score: int) -> None:
        self._high_score = int(high_score)
        self.save_count += 1
