# -*- coding: utf-8 -*-
########################
# paths.py
########################
# Purpose:
# - Central filesystem path helpers for the app.
# - Defines where the config file and the high score file live for the current user.
#
# Design notes:
# - Keep path derivation consistent across modules.
# - No Qt usage. Return pathlib.Path only.
# - Nothing here creates directories. Writers create their parent directory on save.
#
########################
# Interfaces:
# Public functions:
# - user_config_dir_path() -> pathlib.Path
# - user_data_dir_path() -> pathlib.Path
# - high_score_file_path() -> pathlib.Path
#
# Inputs:
# - None (derived from platformdirs for the current user).
#
# Outputs:
# - Paths used by config.py and high_score_store.py.
#
########################

from __future__ import annotations

from pathlib import Path

from platformdirs import user_config_dir, user_data_dir


APP_NAME = "PitchSpace"
APP_AUTHOR = "PitchSpace"


def user_config_dir_path() -> Path:
    return Path(user_config_dir(APP_NAME, APP_AUTHOR))


def user_data_dir_path() -> Path:
    return Path(user_data_dir(APP_NAME, APP_AUTHOR))


def high_score_file_path() -> Path:
    """Return the default high score file (not created automatically)."""
    return user_data_dir_path() / "high_score.json"
