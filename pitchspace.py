"""
pitchspace.py

Real entrypoint that launches the game.

Integration
- Loads config (and applies command line overrides)
- Configures logging and, when a DSN is configured, Sentry error reporting
- Builds AudioInput, the high score store, PitchTracker and GameSession
- Creates QApplication and GameWindow and runs the Qt event loop
- Holds the audio device inside a `with` block so it is released on every exit path

Other modes
- --list-devices prints the available input devices and exits
- --run-tests runs the pure in-module self checks (no Qt, no audio device)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import sentry_sdk

from audio_input import AudioInput, query_input_devices
from audio_models import AudioUnavailable
from config import AppConfig, get_config, load_config
from high_score_store import HighScoreStore, JsonHighScoreStore, MemoryHighScoreStore
from pitch_tracker import PitchTracker


logger = logging.getLogger("pitchspace")


def build_argument_parser() -> argparse.ArgumentParser:
    argument_parser = argparse.ArgumentParser(description="Pitch Perfect Space: steer a spaceship with your voice.")
    argument_parser.add_argument("--config", type=Path, default=None, help="Path to a pitchspace_config.json file.")
    argument_parser.add_argument("--fullscreen", action="store_true", help="Start in fullscreen.")
    argument_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override the configured log level.",
    )
    argument_parser.add_argument("--no-save", action="store_true", help="Keep the high score in memory only.")
    argument_parser.add_argument("--list-devices", action="store_true", help="List audio input devices and exit.")
    argument_parser.add_argument("--run-tests", action="store_true", help="Run pure logic self checks (no Qt).")
    return argument_parser


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def configure_error_reporting(config: AppConfig) -> bool:
    sentry_config = config.sentry
    if not sentry_config.is_enabled():
        return False

    sentry_sdk.init(
        dsn=sentry_config.dsn,
        environment=sentry_config.environment,
        traces_sample_rate=float(sentry_config.traces_sample_rate),
    )
    logger.info("Sentry error reporting enabled (environment=%s)", sentry_config.environment)
    return True


def _run_self_checks() -> int:
    import collision
    import game_clock
    import note_mapper
    import obstacle_field
    import pitch_estimator

    for module in (pitch_estimator, note_mapper, game_clock, obstacle_field, collision):
        module._run_unit_tests()
        print(f"{module.__name__}.py: ok")
    return 0


def _list_devices() -> int:
    try:
        devices = query_input_devices()
    except AudioUnavailable as exception:
        print(str(exception))
        return 2

    for device in devices:
        marker = "*" if device.is_default else " "
        print(f"{marker} [{device.index}] {device.name} ({device.input_channels} ch, {device.sample_rate:.0f} Hz)")
    return 0


def _build_high_score_store(config: AppConfig, *, in_memory: bool) -> HighScoreStore:
    if in_memory:
        return MemoryHighScoreStore()
    return JsonHighScoreStore(config.storage.resolved_high_score_path())


def _run_game(config: AppConfig, *, fullscreen: bool, in_memory_scores: bool, argv: List[str]) -> int:
    from PyQt6.QtWidgets import QApplication

    from game_session import GameSession
    from game_window import GameWindow

    qt_application = QApplication(argv)

    with AudioInput.from_config(config.audio) as audio_input:
        session = GameSession(
            config=config,
            pitch_tracker=PitchTracker(audio_input),
            high_score_store=_build_high_score_store(config, in_memory=in_memory_scores),
        )

        window = GameWindow(session=session, config=config)
        window.resize(int(config.playfield.width) + 80, int(config.playfield.height) + 160)
        window.show()
        if fullscreen or config.display.fullscreen:
            window.showFullScreen()

        try:
            return int(qt_application.exec())
        finally:
            session.close()


def main(argv: Optional[List[str]] = None) -> int:
    argument_list = list(sys.argv if argv is None else argv)
    parsed_args = build_argument_parser().parse_args(argument_list[1:])

    if parsed_args.run_tests:
        return _run_self_checks()

    if parsed_args.config is not None:
        app_config, config_path = load_config(parsed_args.config)
    else:
        app_config, config_path = get_config()

    configure_logging(parsed_args.log_level or app_config.logging.level)
    logger.info("Config: %s", config_path if config_path is not None else "(defaults)")
    configure_error_reporting(app_config)

    if parsed_args.list_devices:
        return _list_devices()

    return _run_game(
        app_config,
        fullscreen=bool(parsed_args.fullscreen),
        in_memory_scores=bool(parsed_args.no_save),
        argv=argument_list,
    )


if __name__ == "__main__":
    raise SystemExit(main())
