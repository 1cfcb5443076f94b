"""
Main entry point for the decision wheel.

Usage:
    dnd-wheel [CONFIG] [--seed N] [--no-audio] [--debug]
"""

from pathlib import Path
from typing import Optional, Sequence
import argparse
import logging
import sys

from dndwheel.config.settings import Settings, get_settings
from dndwheel.config.wheel import WheelConfig, load_wheel_config
from dndwheel.core.errors import InvalidConfiguration, InvalidSpinParameters
from dndwheel.engine.model import TAU
from dndwheel.engine.selector import RandomSource, SeededRandom, SystemRandomSource

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dnd-wheel", description="Weighted decision wheel")
    parser.add_argument("config", nargs="?", type=Path, help="wheel config file (.yaml, .yml or .toml)")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible spins")
    parser.add_argument("--no-audio", action="store_true", help="disable tick and win sounds")
    parser.add_argument("--debug", action="store_true", help="verbose logging and debug overlay")
    return parser.parse_args(argv)


def load_config_or_default(path: Optional[Path]) -> WheelConfig:
    """Load the wheel config, falling back to the default wheel if it is broken."""
    try:
        return load_wheel_config(path)
    except InvalidConfiguration as e:
        logger.error(f"{e} - using the default wheel")
        return WheelConfig()


def make_random_source(seed: Optional[int]) -> RandomSource:
    if seed is None:
        return SystemRandomSource()
    logger.info(f"Using seeded random source (seed={seed})")
    return SeededRandom(seed)


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings: Settings = get_settings()
    except InvalidSpinParameters as e:
        setup_logging(debug=args.debug)
        logger.error(f"Invalid spin settings: {e}")
        return 2

    debug = args.debug or settings.debug
    setup_logging(debug=debug)
    if debug and not settings.debug:
        settings = settings.model_copy(update={"debug": True})
    if args.no_audio:
        settings = settings.model_copy(
            update={"audio": settings.audio.model_copy(update={"enabled": False})}
        )

    config_path = args.config or settings.config_file
    config = load_config_or_default(config_path)

    seed = args.seed if args.seed is not None else settings.seed
    rng = make_random_source(seed)

    # Imported here so --help works without a display or sound card
    from dndwheel.app import WheelApp
    from dndwheel.audio.engine import AudioEngine

    audio = AudioEngine(settings.audio)
    if not audio.init():
        audio = None

    app = WheelApp(
        settings,
        config,
        config_path=config_path,
        rng=rng,
        audio=audio,
        initial_angle=rng.next_uniform() * TAU,
    )
    app.run()
    return 0


def main() -> None:
    """Entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
