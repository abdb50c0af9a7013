"""
Configuration Module
Runtime defaults for the auto clicker and command-line overrides.

Nothing here is persisted: every run starts from these defaults.
"""

import argparse
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from shared_state import Hotkey


@dataclass
class ClickerConfig:
    """Clicker settings (edit defaults here)."""
    interval_ms: int = 800              # delay between clicks
    hotkey: str = "F6"                  # toggle key, F1..F10
    warmup_delay_ms: int = 0            # one-time pause before the first click of a run
    poll_interval_ms: int = 50          # idle check period of the click loop
    min_interval_ms: int = 10
    max_interval_ms: int = 1000
    interval_step_ms: int = 10
    suppress_key_repeat: bool = False   # True = holding the hotkey toggles only once
    log_level: str = "INFO"


DEFAULT_CONFIG = ClickerConfig()


def quantize_interval(value: float, minimum: int, maximum: int, step: int) -> int:
    """
    Snap a raw interval to the slider grid and clamp it to the allowed range.

    Args:
        value: Requested interval in milliseconds.
        minimum: Lowest allowed interval.
        maximum: Highest allowed interval.
        step: Granularity of the grid (halves round up).

    Returns:
        Interval in milliseconds within [minimum, maximum].
    """
    value = max(minimum, min(maximum, value))
    if step > 1:
        value = math.floor(value / step + 0.5) * step
    return int(max(minimum, min(maximum, math.floor(value + 0.5))))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Auto clicker with a global toggle hotkey."
    )
    parser.add_argument(
        "--interval", type=int, default=DEFAULT_CONFIG.interval_ms,
        help=f"Delay between clicks in ms (default: {DEFAULT_CONFIG.interval_ms})"
    )
    parser.add_argument(
        "--hotkey", default=DEFAULT_CONFIG.hotkey,
        help=f"Toggle hotkey, F1-F10 (default: {DEFAULT_CONFIG.hotkey})"
    )
    parser.add_argument(
        "--warmup", type=int, default=DEFAULT_CONFIG.warmup_delay_ms,
        help="Pause in ms before the first click after starting (default: 0)"
    )
    parser.add_argument(
        "--no-key-repeat", action="store_true",
        help="Ignore auto-repeated hotkey presses while the key is held down"
    )
    parser.add_argument(
        "--log-level", default=DEFAULT_CONFIG.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Shortcut for --log-level DEBUG"
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> ClickerConfig:
    """
    Build a ClickerConfig from command-line arguments.

    Raises:
        SystemExit: On unknown flags or an unsupported hotkey name.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        hotkey = Hotkey.parse(args.hotkey)
    except ValueError as e:
        parser.error(str(e))

    if args.warmup < 0:
        parser.error("--warmup must not be negative")

    cfg = ClickerConfig()
    cfg.interval_ms = quantize_interval(
        args.interval, cfg.min_interval_ms, cfg.max_interval_ms, cfg.interval_step_ms
    )
    cfg.hotkey = str(hotkey)
    cfg.warmup_delay_ms = args.warmup
    cfg.suppress_key_repeat = args.no_key_repeat
    cfg.log_level = "DEBUG" if args.verbose else args.log_level
    return cfg
