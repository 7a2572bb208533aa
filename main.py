"""
Roast Planner
Command-line front end: prints an ideal and a start-now plan, or a single
plan when the oven temperature is fixed
"""
import argparse
import os
import sys
from typing import List, Optional
from dotenv import load_dotenv
from core.config import load_settings, setup_logger
from handlers.roast_planner import RoastPlanner


def _build_parser() -> argparse.ArgumentParser:
    epi = """\
EXAMPLES

  Ideal and start-now plans for a 4 lb frozen roast ready at 6 PM:
    python main.py --weight 4 --state frozen --target 18:00

  Single plan at a fixed oven temperature:
    python main.py --weight 4 --state thawed --target 18:00 --oven-temp 325
"""
    p = argparse.ArgumentParser(
        prog="main.py",
        description="Estimate a roast schedule (main phase + 180°F hold) for a ready time.",
        epilog=epi,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--weight", required=True, help="Roast weight in pounds (e.g., 4).")
    p.add_argument(
        "--state",
        default=None,
        help="Thaw state: thawed, partial or frozen. Default: ROAST_DEFAULT_THAW_STATE (frozen).",
    )
    p.add_argument("--target", required=True, help="Ready time of day, 24-hour HH:MM (e.g., 18:30).")
    p.add_argument("--oven-temp", default=None, help="Fixed oven temperature in °F (single-plan mode).")
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables
    profile = os.getenv("PROFILE", "")
    if profile == "local" or profile == "":
        load_dotenv()

    args = _build_parser().parse_args(argv)
    settings = load_settings()
    setup_logger("DEBUG" if args.debug else settings.log_level)

    planner = RoastPlanner(settings)
    response = planner.handle(args.weight, args.state, args.target, args.oven_temp)
    if not response.ok:
        print(response.error, file=sys.stderr)
        return 2

    for line in response.lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
