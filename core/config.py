"""
Configuration and logging setup
Settings come from environment variables (.env is loaded by main.py)
"""
import os
import sys
from typing import Optional
from loguru import logger
from pydantic import BaseModel, ConfigDict
from models.roast import SolverParameters, ThawState

_TRUTHY = ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Runtime settings for the roast planner
    """
    model_config = ConfigDict(frozen=True)

    default_thaw_state: ThawState = ThawState.FROZEN
    solver: SolverParameters = SolverParameters()
    log_level: str = "INFO"


def _env_float(env, name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build Settings from the environment

    Args:
        environ: Mapping to read instead of os.environ (tests)

    Returns:
        Settings
    """
    env = os.environ if environ is None else environ

    def get(name: str, default: str) -> str:
        return env.get(name, default)

    def number(name: str, default: float) -> float:
        return _env_float(env, name, default)

    thaw_raw = get("ROAST_DEFAULT_THAW_STATE", ThawState.FROZEN.value)
    default_thaw_state = ThawState.coerce(thaw_raw)
    if default_thaw_state is ThawState.UNKNOWN:
        logger.warning(f"Unrecognized ROAST_DEFAULT_THAW_STATE={thaw_raw!r}, using neutral multiplier")

    solver = SolverParameters(
        ideal_temp_f=number("ROAST_IDEAL_TEMP_F", 240.0),
        defer_when_early=get("ROAST_DEFER_WHEN_EARLY", "true").lower() in _TRUTHY,
        too_early_buffer_minutes=number("ROAST_TOO_EARLY_BUFFER_MIN", 30.0),
    )

    return Settings(
        default_thaw_state=default_thaw_state,
        solver=solver,
        log_level=get("ROAST_LOG_LEVEL", "INFO").upper(),
    )


def setup_logger(level: str = "INFO") -> None:
    """
    Replace the default loguru sink with a colored stderr sink

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        level=level,
        colorize=True,
    )
