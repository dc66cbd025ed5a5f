"""Runtime configuration for SimRec.

Settings come from environment variables, falling back to the defaults
below. All names share the ``SIMREC_`` prefix.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from simrec.exceptions import InvalidParameterError
from simrec.recommender.infer import DEFAULT_MIN_RATINGS, DEFAULT_RESULT_COUNT
from simrec.recommender.store import POLICY_CONTIGUOUS, USER_POLICIES

# Defaults
DEFAULT_DATA_DIR = "data"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_USER_POLICY = POLICY_CONTIGUOUS

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_int(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidParameterError(name, raw, "must be an integer") from None
    if value < minimum:
        raise InvalidParameterError(name, value, f"must be at least {minimum}")
    return value


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        data_dir: Directory holding items.csv and ratings.csv.
        log_level: Root logging level.
        user_policy: "contiguous" materializes every user id from 1 to the
            highest id seen; "observed" only the ids present in the ratings.
        default_results: Result count used when a request omits it.
        default_min_ratings: Minimum ratings used when a request omits it.
    """

    data_dir: Path = Path(DEFAULT_DATA_DIR)
    log_level: str = DEFAULT_LOG_LEVEL
    user_policy: str = DEFAULT_USER_POLICY
    default_results: int = DEFAULT_RESULT_COUNT
    default_min_ratings: int = DEFAULT_MIN_RATINGS

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``env`` (defaults to ``os.environ``).

        Raises:
            InvalidParameterError: If a variable holds an invalid value.
        """
        env = os.environ if env is None else env

        log_level = env.get("SIMREC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise InvalidParameterError("SIMREC_LOG_LEVEL", log_level, f"must be one of {LOG_LEVELS}")

        user_policy = env.get("SIMREC_USER_POLICY", DEFAULT_USER_POLICY).lower()
        if user_policy not in USER_POLICIES:
            raise InvalidParameterError(
                "SIMREC_USER_POLICY", user_policy, f"must be one of {USER_POLICIES}"
            )

        settings = cls(
            data_dir=Path(env.get("SIMREC_DATA_DIR", DEFAULT_DATA_DIR)),
            log_level=log_level,
            user_policy=user_policy,
            default_results=_get_int(env, "SIMREC_DEFAULT_RESULTS", DEFAULT_RESULT_COUNT, 1),
            default_min_ratings=_get_int(
                env, "SIMREC_DEFAULT_MIN_RATINGS", DEFAULT_MIN_RATINGS, 0
            ),
        )
        logging.getLogger(__name__).debug(f"Loaded settings: {settings}")
        return settings
