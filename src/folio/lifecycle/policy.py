"""Consistency policies for asset deletion."""

from enum import Enum


class Policy(str, Enum):
    """Whether a failed asset deletion blocks removal of the owning record.

    STRICT: any failed deletion aborts; the record stays.
    BEST_EFFORT: the record is removed regardless; failures are logged and
    recorded in the orphan ledger.
    """

    STRICT = "strict"
    BEST_EFFORT = "best-effort"
