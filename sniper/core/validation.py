import re
from typing import Any

from sniper.core.types import Outcome, History

_ALIASES = {
    "P": Outcome.P, "PLAYER": Outcome.P,
    "B": Outcome.B, "BANKER": Outcome.B,
}
ORDERS = ("newest-first", "oldest-first")


class InvalidHistoryError(ValueError):
    pass


def is_valid_outcome(token: Any) -> bool:
    return isinstance(token, str) and token.strip().upper() in _ALIASES


def parse_history(raw: Any, order: str = "newest-first") -> History:
    """Turn a client payload into a newest-first list of outcomes.

    Every rule reads index 0 as the latest hand, so the order is never guessed:
    callers sending oldest-first data must say so and the list is reversed here.
    """
    if order not in ORDERS:
        raise InvalidHistoryError(f"order must be one of {ORDERS}")
    if not isinstance(raw, (list, tuple)):
        raise InvalidHistoryError("Invalid history format. Send an array of winners.")
    out = []
    for i, tok in enumerate(raw):
        if not is_valid_outcome(tok):
            raise InvalidHistoryError(f"history[{i}] must be 'P' or 'B', got {tok!r}")
        out.append(_ALIASES[tok.strip().upper()])
    if order == "oldest-first":
        out.reverse()
    return out


def parse_history_text(text: str, order: str = "newest-first") -> History:
    toks = [t for t in re.split(r"[,;|/\\\s]+", text or "") if t]
    return parse_history(toks, order=order)
