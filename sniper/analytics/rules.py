"""Prediction heuristics.

Each rule looks at a newest-first history and either returns a
:class:`Prediction` or ``None`` to let the next rule have a go. Rules hold only
their own tuning values, so a single instance can be shared across threads.
"""
from typing import Optional, Sequence

from sniper.analytics.patterns import leading_streak, block_repeats, alternates, shape_score
from sniper.core.types import (
    Outcome, History, Prediction, WAIT, DRAGON, PING_PONG, STATIC, cycle_mode,
)


class Rule:
    name = "rule"

    def apply(self, history: History) -> Optional[Prediction]:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class EmptyHistoryRule(Rule):
    name = "empty"

    def __init__(self, default: Outcome):
        self.default = default

    def apply(self, history):
        if history:
            return None
        return Prediction(self.default, WAIT, "Waiting for hands", confidence=0.0)


class DragonRule(Rule):
    name = "dragon"

    def __init__(self, threshold: int = 4):
        self.threshold = threshold

    def apply(self, history):
        streak = leading_streak(history)
        if streak < self.threshold:
            return None
        return Prediction(history[0], DRAGON, f"Streak {streak} Detected")


class CycleRule(Rule):
    name = "cycle"

    def __init__(self, lengths: Sequence[int] = (12, 8, 6, 4, 3)):
        self.lengths = tuple(lengths)

    def apply(self, history):
        for n in self.lengths:
            if block_repeats(history, n):
                # the hand that followed the previous block is the next one now
                return Prediction(history[n - 1], cycle_mode(n), f"{n}-Hand Cycle Matched")
        return None


class PingPongRule(Rule):
    name = "ping-pong"

    def apply(self, history):
        # two-term checks fire on every single switch, so insist on three
        if not alternates(history, terms=3):
            return None
        return Prediction(history[0].opposite(), PING_PONG, "Ping-Pong Detected")


class TransitionRule(Rule):
    """Tell a forming 2-2 cycle from a 2-1 cycle after a same-pair.

    Fires when the current run is one or two hands long and the two hands
    before it are an equal pair (``..BB P`` or ``..BB PP``). The recent window
    is scored for ``XXYY`` and ``XXY`` blocks and the dominant shape decides.
    A tie leaves the decision to later rules.
    """
    name = "transition"

    def __init__(self, window: int = 24, confidence: float = 0.65):
        self.window = window
        self.confidence = confidence

    def apply(self, history):
        streak = leading_streak(history)
        if streak not in (1, 2) or len(history) < streak + 2:
            return None
        a, b = history[streak], history[streak + 1]
        if a != b:
            return None

        score22 = shape_score(history, "XXYY", self.window, start=streak)
        score21 = shape_score(history, "XXY", self.window, start=streak)
        if score22 == score21:
            return None
        scores = f"2-2 score {score22} vs 2-1 score {score21}"
        cur = history[0]

        if score22 > score21:
            if streak == 2:
                return Prediction(cur.opposite(), cycle_mode(4), f"2-2 Confirmed ({scores})")
            return Prediction(cur, cycle_mode(4), f"Entering 2-2 ({scores})", self.confidence)
        return Prediction(cur.opposite(), cycle_mode(3), f"2-1 Transition ({scores})", self.confidence)


class StaticRule(Rule):
    name = "static"

    def __init__(self, pattern: Sequence[Outcome]):
        if not pattern:
            raise ValueError("static pattern must not be empty")
        self.pattern = tuple(pattern)

    def apply(self, history):
        idx = len(history) % len(self.pattern)
        return Prediction(self.pattern[idx], STATIC, "Base Pattern")


def build_rules(
    static_pattern: Sequence[Outcome],
    dragon_threshold: int = 4,
    cycle_lengths: Sequence[int] = (12, 8, 6, 4, 3),
    transition_window: int = 24,
    transition_confidence: float = 0.65,
    transition_before_cycles: bool = False,
) -> list[Rule]:
    static = StaticRule(static_pattern)
    cycles = CycleRule(cycle_lengths)
    transition = TransitionRule(transition_window, transition_confidence)
    rules: list[Rule] = [EmptyHistoryRule(static.pattern[0]), DragonRule(dragon_threshold)]
    if transition_before_cycles:
        rules += [transition, cycles, PingPongRule()]
    else:
        rules += [cycles, PingPongRule(), transition]
    rules.append(static)
    return rules
