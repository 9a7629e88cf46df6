from typing import Sequence

from sniper.analytics.rules import Rule, build_rules
from sniper.config import Settings, settings
from sniper.core.types import Outcome, History, Prediction


class PatternDetector:
    """Runs the rule table in order; the first rule that answers wins.

    The last rule must always answer, which keeps ``predict`` total.
    """

    def __init__(self, rules: Sequence[Rule]):
        if not rules:
            raise ValueError("at least one rule is required")
        self.rules = tuple(rules)

    @classmethod
    def from_settings(cls, cfg: Settings) -> "PatternDetector":
        return cls(build_rules(
            static_pattern=[Outcome(s) for s in cfg.static_pattern],
            dragon_threshold=cfg.dragon_threshold,
            cycle_lengths=cfg.cycle_lengths,
            transition_window=cfg.transition_window,
            transition_confidence=cfg.transition_confidence,
            transition_before_cycles=cfg.transition_before_cycles,
        ))

    def predict(self, history: History) -> Prediction:
        for rule in self.rules:
            out = rule.apply(history)
            if out is not None:
                return out
        raise RuntimeError(f"no rule answered for a history of {len(history)} hands")

    def rule_names(self) -> list[str]:
        return [r.name for r in self.rules]


_default = PatternDetector.from_settings(settings)


def predict(history: History) -> Prediction:
    return _default.predict(history)
