from dataclasses import dataclass, asdict
from enum import Enum


class Outcome(str, Enum):
    P = "P"
    B = "B"

    def opposite(self) -> "Outcome":
        return Outcome.B if self is Outcome.P else Outcome.P


History = list[Outcome]

# mode tags shown to the client; purely descriptive
WAIT = "WAIT"
DRAGON = "DRAGON"
PING_PONG = "PING-PONG"
STATIC = "STATIC"
CYCLE_NAMES = {
    3: "2-1 CYCLE",
    4: "2-2 CYCLE",
    6: "3-3 CYCLE",
    8: "4-4 CYCLE",
    12: "6-6 CYCLE",
}


def cycle_mode(length: int) -> str:
    return CYCLE_NAMES.get(length, f"CYCLE-{length}")


@dataclass(frozen=True)
class Prediction:
    predicted: Outcome
    mode: str
    reason: str
    confidence: float = 1.0

    def as_dict(self) -> dict:
        d = asdict(self)
        d["predicted"] = self.predicted.value
        return d
