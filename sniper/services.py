import logging

from sniper.access.controller import AccessController, AccessDenied
from sniper.analytics.detector import PatternDetector
from sniper.analytics.patterns import runs, alternates, leading_streak, shape_score
from sniper.core.types import History

logger = logging.getLogger(__name__)


def predict_for(controller: AccessController, detector: PatternDetector,
                key: str, device_id: str, history: History) -> dict:
    # predict before charging so a failing rule never costs the user a hand
    pred = detector.predict(history)
    decision = controller.check_and_charge(key, device_id)
    if not decision.allowed:
        raise AccessDenied(decision)
    logger.info("[Hand %d] Prediction: %s (%s)", len(history), pred.predicted.value, pred.mode)
    out = pred.as_dict()
    return {
        'success': True,
        'prediction': out.pop('predicted'),
        **out,
        'status': decision.message,
    }


def verify(controller: AccessController, key: str, device_id: str) -> dict:
    decision = controller.verify_only(key, device_id)
    return {'success': decision.allowed, 'message': decision.message}


def reset(controller: AccessController, key: str) -> str:
    if controller.reset_device(key):
        return f"Device lock cleared for {key}"
    return f"Unknown key {key}"


def get_patterns(history: History, min_run: int = 3, window: int = 24) -> dict:
    streak = leading_streak(history)
    return {
        'hands': len(history),
        'streak': streak,
        'runs': [(s, e, o.value, n) for s, e, o, n in runs(history, k=min_run)],
        'ping_pong': alternates(history, terms=3),
        'score22': shape_score(history, "XXYY", window, start=streak),
        'score21': shape_score(history, "XXY", window, start=streak),
    }
