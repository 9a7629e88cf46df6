import logging

from fastapi import APIRouter, Depends, HTTPException, Header, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from sniper.access.controller import AccessController, AccessDenied
from sniper.analytics.detector import PatternDetector
from sniper.api.schemas import PredictIn, PredictOut, VerifyIn, VerifyOut, ResetIn, PatternsIn, PatternsOut
from sniper.core.validation import parse_history, InvalidHistoryError
from sniper.services import predict_for, verify, reset, get_patterns

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def get_controller(request: Request) -> AccessController:
    return request.app.state.controller


def get_detector(request: Request) -> PatternDetector:
    return request.app.state.detector


def _admin(request: Request, token: str | None = Header(default=None, alias="X-Admin-Token")):
    expected = request.app.state.settings.admin_token
    if expected and token != expected:
        raise HTTPException(status_code=401, detail="Invalid admin token")


@router.post('/predict', response_model=PredictOut)
def predict(data: PredictIn,
            controller: AccessController = Depends(get_controller),
            detector: PatternDetector = Depends(get_detector)):
    try:
        history = parse_history(data.history, order=data.order)
    except InvalidHistoryError as e:
        return JSONResponse(status_code=400, content={'error': str(e)})
    try:
        return predict_for(controller, detector, data.key, data.device_id, history)
    except AccessDenied as e:
        return JSONResponse(status_code=403, content={
            'success': False, 'error': e.decision.message, 'code': e.decision.code.name,
        })
    except Exception:
        logger.exception("prediction failed")
        return JSONResponse(status_code=500, content={'error': "Server Calculation Error"})


@router.post('/verify', response_model=VerifyOut)
def verify_key(data: VerifyIn, controller: AccessController = Depends(get_controller)):
    return verify(controller, data.key, data.device_id)


@router.post('/reset', response_class=PlainTextResponse, dependencies=[Depends(_admin)])
def reset_key(data: ResetIn, controller: AccessController = Depends(get_controller)):
    return reset(controller, data.key)


@router.post('/patterns', response_model=PatternsOut)
async def patterns(data: PatternsIn):
    try:
        history = parse_history(data.history, order=data.order)
    except InvalidHistoryError as e:
        raise HTTPException(400, detail=str(e))
    return get_patterns(history, min_run=data.min_run)
