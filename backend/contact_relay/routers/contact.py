import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from contact_relay.core.mailer import DeliveryError, relay_submission
from contact_relay.core.settings import settings
from contact_relay.lib.submission import Submission

log = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["contact"])


@router.post("/send-email")
async def send_email(payload: Submission):
    try:
        await relay_submission(payload)
    except DeliveryError as exc:
        log.error(f"[contact] email error: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to send message",
                "details": str(exc) if settings.is_development else None,
            },
        )
    return {"success": True}
