"""
OTP Routes
==========
HTTP surface for code issuance and verification.

Error bodies never carry the code, its digest, or attempt counts, and every
verification failure reads the same to the client.
"""

from typing import Any, Dict

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from verify_core.exceptions import (
    InfrastructureError,
    ThrottledError,
    ValidationError,
    VerificationFailed,
)
from verify_core.ip_utils import extract_client_ip
from verify_core.services import OTPIssuanceService, OTPVerificationService

logger = structlog.get_logger(__name__)

INVALID_PHONE_MESSAGE = "Invalid phone number format"
THROTTLED_MESSAGE = "Too many requests. Please try again later."
SEND_FAILED_MESSAGE = "Unable to send code. Please try again later."
INVALID_CODE_MESSAGE = "Invalid verification code"
VERIFY_FAILED_MESSAGE = "Verification failed. Please try again later."


async def _json_body(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def create_otp_router(
    issuance: OTPIssuanceService,
    verification: OTPVerificationService,
    prefix: str = "/api/auth",
) -> APIRouter:
    """
    Create the send/verify router.

    Returns:
        FastAPI router with POST {prefix}/send-otp and POST {prefix}/verify-otp
    """
    router = APIRouter(prefix=prefix, tags=["OTP"])

    @router.post("/send-otp")
    async def send_otp(request: Request):
        body = await _json_body(request)
        client_ip = extract_client_ip(
            request.headers,
            request.client.host if request.client else None,
        )

        try:
            result = await issuance.request_code(body.get("phoneNumber"), client_ip=client_ip)
        except ValidationError as e:
            return JSONResponse(
                {"error": INVALID_PHONE_MESSAGE, "issues": e.issues},
                status_code=400,
            )
        except ThrottledError as e:
            content: Dict[str, Any] = {"error": THROTTLED_MESSAGE}
            headers = {}
            if e.retry_after is not None:
                content["retryAfter"] = e.retry_after
                headers["Retry-After"] = str(e.retry_after)
            return JSONResponse(content, status_code=429, headers=headers)
        except InfrastructureError as e:
            logger.error("OTP request failed", error=e.message, error_type=type(e).__name__)
            return JSONResponse({"error": SEND_FAILED_MESSAGE}, status_code=500)

        return {"message": result.message}

    @router.post("/verify-otp")
    async def verify_otp(request: Request):
        body = await _json_body(request)

        try:
            result = await verification.verify(body.get("phoneNumber"), body.get("otp"))
        except (ValidationError, VerificationFailed):
            return JSONResponse({"error": INVALID_CODE_MESSAGE}, status_code=400)
        except InfrastructureError as e:
            logger.error("OTP verification failed", error=e.message, error_type=type(e).__name__)
            return JSONResponse({"error": VERIFY_FAILED_MESSAGE}, status_code=500)

        return {"message": result.message, "verified": True, "token": result.proof_token}

    return router
