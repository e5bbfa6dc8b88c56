"""
Request Schemas
===============
Pydantic models for the issuance and verification inputs.
"""

import re
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from verify_core.exceptions import ValidationError

E164_PATTERN = r"^\+[1-9]\d{1,14}$"

ModelT = TypeVar("ModelT", bound=BaseModel)


class SendOTPRequest(BaseModel):
    """Body of an issuance request."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    phone_number: str = Field(
        alias="phoneNumber",
        pattern=E164_PATTERN,
        description="Phone number in E.164 format (e.g. +12025550123)",
    )


class VerifyOTPRequest(BaseModel):
    """Body of a verification request."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    phone_number: str = Field(alias="phoneNumber", pattern=E164_PATTERN)
    otp: str = Field(pattern=r"^\d{4,10}$")


def _issues(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    # Drop echoed input and docs URLs; keep what a client needs to fix the field
    return [
        {"path": list(err["loc"]), "message": err["msg"], "code": err["type"]}
        for err in exc.errors(include_url=False)
    ]


def parse_request(model: Type[ModelT], data: Dict[str, Any], message: str) -> ModelT:
    """
    Validate raw request data into a schema.

    Raises:
        ValidationError: with structured issues on mismatch
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(message, issues=_issues(e)) from e


def normalize_phone_key(phone: str) -> str:
    """Stable key form of a phone number: digits and '+' only."""
    return re.sub(r"[^0-9+]", "", phone)
