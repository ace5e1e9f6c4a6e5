from __future__ import annotations

from typing import NoReturn

from fastapi import HTTPException
from services.api.app.services.errors import (
    InvalidOrderStatusError,
    InvariantViolationError,
    OrderNotAppendableError,
    ReferenceNotFoundError,
    TransientStoreError,
)
from services.api.app.services.payment_base import PaymentGatewayError
from sqlalchemy.exc import OperationalError


def raise_engine_http_error(e: Exception) -> NoReturn:
    if isinstance(e, ReferenceNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, OrderNotAppendableError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, (InvariantViolationError, InvalidOrderStatusError)):
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(e, (TransientStoreError, OperationalError)):
        raise HTTPException(status_code=503, detail=str(e)) from e

    if isinstance(e, PaymentGatewayError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e
