import logging
from fastapi import HTTPException, status
from marquee.core.exceptions import BaseAppException, InvalidCredentialsException

logger = logging.getLogger(__name__)

def handle_exception(e: Exception) -> HTTPException:
    """Handle exceptions and convert to HTTPException"""
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, InvalidCredentialsException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(e, BaseAppException):
        return HTTPException(
            status_code=e.status_code,
            detail=e.message
        )
    logger.exception("Unhandled error")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An internal server error occurred"
    )
