"""Exception handlers exposing pagination errors as Problem Details."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from .problem_details import ProblemDetailException, create_problem_response

logger = logging.getLogger(__name__)


async def problem_detail_exception_handler(
    request: Request,
    exc: ProblemDetailException
) -> JSONResponse:
    """Handle ProblemDetailException instances."""
    logger.info(
        f"Problem detail exception: {exc.status} - {exc.title}",
        extra={
            "status_code": exc.status,
            "path": str(request.url.path),
            "method": request.method,
            "detail": exc.detail
        }
    )
    if exc.status >= 500:
        # Configuration and execution errors are not the client's fault
        return create_problem_response(
            status=exc.status,
            title=exc.title,
            detail="Pagination failed",
            request=request
        )
    return exc.to_response(request)


def register_exception_handlers(app):
    """Register the Problem Details handler with a FastAPI app.

    Pagination errors subclass ProblemDetailException and are routed here too.
    """
    app.add_exception_handler(ProblemDetailException, problem_detail_exception_handler)
