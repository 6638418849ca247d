import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# logging itself is configured in main.py
logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        logger.info("Request: %s %s", request.method, request.url.path)

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info("Response: %s - %.4fs", response.status_code, process_time)
        return response
