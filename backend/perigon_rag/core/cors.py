"""Permissive CORS middleware for browser clients."""
from typing import Dict, List, Optional

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware


def cors_headers(allow_origins: List[str], origin: Optional[str] = None) -> Dict[str, str]:
    """Headers for one response; a listed origin is echoed back, never the whole list."""
    headers = {
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
    }
    if "*" in allow_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin in allow_origins:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answers every OPTIONS request with 204 and adds CORS headers to all responses."""

    def __init__(self, app, allow_origins: List[str] = None):
        super().__init__(app)
        self.allow_origins = allow_origins or ["*"]

    async def dispatch(self, request: Request, call_next):
        headers = cors_headers(self.allow_origins, request.headers.get("origin"))
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
