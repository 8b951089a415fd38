"""Tenant identification from the request host"""

import logging

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..core.context import tenant_scope
from ..domain.exceptions import TenantException
from .errors import error_body

logger = logging.getLogger(__name__)

EXEMPT_PATHS = ("/health", "/docs", "/openapi.json", "/redoc")


class TenantMiddleware(BaseHTTPMiddleware):
    """Resolves the tenant for each request and runs the rest of the stack inside its scope"""

    def __init__(self, app, resolver):
        super().__init__(app)
        self.resolver = resolver

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        host = request.headers.get("host", "")
        try:
            tenant = await self.resolver.resolve(host)
        except TenantException as e:
            return JSONResponse(status_code=e.status_code, content=error_body(e))

        with tenant_scope(tenant):
            response = await call_next(request)
        if tenant is not None:
            response.headers["X-Tenant"] = tenant.subdomain
        return response
