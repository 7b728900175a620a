"""FastAPI dependency that requires a valid token on the request.

Usage::

    require_token = TokenAuth(lambda token: settings.signing_key.encode())

    @app.get("/me")
    def me(token: Token = Depends(require_token)):
        return token.claims
"""

import logging
from typing import Optional

from fastapi import Request

from ..core.parser import Parser
from ..core.token import KeyFunc, Token
from .request import parse_from_request

logger = logging.getLogger(__name__)


class TokenAuth:
    """Callable dependency returning the request's validated token.

    Failures propagate as ``TokenNotFoundError`` or ``ValidationError``;
    register :func:`isotoken_exception_handler` to turn them into 401s.
    """

    def __init__(self, key_func: KeyFunc, parser: Optional[Parser] = None):
        self.key_func = key_func
        self.parser = parser

    async def __call__(self, request: Request) -> Token:
        token = await parse_from_request(request, self.key_func, self.parser)
        logger.debug("Request authenticated", extra={"path": request.url.path, "alg": token.method.alg})
        return token
