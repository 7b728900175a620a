"""Locate a token in an incoming HTTP request and hand it to the parser.

Looks, in order, at:
- ``Authorization: Bearer <token>`` (scheme matched case-insensitively)
- the ``access_token`` field of a urlencoded or multipart form body
- the ``access_token`` query parameter

No validation happens here beyond what :meth:`Parser.parse` does.
"""

import logging
from typing import Optional

from starlette.requests import Request

from ..core.config import settings
from ..core.parser import Parser, get_default_parser
from ..core.token import KeyFunc, Token
from ..exceptions import TokenNotFoundError

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "
_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def parse_from_request(
    request: Request,
    key_func: KeyFunc,
    parser: Optional[Parser] = None,
) -> Token:
    """Find the token in *request* and parse it.

    Raises:
        TokenNotFoundError: If no location holds a token.
        ValidationError: If the token found does not validate.
    """
    token_string = await extract_token_string(request)
    if token_string is None:
        raise TokenNotFoundError()
    return (parser or get_default_parser()).parse(token_string, key_func)


async def extract_token_string(request: Request) -> Optional[str]:
    """Return the raw token string carried by *request*, or ``None``."""
    auth_header = request.headers.get("authorization")
    if auth_header and auth_header[:len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
        return auth_header[len(_BEARER_PREFIX):].strip()

    param = settings.access_token_param

    form_value = await _form_value(request, param)
    if form_value:
        return form_value

    query_value = request.query_params.get(param)
    if query_value:
        return query_value

    return None


async def _form_value(request: Request, param: str) -> Optional[str]:
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type not in _FORM_CONTENT_TYPES:
        return None

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_form_bytes:
        logger.warning(
            "Form body too large to search for a token",
            extra={"content_length": int(content_length), "limit": settings.max_form_bytes},
        )
        return None

    form = await request.form()
    value = form.get(param)
    return value if isinstance(value, str) and value else None
