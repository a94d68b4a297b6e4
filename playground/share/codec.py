"""Share-link codec — (language, code) snapshots to and from URL-safe tokens.

Token format: URL-safe base64 (padding stripped) of the UTF-8 JSON object
``{"language": ..., "code": ..., "timestamp": ISO-8601}``.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel, Field, ValidationError

from playground.state.schema import Language
from playground.utils.errors import ShareTokenError

SHARE_QUERY_PARAM = "shared"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShareToken:
    """Transportable snapshot of a session's language and source text."""

    language: Language
    code: str
    created_at: datetime = field(default_factory=_utcnow)


class SharePayload(BaseModel):
    """Wire shape of a decoded token."""

    language: Language
    code: str = Field(..., min_length=1)
    timestamp: Optional[datetime] = None


def encode_share_token(token: ShareToken) -> str:
    payload = {
        "language": token.language.value,
        "code": token.code,
        "timestamp": token.created_at.isoformat(),
    }
    # surrogatepass keeps lone surrogates from an editor buffer encodable
    raw = json.dumps(payload, ensure_ascii=False).encode("utf-8", errors="surrogatepass")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_share_token(value: str) -> ShareToken:
    """Decode a token.

    Accepts the standard or URL-safe alphabet, padded or not.

    Raises:
        ShareTokenError: for anything that is not a well-formed token.
    """
    text = (value or "").strip()
    if not text:
        raise ShareTokenError("Share token is empty", token=value)

    normalized = text.replace("-", "+").replace("_", "/")
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ShareTokenError(f"Share token is not valid base64: {e}", token=value) from e

    try:
        data = json.loads(raw.decode("utf-8", errors="surrogatepass"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ShareTokenError(f"Share token is not valid JSON: {e}", token=value) from e

    if not isinstance(data, dict):
        raise ShareTokenError("Share token payload is not an object", token=value)

    try:
        payload = SharePayload.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ShareTokenError(f"Share token payload is invalid: {fields}", token=value) from e

    return ShareToken(
        language=payload.language,
        code=payload.code,
        created_at=payload.timestamp or _utcnow(),
    )


def build_share_url(base_url: str, token: str) -> str:
    """Append ``shared=<token>`` to base_url, keeping any other query parameters."""
    parts = urlsplit(base_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != SHARE_QUERY_PARAM]
    query.append((SHARE_QUERY_PARAM, token))
    return urlunsplit(parts._replace(query=urlencode(query)))
