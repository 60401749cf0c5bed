# crm/hubspot/redaction.py
from __future__ import annotations

import re
from typing import List, Tuple

MASK = "[REDACTED]"

# JSON keys whose string values never leave the process
SECRET_KEYS = ("access_token", "refresh_token", "api_key", "apikey", "oauth_token", "hapikey", "authorization")

_RULES: List[Tuple["re.Pattern[str]", str]] = [
    (
        re.compile(r'("(?:%s)"\s*:\s*")[^"]*(")' % "|".join(map(re.escape, SECRET_KEYS)), re.IGNORECASE),
        r"\g<1>%s\g<2>" % MASK,
    ),
    # header dumps: "Authorization: Bearer pat-..."
    (re.compile(r"(bearer\s+)[^\s\"',}]+", re.IGNORECASE), r"\g<1>%s" % MASK),
    # legacy query-string auth
    (re.compile(r"((?:hapikey|access_token)=)[^&\s\"']+", re.IGNORECASE), r"\g<1>%s" % MASK),
]


def redact_text(text: str, max_len: int = 2000) -> str:
    """Masks credentials in a response/request excerpt and cuts it to `max_len`."""
    if not text:
        return ""
    for pattern, replacement in _RULES:
        text = pattern.sub(replacement, text)
    return text[:max_len]


def mask_token(token: str) -> str:
    """`****abcd` style preview for confirmation messages."""
    if not token:
        return ""
    return "****" + (token[-4:] if len(token) > 4 else "")
