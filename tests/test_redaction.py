from crm.hubspot.redaction import mask_token, redact_text


def test_redacts_json_tokens():
    out = redact_text('{"access_token": "abc", "api_key": "def", "name": "ok"}')
    assert "abc" not in out
    assert "def" not in out
    assert '"name": "ok"' in out


def test_redacts_bearer_header_and_query():
    out = redact_text("Authorization: Bearer pat-na1-123 url=?hapikey=xyz&limit=1")
    assert "pat-na1-123" not in out
    assert "xyz" not in out
    assert "limit=1" in out


def test_truncates():
    assert len(redact_text("x" * 50, max_len=10)) == 10


def test_mask_token():
    assert mask_token("pat-na1-abcdef") == "****cdef"
    assert mask_token("abc") == "****"
    assert mask_token("") == ""
