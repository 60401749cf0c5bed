import pytest

from crm.hubspot import ABSENT, ConfigurationError, Credentials, env_render, resolve_token


class TestResolveToken:
    def test_api_key_wins_over_oauth_token(self):
        assert resolve_token(Credentials(api_key="key", oauth_token="oauth")) == "key"

    def test_oauth_token_used_without_api_key(self):
        assert resolve_token(Credentials(oauth_token="oauth")) == "oauth"

    def test_blank_api_key_falls_back_to_oauth_token(self):
        assert resolve_token(Credentials(api_key="   ", oauth_token="oauth")) == "oauth"

    def test_api_key_rendering_to_empty_falls_back(self):
        creds = Credentials(api_key="${EMPTY}", oauth_token="${TOKEN}")
        render = lambda v: env_render(v, {"EMPTY": "", "TOKEN": "from-env"})  # noqa: E731
        assert resolve_token(creds, render) == "from-env"

    def test_missing_both_raises(self):
        with pytest.raises(ConfigurationError) as exc:
            resolve_token(Credentials())
        assert "missing required authentication fields" in str(exc.value)

    def test_renderer_returning_none_counts_as_absent(self):
        with pytest.raises(ConfigurationError):
            resolve_token(Credentials(api_key="x"), lambda v: None)

    def test_value_is_stripped(self):
        assert resolve_token(Credentials(api_key="  key \n")) == "key"


class TestCredentialsRepr:
    def test_repr_hides_secrets(self):
        text = repr(Credentials(api_key="super-secret"))
        assert "super-secret" not in text
        assert "api_key=set" in text
        assert "oauth_token=ABSENT" in text

    def test_defaults_are_absent(self):
        c = Credentials()
        assert c.api_key is ABSENT
        assert c.oauth_token is ABSENT
