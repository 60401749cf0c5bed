import pytest

from crm.hubspot import ABSENT, ConfigurationError, identity_render
from crm.hubspot.rendering import env_render, render_list, render_map, render_string, render_value


class TestAbsent:
    def test_absent_is_falsy_singleton(self):
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
        assert type(ABSENT)() is ABSENT


class TestEnvRender:
    def test_expands_references(self):
        assert env_render("Bearer ${TOKEN}", {"TOKEN": "abc"}) == "Bearer abc"

    def test_renders_nested_structures(self):
        env = {"A": "1", "B": "2"}
        assert env_render({"x": ["${A}", {"y": "${B}"}]}, env) == {"x": ["1", {"y": "2"}]}

    def test_undefined_variable_raises(self):
        with pytest.raises(ConfigurationError):
            env_render("${NOPE}", {})

    def test_non_strings_pass_through(self):
        assert env_render(5, {}) == 5
        assert env_render(None, {}) is ABSENT


class TestRenderValue:
    def test_absent_short_circuits_without_calling_renderer(self):
        def boom(_):
            raise AssertionError("renderer must not be called")

        assert render_value(boom, ABSENT, field="x") is ABSENT

    def test_renderer_failure_names_field(self):
        def boom(_):
            raise KeyError("nope")

        with pytest.raises(ConfigurationError) as exc:
            render_value(boom, "v", field="query")
        assert exc.value.field == "query"

    def test_configuration_error_gets_field(self):
        with pytest.raises(ConfigurationError) as exc:
            render_value(lambda v: env_render(v, {}), "${MISSING}", field="api_key")
        assert exc.value.field == "api_key"

    def test_render_string_stringifies(self):
        assert render_string(identity_render, 42, field="id") == "42"

    def test_render_list_rejects_scalars(self):
        with pytest.raises(ConfigurationError):
            render_list(identity_render, "a,b", field="properties")

    def test_render_map_rejects_lists(self):
        with pytest.raises(ConfigurationError) as exc:
            render_map(identity_render, ["a"], field="additional_properties")
        assert exc.value.field == "additional_properties"
