import json

import pytest

from reqmd.errors import ProcessorError
from reqmd.parser.address import Address, Scheme
from reqmd.parser.base import BodyData, Method, Point, Span
from reqmd.parser.multimap import Headers, QueryString
from reqmd.processor.env_overrides import EnvOverrides
from reqmd.processor.env_substitution import EnvSubstitution, expand
from reqmd.processor.host_header import HostHeader
from reqmd.processor.pipeline import Pipeline, default_pipeline
from reqmd.processor.yaml_as_json import YamlAsJson
from reqmd.request import Request

POSITION = Span(start=Point(line=1, column=1, offset=0), end=Point(line=3, column=4, offset=20))


def _request(**kwargs) -> Request:
    kwargs.setdefault("position", POSITION)
    return Request(**kwargs)


class TestEnvOverrides:
    def test_server_is_replaced(self):
        processor = EnvOverrides({"REQMD_SERVER": "https://staging.example.com"})
        result = processor.apply(_request())
        assert result.address.url == "https://staging.example.com"

    def test_existing_entries_are_overwritten_in_place(self):
        request = _request(
            headers=Headers.of([("x-api-key", "old"), ("Accept", "*/*"), ("X-Api-Key", "older")]),
        )
        result = EnvOverrides({"REQMD_HEADER_X-Api-Key": "new"}).apply(request)
        assert result.headers.pairs() == [("x-api-key", "new"), ("Accept", "*/*"), ("X-Api-Key", "new")]

    def test_missing_entries_are_appended(self):
        request = _request(query=QueryString.of([("page", "1")]))
        result = EnvOverrides({"REQMD_QUERY_debug": "true"}).apply(request)
        assert result.query.pairs() == [("page", "1"), ("debug", "true")]

    def test_query_keys_are_case_sensitive(self):
        request = _request(query=QueryString.of([("Debug", "0")]))
        result = EnvOverrides({"REQMD_QUERY_debug": "1"}).apply(request)
        assert result.query.pairs() == [("Debug", "0"), ("debug", "1")]

    def test_custom_prefix(self):
        processor = EnvOverrides({"API_SERVER": "http://other:9000", "REQMD_SERVER": "http://x"}, prefix="API_")
        assert processor.apply(_request()).address.url == "http://other:9000"

    def test_unrelated_variables_change_nothing(self):
        request = _request()
        assert EnvOverrides({"HOME": "/root", "REQMD_OTHER": "x"}).apply(request) is request

    def test_input_is_not_modified(self):
        request = _request(headers=Headers.of([("A", "1")]))
        EnvOverrides({"REQMD_HEADER_A": "2"}).apply(request)
        assert request.headers.pairs() == [("A", "1")]

    def test_invalid_server(self):
        with pytest.raises(ProcessorError, match="env-overrides"):
            EnvOverrides({"REQMD_SERVER": "not a url"}).apply(_request())


class TestEnvSubstitution:
    def test_expand(self):
        assert expand("Bearer $TOKEN", {"TOKEN": "abc"}) == "Bearer abc"

    def test_unset_variable_is_left_alone(self):
        assert expand("Hello $FIRST_NAME!", {}) == "Hello $FIRST_NAME!"

    def test_name_stops_at_non_identifier(self):
        assert expand("$A-$B.json", {"A": "1", "B": "2"}) == "1-2.json"

    def test_everything_is_expanded(self):
        request = _request(
            path="/users/$USER_ID",
            query=QueryString.of([("key", "$API_KEY")]),
            headers=Headers.of([("Authorization", "Bearer $TOKEN")]),
            body=BodyData(content='{"name": "$FIRST_NAME"}', lang="json"),
        )
        environ = {"USER_ID": "7", "API_KEY": "k", "TOKEN": "t", "FIRST_NAME": "John"}
        result = EnvSubstitution(environ).apply(request)
        assert result.path == "/users/7"
        assert result.query.pairs() == [("key", "k")]
        assert result.headers.pairs() == [("Authorization", "Bearer t")]
        assert result.body.content == '{"name": "John"}'
        assert request.path == "/users/$USER_ID"

    def test_missing_body_is_fine(self):
        result = EnvSubstitution({"X": "1"}).apply(_request())
        assert result.body.content is None


class TestYamlAsJson:
    def test_converts_marked_yaml(self):
        request = _request(body=BodyData(content="first_name: John", lang="yaml", meta="send-as-json"))
        result = YamlAsJson().apply(request)
        assert result.body.content == '{"first_name":"John"}'
        assert result.body.lang == "json"

    def test_yml_and_case(self):
        request = _request(body=BodyData(content="a: [1, 2]", lang="YML", meta="pretty SEND-AS-JSON"))
        assert json.loads(YamlAsJson().apply(request).body.content) == {"a": [1, 2]}

    def test_unmarked_yaml_is_untouched(self):
        request = _request(body=BodyData(content="first_name: John", lang="yaml"))
        assert YamlAsJson().apply(request) is request

    def test_other_languages_are_untouched(self):
        request = _request(body=BodyData(content="x", lang="json", meta="send-as-json"))
        assert YamlAsJson().apply(request) is request

    def test_invalid_yaml(self):
        request = _request(body=BodyData(content="a: [unclosed", lang="yaml", meta="send-as-json"))
        with pytest.raises(ProcessorError, match="invalid YAML body"):
            YamlAsJson().apply(request)


class TestHostHeader:
    def test_without_host_nothing_changes(self):
        request = _request()
        assert HostHeader().apply(request) is request

    def test_bare_host_keeps_server(self):
        request = _request(
            address=Address.parse("https://10.0.0.5:8443"),
            headers=Headers.of([("Host", " api.example.com ")]),
        )
        result = HostHeader().apply(request)
        assert result.address.url == "https://10.0.0.5:8443"
        assert result.headers.first("host") == "api.example.com"

    def test_bare_host_with_port_keeps_server(self):
        request = _request(
            address=Address.parse("https://example.com"),
            headers=Headers.of([("Host", "api.example.com:8443")]),
        )
        result = HostHeader().apply(request)
        assert result.address.url == "https://example.com"
        assert result.headers.first("host") == "api.example.com:8443"

    def test_url_value_is_normalized(self):
        request = _request(headers=Headers.of([("host", "https://api.example.com/")]))
        result = HostHeader().apply(request)
        assert result.address.scheme == Scheme.HTTPS
        assert result.address.host == "api.example.com"
        assert result.headers.pairs() == [("host", "api.example.com")]

    def test_unparseable_value_is_ignored(self):
        request = _request(headers=Headers.of([("Host", "bad host:port")]))
        assert HostHeader().apply(request) is request


class TestPipeline:
    def test_default_order(self):
        names = [p.name for p in default_pipeline({}).processors]
        assert names == ["env-overrides", "env-substitution", "yaml-as-json", "host-header"]

    def test_substitution_sees_overrides(self):
        environ = {"REQMD_HEADER_Host": "$API_HOST", "API_HOST": "api.example.com"}
        request, error = default_pipeline(environ).process(_request())
        assert error is None
        assert request.headers.first("host") == "api.example.com"
        assert request.address.host == "localhost"

    def test_substituted_yaml_becomes_json(self):
        request = _request(
            method=Method.POST,
            body=BodyData(content="first_name: $FIRST_NAME", lang="yaml", meta="send-as-json"),
        )
        result, error = default_pipeline({"FIRST_NAME": "John"}).process(request)
        assert error is None
        assert result.body.content == '{"first_name":"John"}'

    def test_stops_at_first_failure(self):
        request = _request(
            path="/$ID",
            body=BodyData(content="a: [", lang="yaml", meta="send-as-json"),
            headers=Headers.of([("Host", "other.example.com")]),
        )
        result, error = default_pipeline({"ID": "9"}).process(request)
        assert error.processor == "yaml-as-json"
        assert result.path == "/9"
        assert result.address.host == "localhost"

    def test_empty_pipeline(self):
        request = _request()
        result, error = Pipeline().process(request)
        assert result is request
        assert error is None
        assert len(Pipeline()) == 0
