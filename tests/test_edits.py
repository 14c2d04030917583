from openapi_tryout.synth.edits import set_auth, set_header, set_param
from openapi_tryout.synth.models import AuthConfig, HeaderRow, ParamRow, RequestModel


def _model() -> RequestModel:
    return RequestModel(
        url="https://api.test/pets/{petId}",
        params=[
            ParamRow(enabled=True, key="petId", value="", param_in="path"),
            ParamRow(enabled=False, key="limit", value="20", param_in="query"),
            ParamRow(),
        ],
        headers=[HeaderRow(enabled=True, key="Accept", value="application/json"), HeaderRow()],
    )


class TestSetParam:
    def test_fills_existing_row(self):
        model = set_param(_model(), "limit", "5")
        limit = model.params[1]
        assert (limit.value, limit.enabled, limit.param_in) == ("5", True, "query")

    def test_new_key_added_before_blank_row(self):
        model = set_param(_model(), "q", "dogs")
        assert [p.key for p in model.params] == ["petId", "limit", "q", ""]
        assert model.params[2].enabled is True
        assert model.params[2].param_in is None

    def test_keeps_single_trailing_blank(self):
        model = set_param(set_param(_model(), "a", "1"), "b", "2")
        assert sum(1 for p in model.params if p.is_blank) == 1
        assert model.params[-1].is_blank

    def test_original_untouched(self):
        original = _model()
        set_param(original, "limit", "5")
        assert original.params[1].value == "20"


class TestSetHeader:
    def test_case_insensitive_match(self):
        model = set_header(_model(), "accept", "text/plain")
        assert model.headers[0].key == "Accept"
        assert model.headers[0].value == "text/plain"
        assert len(model.headers) == 2

    def test_new_header(self):
        model = set_header(_model(), "X-Trace", "abc")
        assert [h.key for h in model.headers] == ["Accept", "X-Trace", ""]


class TestSetAuth:
    def test_keeps_detected_type(self):
        model = _model().model_copy(update={"auth": AuthConfig(type="api-key")})
        model = set_auth(model, api_key="k", token=None)
        assert model.auth.type == "api-key"
        assert model.auth.api_key == "k"

    def test_infers_bearer(self):
        assert set_auth(_model(), token="t").auth.type == "bearer"

    def test_infers_basic(self):
        auth = set_auth(_model(), username="u", password="p").auth
        assert (auth.type, auth.username, auth.password) == ("basic", "u", "p")

    def test_no_credentials(self):
        assert set_auth(_model(), token=None).auth.type == "none"
