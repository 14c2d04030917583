from pathlib import Path

from openapi_tryout.parser.openapi import load_document
from openapi_tryout.synth.refs import resolve_ref

FIXTURES = Path(__file__).parent / "fixtures"

ROOT = {
    "components": {
        "schemas": {
            "Pet": {"type": "object", "properties": {"name": {"type": "string"}}},
            "a/b": {"type": "string"},
        },
        "list": [{"type": "integer"}],
    },
    "scalar": 5,
}


class TestResolveRef:
    def test_resolves_pointer(self):
        assert resolve_ref("#/components/schemas/Pet", ROOT) is ROOT["components"]["schemas"]["Pet"]

    def test_deeply_nested(self):
        node = resolve_ref("#/components/schemas/Pet/properties/name", ROOT)
        assert node == {"type": "string"}

    def test_empty_ref(self):
        assert resolve_ref("", ROOT) is None

    def test_non_local_ref(self):
        assert resolve_ref("other.yaml#/components/schemas/Pet", ROOT) is None
        assert resolve_ref("https://example.com/schema.json", ROOT) is None

    def test_missing_segment(self):
        assert resolve_ref("#/components/schemas/Missing", ROOT) is None

    def test_indexing_into_scalar(self):
        assert resolve_ref("#/scalar/field", ROOT) is None

    def test_list_index(self):
        assert resolve_ref("#/components/list/0", ROOT) == {"type": "integer"}
        assert resolve_ref("#/components/list/3", ROOT) is None

    def test_escaped_segment(self):
        assert resolve_ref("#/components/schemas/a~1b", ROOT) == {"type": "string"}

    def test_no_root(self):
        assert resolve_ref("#/components", None) is None

    def test_document_root(self):
        doc = load_document(FIXTURES / "petstore.yaml")
        owner = resolve_ref("#/components/schemas/Owner", doc)
        assert owner["properties"]["id"]["default"] == 7

    def test_document_paths_pointer(self):
        doc = load_document(FIXTURES / "petstore.yaml")
        get_op = resolve_ref("#/paths/~1pets/get", doc)
        assert get_op["summary"] == "List all pets"
