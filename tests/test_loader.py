from pathlib import Path

import pytest

from specstack.errors import FormatError, InputError
from specstack.parser.loader import detect_format, load_document, parse_document_text

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadDocument:
    def test_load_yaml(self):
        doc = load_document(FIXTURES / "petstore.yaml")
        assert doc["openapi"] == "3.0.0"
        assert "/pets" in doc["paths"]

    def test_load_json(self):
        doc = load_document(FIXTURES / "swagger2.json")
        assert doc["swagger"] == "2.0"

    def test_missing_file(self):
        with pytest.raises(InputError, match="OpenAPI file not found") as exc:
            load_document(FIXTURES / "missing_file.yaml")
        assert exc.value.path == FIXTURES / "missing_file.yaml"

    def test_directory_is_not_a_document(self):
        with pytest.raises(InputError):
            load_document(FIXTURES)

    def test_invalid_yaml(self):
        with pytest.raises(FormatError, match="Failed to parse OpenAPI file:"):
            load_document(FIXTURES / "invalid.yaml")

    def test_undecodable_file(self, tmp_path):
        f = tmp_path / "binary.yaml"
        f.write_bytes(b"\xff\xfe\x00bad")
        with pytest.raises(InputError):
            load_document(f)


class TestParseDocumentText:
    def test_parses_json_text(self):
        assert parse_document_text('{"openapi": "3.1.0"}') == {"openapi": "3.1.0"}

    def test_yaml_11_boolean_words_stay_strings(self):
        doc = parse_document_text("on: 1\noff: 2\nyes: 3\nno: 4\nflag: true\nother: False\n")
        assert doc == {"on": 1, "off": 2, "yes": 3, "no": 4, "flag": True, "other": False}

    def test_reports_source(self):
        with pytest.raises(FormatError, match="inline.yaml"):
            parse_document_text("a: [b", source="inline.yaml")


class TestDetectFormat:
    def test_detect_openapi(self):
        assert detect_format({"openapi": "3.0.0"}) == "openapi3"

    def test_detect_swagger(self):
        assert detect_format({"swagger": "2.0"}) == "swagger2"

    def test_detect_unknown(self):
        assert detect_format({"info": {}}) == "unknown"
        assert detect_format(["not", "a", "mapping"]) == "unknown"
