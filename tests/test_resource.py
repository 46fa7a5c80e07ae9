"""Tests for Unstructured documents and field paths."""

import pytest

from composefn.errors import FieldPathError
from composefn.resource import DesiredComposed, Ready, Unstructured, parse_field_path


class TestParseFieldPath:
    def test_dotted(self):
        assert parse_field_path("spec.image") == ["spec", "image"]

    def test_indices(self):
        assert parse_field_path("spec.containers[0].name") == ["spec", "containers", 0, "name"]

    def test_nested_indices(self):
        assert parse_field_path("a[1][2]") == ["a", 1, 2]

    @pytest.mark.parametrize("path", ["", ".spec", "spec.", "spec..image", "spec[x]", "a[0]b"])
    def test_malformed(self, path):
        with pytest.raises(FieldPathError):
            parse_field_path(path)


class TestUnstructured:
    def test_identity_fields(self, composite):
        assert composite.api_version == "example.org/v1alpha1"
        assert composite.kind == "XApp"
        assert composite.name == "web"
        assert composite.namespace == "prod"

    def test_identity_fields_missing(self):
        doc = Unstructured({"metadata": "not-a-map"})
        assert doc.api_version == ""
        assert doc.kind == ""
        assert doc.name == ""
        assert doc.namespace == ""

    def test_identity_fields_non_string(self):
        doc = Unstructured({
            "apiVersion": 1,
            "kind": ["XApp"],
            "metadata": {"name": 123, "namespace": True},
        })
        assert doc.api_version == ""
        assert doc.kind == ""
        assert doc.name == ""
        assert doc.namespace == ""

    def test_get_string(self, composite):
        assert composite.get_string("spec.image") == "nginx"

    def test_get_value_nested(self, composite):
        assert composite.get_value("spec.unrelated") == {"x": 1}

    def test_get_value_list(self):
        doc = Unstructured({"spec": {"items": [{"name": "a"}, {"name": "b"}]}})
        assert doc.get_string("spec.items[1].name") == "b"

    def test_missing_field(self, composite):
        with pytest.raises(FieldPathError) as exc:
            composite.get_string("spec.missing")
        assert exc.value.path == "spec.missing"
        assert "no such field" in str(exc.value)

    def test_index_out_of_range(self):
        doc = Unstructured({"items": []})
        with pytest.raises(FieldPathError, match="no such element"):
            doc.get_value("items[0]")

    def test_index_into_object(self, composite):
        with pytest.raises(FieldPathError, match="not an array"):
            composite.get_value("spec[0]")

    def test_key_into_scalar(self, composite):
        with pytest.raises(FieldPathError, match="not an object"):
            composite.get_value("spec.image.repo")

    def test_get_string_wrong_type(self):
        doc = Unstructured({"spec": {"image": 42}})
        with pytest.raises(FieldPathError, match="not a string: int"):
            doc.get_string("spec.image")

    def test_to_dict_is_a_copy(self, composite):
        copied = composite.to_dict()
        copied["spec"]["image"] = "changed"
        assert composite.get_string("spec.image") == "nginx"

    def test_equality(self, composite_doc):
        assert Unstructured(composite_doc) == Unstructured(dict(composite_doc))
        assert Unstructured(composite_doc) != Unstructured({})


class TestDesiredComposed:
    def test_defaults(self):
        dc = DesiredComposed()
        assert dc.resource == Unstructured({})
        assert dc.ready == Ready.UNSPECIFIED
