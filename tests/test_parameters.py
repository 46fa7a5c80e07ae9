"""Tests for composite spec validation."""

import pytest

from composefn.errors import FieldReadError
from composefn.parameters import CompositeParameters, parse_parameters
from composefn.resource import Unstructured


def _xr(spec):
    doc = {"apiVersion": "example.org/v1alpha1", "kind": "XApp", "metadata": {"name": "web"}}
    if spec is not None:
        doc["spec"] = spec
    return Unstructured(doc)


class TestParseParameters:
    def test_valid(self, composite):
        params = parse_parameters(composite)
        assert params.image == "nginx"
        assert params.tag == "1.25"
        assert params.image_ref == "nginx:1.25"

    def test_unrelated_fields_ignored(self):
        params = parse_parameters(_xr({"image": "a", "tag": "b", "replicas": 5}))
        assert params == CompositeParameters(image="a", tag="b")

    def test_empty_strings_accepted(self):
        params = parse_parameters(_xr({"image": "", "tag": "latest"}))
        assert params.image_ref == ":latest"

    def test_missing_tag(self):
        with pytest.raises(FieldReadError) as exc:
            parse_parameters(_xr({"image": "nginx"}))
        assert exc.value.field == "spec.tag"
        assert exc.value.fields == ["spec.tag"]
        assert exc.value.kind == "XApp"
        assert str(exc.value).startswith("cannot read spec.tag field of XApp")

    def test_missing_image(self):
        with pytest.raises(FieldReadError) as exc:
            parse_parameters(_xr({"tag": "1.25"}))
        assert exc.value.field == "spec.image"

    def test_all_errors_reported_together(self):
        with pytest.raises(FieldReadError) as exc:
            parse_parameters(_xr({}))
        assert exc.value.field == "spec.image"
        assert exc.value.fields == ["spec.image", "spec.tag"]
        assert "spec.image" in str(exc.value)
        assert "spec.tag" in str(exc.value)

    @pytest.mark.parametrize("value", [1, 1.25, True, None, ["nginx"], {"repo": "nginx"}])
    def test_non_string_rejected(self, value):
        with pytest.raises(FieldReadError) as exc:
            parse_parameters(_xr({"image": value, "tag": "1.25"}))
        assert exc.value.field == "spec.image"

    @pytest.mark.parametrize("spec", [None, "nginx:1.25", ["nginx"]])
    def test_spec_not_a_mapping(self, spec):
        with pytest.raises(FieldReadError) as exc:
            parse_parameters(_xr(spec))
        assert exc.value.fields == ["spec.image", "spec.tag"]
