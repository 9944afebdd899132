"""Tests for component identifiers."""

import pytest

from driftgraph.graph.identifiers import (
    ComponentRef,
    MalformedIdentifier,
    component_key,
    decode_component_id,
    encode_component_id,
    is_malformed,
    short_label,
)


class TestEncode:
    def test_encode(self):
        ref = ComponentRef(domain="core", flow="sys-flows", key="onboarding", version="1.0.0")

        assert encode_component_id(ref) == "core/sys-flows/onboarding@1.0.0"

    def test_str_is_encoded_id(self):
        ref = ComponentRef("core", "sys-tasks", "fetch", "2.1.0")

        assert str(ref) == "core/sys-tasks/fetch@2.1.0"

    def test_short_name(self):
        ref = ComponentRef("core", "sys-tasks", "fetch", "2.1.0")

        assert ref.short_name == "fetch@2.1.0"


class TestDecode:
    def test_decode(self):
        ref = decode_component_id("core/sys-flows/onboarding@1.0.0")

        assert ref == ComponentRef("core", "sys-flows", "onboarding", "1.0.0")

    @pytest.mark.parametrize(
        "ref",
        [
            ComponentRef("core", "sys-flows", "a", "1.0.0"),
            ComponentRef("my-domain", "sys-schemas", "customer.v2", "2.0.0-beta.1"),
            ComponentRef("d", "f", "k", "1.0.0+build@5"),
        ],
    )
    def test_round_trip(self, ref):
        assert decode_component_id(encode_component_id(ref)) == ref

    def test_version_may_contain_at_sign(self):
        ref = decode_component_id("d/f/k@1.0.0@x")

        assert ref.key == "k"
        assert ref.version == "1.0.0@x"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "no-version-here",
            "core/sys-flows/onboarding",
            "core/onboarding@1.0.0",
            "core/sys-flows/@1.0.0",
            "core/sys-flows/onboarding@",
            "/sys-flows/onboarding@1.0.0",
        ],
    )
    def test_malformed_returns_failure_value(self, value):
        result = decode_component_id(value)

        assert isinstance(result, MalformedIdentifier)
        assert result.value == value
        assert result.reason
        assert is_malformed(result)

    def test_non_string_is_malformed(self):
        result = decode_component_id(None)  # type: ignore[arg-type]

        assert isinstance(result, MalformedIdentifier)
        assert "NoneType" in result.reason

    def test_malformed_is_falsy(self):
        assert not decode_component_id("garbage")
        assert decode_component_id("a/b/c@1")

    def test_valid_is_not_malformed(self):
        assert not is_malformed(decode_component_id("a/b/c@1"))


class TestHelpers:
    def test_component_key_drops_version(self):
        ref = ComponentRef("core", "sys-flows", "a", "1.0.0")

        assert component_key(ref) == "core/sys-flows/a"

    def test_short_label(self):
        assert short_label("core/sys-flows/a@1.0.0") == "a@1.0.0"

    def test_short_label_of_malformed_id(self):
        assert short_label("garbage") == "garbage"
