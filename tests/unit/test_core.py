"""Tests for core data model and strategy infrastructure."""

import dataclasses

import pytest

from param_coerce import (
    ALLOW_MULTI_SELECT,
    DATA_FORMAT,
    TIMEZONE,
    AlwaysMatcher,
    ConversionRequest,
    ConversionStrategy,
    Outcome,
    ParameterDeclaration,
    StrategyMatcher,
    StrategyNode,
    StrategyRegistry,
    TimezoneSpec,
    ValidationResult,
)


class _Fixed(ConversionStrategy):
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0

    def convert(self, request):
        self.calls += 1
        return self.outcome


class _Never(StrategyMatcher):
    def matches(self, request):
        return False


def _request(raw="x", target=str):
    return ConversionRequest(
        declaration=ParameterDeclaration("p", target),
        target_type=target,
        raw_value=raw,
        coercer=None,
    )


class TestTimezoneSpec:
    """Test TimezoneSpec.parse."""

    @pytest.mark.parametrize("text", [None, "", "server"])
    def test_server_default(self, text):
        """Absent, empty and 'server' all mean server."""
        assert TimezoneSpec.parse(text) == TimezoneSpec("server")

    def test_utc_and_client(self):
        """Keywords map to their own kind."""
        assert TimezoneSpec.parse("utc").kind == TimezoneSpec.UTC
        assert TimezoneSpec.parse("client").kind == TimezoneSpec.CLIENT

    def test_named_zone(self):
        """Anything else is a zone id."""
        spec = TimezoneSpec.parse("Europe/Berlin")

        assert spec.kind == TimezoneSpec.NAMED
        assert spec.zone_id == "Europe/Berlin"


class TestParameterDeclaration:
    """Test ParameterDeclaration helpers."""

    def test_scalar_declaration(self):
        """Scalar declarations are their own component type."""
        decl = ParameterDeclaration("limit", int)

        assert decl.is_array is False
        assert decl.component_type is int
        assert decl.allow_multi_select is False

    def test_array_declaration(self):
        """list[X] and tuple[X, ...] expose X as component type."""
        assert ParameterDeclaration("a", list[int]).component_type is int
        assert ParameterDeclaration("b", tuple[str, ...]).component_type is str
        assert ParameterDeclaration("a", list[int]).is_array is True

    def test_multi_select_from_attribute(self):
        """A truthy allowMultiSelect attribute switches the capability on."""
        assert ParameterDeclaration("a", list[str], {ALLOW_MULTI_SELECT: True}).allow_multi_select
        assert ParameterDeclaration("a", list[str], {ALLOW_MULTI_SELECT: "true"}).allow_multi_select
        assert not ParameterDeclaration("a", list[str], {ALLOW_MULTI_SELECT: "false"}).allow_multi_select

    def test_declaration_is_immutable(self):
        """Declarations cannot be changed once built."""
        decl = ParameterDeclaration("a", list[str], {ALLOW_MULTI_SELECT: "true"})

        with pytest.raises(dataclasses.FrozenInstanceError):
            decl.allow_multi_select = False
        assert decl.allow_multi_select is True

    def test_attribute_accessors(self):
        """dataFormat and timezone are read from attributes."""
        decl = ParameterDeclaration("d", str, {DATA_FORMAT: "yyyy-MM-dd", TIMEZONE: "utc"})

        assert decl.data_format == "yyyy-MM-dd"
        assert decl.timezone == TimezoneSpec("utc")
        assert decl.attribute("missing", 7) == 7

    def test_empty_data_format_is_none(self):
        """An empty dataFormat counts as absent."""
        assert ParameterDeclaration("d", str, {DATA_FORMAT: ""}).data_format is None


class TestValidationResult:
    """Test ValidationResult accumulation."""

    def test_starts_empty(self):
        """New result is empty."""
        result = ValidationResult()

        assert result.is_empty
        assert len(result) == 0
        assert result.as_dict() == {}

    def test_append_only(self):
        """Messages accumulate per parameter in order."""
        result = ValidationResult()
        result.add_error("a", "first")
        result.add_error("a", "second")
        result.add_error("b", "other")

        assert result.errors("a") == ["first", "second"]
        assert "b" in result
        assert list(result) == ["a", "b"]
        assert not result.is_empty

    def test_errors_returns_copy(self):
        """Mutating the returned list does not touch the result."""
        result = ValidationResult()
        result.add_error("a", "boom")
        result.errors("a").clear()

        assert result.errors("a") == ["boom"]
        assert result.errors("missing") == []


class TestOutcome:
    """Test Outcome constructors."""

    def test_success(self):
        """success carries a value."""
        outcome = Outcome.success(None)

        assert outcome.ok
        assert outcome.value is None

    def test_failure(self):
        """failure carries a reason."""
        outcome = Outcome.failure("nope")

        assert not outcome.ok
        assert outcome.reason == "nope"


class TestConversionRequest:
    """Test ConversionRequest derived values."""

    def test_text_is_stringified(self):
        """text is str(raw_value)."""
        assert _request(raw=12).text == "12"

    def test_runtime_type_of_alias(self):
        """Parameterised aliases resolve to their origin."""
        assert _request(target=list[int]).runtime_type is list


class TestStrategyRegistry:
    """Test first-success dispatch."""

    def test_priority_order(self):
        """Higher priority wins."""
        registry = StrategyRegistry()
        registry.register(StrategyNode("low", 1, AlwaysMatcher(), _Fixed(Outcome.success("low"))))
        registry.register(StrategyNode("high", 10, AlwaysMatcher(), _Fixed(Outcome.success("high"))))

        assert registry.resolve(_request()).value == "high"
        assert [n.name for n in registry.nodes()] == ["high", "low"]

    def test_failure_falls_through(self):
        """A failed outcome lets the next node try."""
        failing = _Fixed(Outcome.failure("no"))
        registry = StrategyRegistry()
        registry.register(StrategyNode("first", 10, AlwaysMatcher(), failing))
        registry.register(StrategyNode("second", 5, AlwaysMatcher(), _Fixed(Outcome.success(2))))

        assert registry.resolve(_request()).value == 2
        assert failing.calls == 1

    def test_unmatched_node_skipped(self):
        """A node whose matcher rejects the request is never called."""
        skipped = _Fixed(Outcome.success("skipped"))
        registry = StrategyRegistry()
        registry.register(StrategyNode("never", 10, _Never(), skipped))
        registry.register(StrategyNode("always", 0, AlwaysMatcher(), _Fixed(Outcome.success("ok"))))

        assert registry.resolve(_request()).value == "ok"
        assert skipped.calls == 0

    def test_all_fail_returns_last_failure(self):
        """Without a success the last failure is returned."""
        registry = StrategyRegistry()
        registry.register(StrategyNode("a", 2, AlwaysMatcher(), _Fixed(Outcome.failure("a"))))
        registry.register(StrategyNode("b", 1, AlwaysMatcher(), _Fixed(Outcome.failure("b"))))

        outcome = registry.resolve(_request())

        assert not outcome.ok
        assert outcome.reason == "b"

    def test_empty_registry(self):
        """An empty registry reports failure."""
        assert not StrategyRegistry().resolve(_request()).ok
