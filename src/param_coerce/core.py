"""Core data model, strategy abstractions, registry, and the Coercer.

This module owns every *interface* in the system.  Concrete strategies and
matchers live in ``strategies`` / ``matchers``; assembly happens in
``factory``.

Execution flow (``Coercer.apply`` entry point)::

    declarations + inputs
      │
      ▼
    for declaration in inject_additional_parameters(declarations):
        raw = inputs[name]                      ← absent ⇒ skipped
        value = coerce(declaration, raw)        ← single vs. multi-valued
                  └── convert(declaration, target, element)
                         └── StrategyRegistry.resolve(request)
                                empty → identity → table → date
                                → pattern → registry → passthrough
        sink[name] = value                      ← or error recorded
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Sequence,
    TYPE_CHECKING,
    get_args,
    get_origin,
)

from .errors import CoercionError, ConversionError, SchemaError

if TYPE_CHECKING:
    from .converters import ConverterRegistry
    from .dates import DateParsingCascade
    from .patterns import PatternFormatter

logger = logging.getLogger(__name__)

#: Attribute carrying a locale-aware numeric or date pattern.
DATA_FORMAT = "dataFormat"
#: Attribute carrying the timezone policy: ``server|utc|client|<zoneId>``.
TIMEZONE = "timezone"
#: Attribute flagging a list declaration that accepts several selections.
ALLOW_MULTI_SELECT = "allowMultiSelect"


# ─────────────────────────────────────────────────────────────────────────────
# Private helpers
# ─────────────────────────────────────────────────────────────────────────────


def runtime_type(tp: Any) -> Any:
    """``list[int]`` → ``list``; plain classes are returned as-is."""
    return get_origin(tp) or tp


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _is_collection(value: Any) -> bool:
    return isinstance(value, Collection) and not isinstance(value, (str, bytes, bytearray, Mapping))


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


# ─────────────────────────────────────────────────────────────────────────────
# Data model
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimezoneSpec:
    """How a naive date/time string is placed on the clock.

    ``kind`` is one of ``server``, ``utc``, ``client`` or ``named``; only
    ``named`` carries a ``zone_id``.  Absent and empty specs mean ``server``.
    """

    kind: str
    zone_id: Optional[str] = None

    SERVER = "server"
    UTC = "utc"
    CLIENT = "client"
    NAMED = "named"

    @classmethod
    def parse(cls, text: Optional[str]) -> 'TimezoneSpec':
        if text is None or text == "" or text == cls.SERVER:
            return cls(cls.SERVER)
        if text in (cls.UTC, cls.CLIENT):
            return cls(text)
        return cls(cls.NAMED, text)


@dataclass(frozen=True)
class ParameterDeclaration:
    """Schema entry for one expected input.

    Attributes:
        name:               Unique key in both the inputs and the sink.
        value_type:         Target class (``int``, ``Decimal``, ``datetime``…)
                            or an array alias such as ``list[int]``.
        attributes:         Named attributes (``dataFormat``, ``timezone``,
                            ``allowMultiSelect``, or anything else).
        allow_multi_select: Multi-select capability.  Also switched on by a
                            truthy ``allowMultiSelect`` attribute.
    """

    name: str
    value_type: Any
    attributes: Mapping[str, Any] = field(default_factory=dict)
    allow_multi_select: bool = False

    def __post_init__(self) -> None:
        if _truthy(self.attributes.get(ALLOW_MULTI_SELECT, False)):
            object.__setattr__(self, "allow_multi_select", True)

    def attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    @property
    def is_array(self) -> bool:
        return get_origin(self.value_type) in (list, tuple)

    @property
    def component_type(self) -> Any:
        """Element type of an array declaration, else ``value_type`` itself."""
        if self.is_array:
            args = get_args(self.value_type)
            return args[0] if args else object
        return self.value_type

    @property
    def data_format(self) -> Optional[str]:
        return self.attributes.get(DATA_FORMAT) or None

    @property
    def timezone(self) -> TimezoneSpec:
        return TimezoneSpec.parse(self.attributes.get(TIMEZONE))


class ValidationResult:
    """Per-parameter error messages, in the order they were recorded.

    Append-only: entries are never removed.  An empty result means every
    parameter that was present in the inputs converted successfully.
    """

    def __init__(self) -> None:
        self._errors: Dict[str, List[str]] = {}

    def add_error(self, name: str, message: str) -> None:
        self._errors.setdefault(name, []).append(message)

    def errors(self, name: str) -> List[str]:
        return list(self._errors.get(name, ()))

    @property
    def is_empty(self) -> bool:
        return not self._errors

    def as_dict(self) -> Dict[str, List[str]]:
        return {name: list(messages) for name, messages in self._errors.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._errors

    def __iter__(self) -> Iterator[str]:
        return iter(self._errors)

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"ValidationResult({self._errors!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Strategy system — priority-ordered, first-success dispatch
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Outcome:
    """Result of one conversion attempt.

    A failure is an expected, non-exceptional event: it tells the caller to
    try the next strategy.  ``reason`` is only used for debug logging and for
    the message of the final error when everything failed.
    """

    value: Any = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: Any) -> 'Outcome':
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> 'Outcome':
        return cls(reason=reason)


@dataclass
class ConversionRequest:
    """Everything a strategy needs to convert one scalar.

    Attributes:
        declaration: The parameter being converted.
        target_type: Element type for multi-valued parameters, else the
                     declared type.
        raw_value:   The untouched input scalar.
        coercer:     Back-reference to the owning Coercer (gives access to
                     ``converters``, ``formatter`` and ``cascade``).
    """

    declaration: ParameterDeclaration
    target_type: Any
    raw_value: Any
    coercer: 'Coercer'

    @functools.cached_property
    def text(self) -> str:
        return str(self.raw_value)

    @property
    def runtime_type(self) -> Any:
        return runtime_type(self.target_type)


class StrategyMatcher(ABC):
    """Predicate: is this strategy applicable to the request at all?"""

    @abstractmethod
    def matches(self, request: ConversionRequest) -> bool: ...


class ConversionStrategy(ABC):
    """Convert a single scalar.

    Return ``Outcome.failure`` to let the next strategy try; raise only when
    the failure must end the whole conversion (see ``RegistryStrategy``).
    """

    @abstractmethod
    def convert(self, request: ConversionRequest) -> Outcome: ...


@dataclass
class StrategyNode:
    """One entry of the strategy registry."""

    name: str
    priority: int
    matcher: StrategyMatcher
    strategy: ConversionStrategy


class StrategyRegistry:
    """Flat registry with *first-success* dispatch.

    ``resolve`` walks nodes by descending priority.  Nodes whose matcher
    rejects the request are skipped; a strategy returning a failed
    ``Outcome`` falls through to the next node.  The first success wins.

    ::

        outcome = registry.resolve(request)
    """

    def __init__(self) -> None:
        self._nodes: List[StrategyNode] = []

    def register(self, node: StrategyNode) -> None:
        """Add a node to the registry."""
        self._nodes.append(node)

    def nodes(self) -> List[StrategyNode]:
        """Return nodes sorted by descending priority."""
        return sorted(self._nodes, key=lambda n: n.priority, reverse=True)

    def resolve(self, request: ConversionRequest) -> Outcome:
        """Return the first successful outcome, or the last failure."""
        outcome = Outcome.failure("no strategy matched")
        for node in self.nodes():
            if not node.matcher.matches(request):
                continue
            outcome = node.strategy.convert(request)
            if outcome.ok:
                return outcome
            logger.debug(
                "strategy %s declined parameter %s (%r): %s",
                node.name, request.declaration.name, request.text, outcome.reason,
            )
        return outcome


# ─────────────────────────────────────────────────────────────────────────────
# Coercer — orchestrator / public entry point
# ─────────────────────────────────────────────────────────────────────────────


class Coercer:
    """Batch applier, value coercer, and type converter in one object.

    Holds only read-only collaborators, so one instance may serve any number
    of concurrent ``apply`` calls.  Each call owns its ``ValidationResult``.

    * ``apply``   – convert every declared parameter present in *inputs* and
                    write it to *sink*; collect per-parameter failures.
    * ``coerce``  – single- vs. multi-valued handling for one parameter.
    * ``convert`` – one scalar to one target type via the strategy registry.
    """

    def __init__(
            self,
            *,
            strategies: StrategyRegistry,
            converters: 'ConverterRegistry',
            formatter: 'PatternFormatter',
            cascade: 'DateParsingCascade',
    ) -> None:
        self.strategies = strategies
        self.converters = converters
        self.formatter = formatter
        self.cascade = cascade

    # -- batch --------------------------------------------------------------

    def apply(
            self,
            declarations: Iterable[ParameterDeclaration],
            inputs: Optional[Mapping[str, Any]],
            *,
            sink: MutableMapping[str, Any],
            result: Optional[ValidationResult] = None,
    ) -> ValidationResult:
        """Coerce *inputs* against *declarations*, writing successes to *sink*.

        A failing parameter gets its message appended to the result and the
        batch continues.  ``SchemaError`` is not recorded: it propagates.
        """
        if result is None:
            result = ValidationResult()
        if inputs is None:
            return result

        for declaration in self.inject_additional_parameters(list(declarations)):
            name = declaration.name
            if name not in inputs:
                continue
            raw = inputs[name]
            try:
                value = self.coerce(declaration, raw)
            except SchemaError:
                raise
            except CoercionError as exc:
                logger.warning("Unable to apply parameter %s", name, exc_info=True)
                result.add_error(name, str(exc))
                continue
            sink[name] = value
            logger.info("Parameter %s: input %r converted to %r", name, raw, value)
        return result

    def inject_additional_parameters(
            self, declarations: Sequence[ParameterDeclaration],
    ) -> Sequence[ParameterDeclaration]:
        """Hook for subclasses that add synthetic declarations to a batch."""
        return declarations

    # -- single parameter ---------------------------------------------------

    def coerce(self, declaration: ParameterDeclaration, raw_value: Any) -> Any:
        """Convert one raw input according to its declaration.

        Multi-select parameters always yield a ``list``, even for a single
        scalar.  Any array input yields a ``list`` of converted elements.
        """
        if raw_value is None:
            # there are still malformed schemas out there
            return None

        allow_multi = declaration.allow_multi_select
        if allow_multi and _is_collection(raw_value):
            return self._convert_elements(declaration, raw_value)
        if _is_array(raw_value):
            return self._convert_elements(declaration, raw_value)
        if allow_multi:
            return self.coerce(declaration, [raw_value])
        return self.convert(declaration, declaration.value_type, raw_value)

    def _convert_elements(self, declaration: ParameterDeclaration, values: Iterable[Any]) -> List[Any]:
        component = declaration.component_type
        return [self.convert(declaration, component, v) for v in values]

    def convert(self, declaration: ParameterDeclaration, target_type: Any, raw_value: Any) -> Any:
        """Convert a scalar to *target_type*.

        Raises ``SchemaError`` when *target_type* is unset and
        ``ConversionError`` when the registry converter rejects the value.
        """
        if target_type is None:
            raise SchemaError(f"parameter {declaration.name!r} declares no value type")
        if raw_value is None:
            return None

        request = ConversionRequest(
            declaration=declaration,
            target_type=target_type,
            raw_value=raw_value,
            coercer=self,
        )
        outcome = self.strategies.resolve(request)
        if not outcome.ok:
            raise ConversionError(declaration.name, request.text)
        return outcome.value
