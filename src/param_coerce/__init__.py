"""param_coerce — coerce loosely-typed inputs into declared parameter types.

Public API
----------
Main entry point::

    from param_coerce import build_default_coercer, ParameterDeclaration

    coercer = build_default_coercer(locale="en_US")
    sink = {}
    result = coercer.apply(declarations, inputs, sink=sink)

Core (abstractions, data model, registry, Coercer)::

    from param_coerce import (
        Coercer, ParameterDeclaration, TimezoneSpec, ValidationResult,
        ConversionRequest, Outcome, StrategyNode, StrategyRegistry,
        StrategyMatcher, ConversionStrategy,
    )

Collaborators::

    from param_coerce import ConverterRegistry, PatternFormatter, DateParsingCascade
"""

# -- core ---------------------------------------------------------------
from .core import (
    ALLOW_MULTI_SELECT,
    DATA_FORMAT,
    TIMEZONE,
    Coercer,
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
# -- errors -------------------------------------------------------------
from .errors import (
    CoercionError,
    ConversionError,
    DateParseError,
    PatternParseError,
    SchemaError,
)
# -- collaborators ------------------------------------------------------
from .converters import BUILTIN_CONVERTERS, ConverterRegistry
from .dates import (
    DateAttempt,
    DateOnlyAttempt,
    DateParsingCascade,
    EpochMillisAttempt,
    StrictTimezoneAttempt,
)
from .patterns import PatternFormatter
from .tables import ResultSet, ResultSetTableModel, TableModel
# -- matchers -----------------------------------------------------------
from .matchers import AlwaysMatcher, InstanceMatcher, TargetTypeMatcher
# -- strategies ---------------------------------------------------------
from .strategies import (
    ConverterMatcher,
    DateCascadeStrategy,
    EmptyTextMatcher,
    EmptyTextStrategy,
    IdentityStrategy,
    PatternMatcher,
    PatternStrategy,
    RegistryStrategy,
    TableAdapterStrategy,
    TableMatcher,
)
# -- factory ------------------------------------------------------------
from .factory import build_default_coercer, build_default_strategies

__all__ = [
    # core
    "ALLOW_MULTI_SELECT",
    "DATA_FORMAT",
    "TIMEZONE",
    "Coercer",
    "ConversionRequest",
    "ConversionStrategy",
    "Outcome",
    "ParameterDeclaration",
    "StrategyMatcher",
    "StrategyNode",
    "StrategyRegistry",
    "TimezoneSpec",
    "ValidationResult",
    # errors
    "CoercionError",
    "ConversionError",
    "DateParseError",
    "PatternParseError",
    "SchemaError",
    # collaborators
    "BUILTIN_CONVERTERS",
    "ConverterRegistry",
    "DateAttempt",
    "DateOnlyAttempt",
    "DateParsingCascade",
    "EpochMillisAttempt",
    "StrictTimezoneAttempt",
    "PatternFormatter",
    "ResultSet",
    "ResultSetTableModel",
    "TableModel",
    # matchers
    "AlwaysMatcher",
    "InstanceMatcher",
    "TargetTypeMatcher",
    # strategies
    "ConverterMatcher",
    "DateCascadeStrategy",
    "EmptyTextMatcher",
    "EmptyTextStrategy",
    "IdentityStrategy",
    "PatternMatcher",
    "PatternStrategy",
    "RegistryStrategy",
    "TableAdapterStrategy",
    "TableMatcher",
    # factory
    "build_default_coercer",
    "build_default_strategies",
]
