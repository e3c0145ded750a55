"""Coercer factory — the single place where all pieces are assembled.

``build_default_coercer`` is the recommended entry point for users who want a
fully functional Coercer without hand-wiring every registry.

Customisation points:

* **locale**     – Babel locale for ``dataFormat`` patterns (default ``en_US``).
* **converters** – extra / overriding ``type → str-converter`` entries.
* **strategies** – extra ``StrategyNode``s mounted next to the defaults.
* **cascade**    – replacement ``DateParsingCascade``.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from babel import Locale

from .converters import ConverterRegistry
from .core import Coercer, StrategyNode, StrategyRegistry
from .dates import DateParsingCascade
from .matchers import DATE_TYPES, AlwaysMatcher, InstanceMatcher, TargetTypeMatcher
from .patterns import PatternFormatter
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


def build_default_strategies() -> StrategyRegistry:
    """Registry holding the built-in precedence chain.

    ============  ========  =============================================
    node          priority  fires when
    ============  ========  =============================================
    empty            110    ``str(raw) == ""``
    identity         100    raw value already has the target type
    table             90    ``TableModel`` target, ``ResultSet`` value
    date              70    target is ``date`` / ``time`` / ``datetime``
    pattern           60    ``dataFormat`` + numeric or date target
    registry          50    a converter is registered for the target
    passthrough     -999    always
    ============  ========  =============================================
    """
    registry = StrategyRegistry()
    identity = IdentityStrategy()

    registry.register(StrategyNode(
        name="empty", priority=110,
        matcher=EmptyTextMatcher(),
        strategy=EmptyTextStrategy(),
    ))
    registry.register(StrategyNode(
        name="identity", priority=100,
        matcher=InstanceMatcher(),
        strategy=identity,
    ))
    registry.register(StrategyNode(
        name="table", priority=90,
        matcher=TableMatcher(),
        strategy=TableAdapterStrategy(),
    ))
    registry.register(StrategyNode(
        name="date", priority=70,
        matcher=TargetTypeMatcher(DATE_TYPES),
        strategy=DateCascadeStrategy(),
    ))
    registry.register(StrategyNode(
        name="pattern", priority=60,
        matcher=PatternMatcher(),
        strategy=PatternStrategy(),
    ))
    registry.register(StrategyNode(
        name="registry", priority=50,
        matcher=ConverterMatcher(),
        strategy=RegistryStrategy(),
    ))
    registry.register(StrategyNode(
        name="passthrough", priority=-999,
        matcher=AlwaysMatcher(),
        strategy=identity,
    ))
    return registry


def build_default_coercer(
        *,
        locale: str | Locale = "en_US",
        converters: Mapping[type, Callable[[str], Any]] | None = None,
        strategies: Iterable[StrategyNode] | None = None,
        cascade: DateParsingCascade | None = None,
) -> Coercer:
    """Assemble a Coercer with the standard strategies and collaborators.

    Args:
        locale:     Babel locale identifier (or ``Locale``) used to parse
                    ``dataFormat`` numbers and month/day names.
        converters: Converters merged over ``BUILTIN_CONVERTERS``.
        strategies: Extra nodes registered next to the built-in chain; pick
                    a priority to place them (e.g. 75 to run before dates).
        cascade:    Date-parsing cascade.  ``None`` → the default three
                    attempts (strict/timezone, epoch millis, date only).

    Returns:
        Fully wired ``Coercer`` ready for use.

    Example::

        coercer = build_default_coercer()
        sink = {}
        result = coercer.apply(
            [ParameterDeclaration("count", int)],
            {"count": "42"},
            sink=sink,
        )
        # sink → {"count": 42}, result.is_empty → True
    """
    registry = build_default_strategies()
    for node in strategies or ():
        registry.register(node)

    return Coercer(
        strategies=registry,
        converters=ConverterRegistry(converters),
        formatter=PatternFormatter(locale),
        cascade=cascade if cascade is not None else DateParsingCascade(),
    )
