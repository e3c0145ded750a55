"""Identity strategy — used both at the top and at the bottom of the registry."""

from __future__ import annotations

from ..core import ConversionRequest, ConversionStrategy, Outcome


class IdentityStrategy(ConversionStrategy):
    """Return the raw value unchanged.

    Mounted twice by the factory: at high priority behind ``InstanceMatcher``
    (the value already has the target type) and at the lowest priority
    (typically -999) behind ``AlwaysMatcher`` so that a target with no
    converter passes its input through instead of failing.
    """

    def convert(self, request: ConversionRequest) -> Outcome:
        return Outcome.success(request.raw_value)
