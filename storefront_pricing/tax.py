"""Tax settings.

Settings are stored as a mapping with ``tax_enabled``, ``tax_rate`` as a
percentage (0-100) and ``tax_label`` (e.g. "VAT"). The calculator wants a
fraction, which ``TaxSettings.rate`` provides.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import structlog

from .money import HUNDRED, ZERO, to_decimal
from .validation import require_flag, require_percentage

logger = structlog.get_logger()

DEFAULT_TAX_LABEL = "Tax"


@dataclass(frozen=True)
class TaxSettings:
    enabled: bool = False
    rate_percent: Decimal = ZERO
    label: str = DEFAULT_TAX_LABEL

    def __post_init__(self):
        percent = to_decimal(self.rate_percent, "tax rate")
        require_percentage(percent, "tax rate")
        object.__setattr__(self, "rate_percent", percent)

    @property
    def rate(self) -> Decimal:
        if not self.enabled:
            return ZERO
        return self.rate_percent / HUNDRED

    @classmethod
    def disabled(cls) -> "TaxSettings":
        return cls()

    @classmethod
    def from_settings(cls, settings: Optional[Mapping]) -> "TaxSettings":
        """Build from a stored settings mapping.

        No setting at all means no tax; admins must enable it explicitly.
        """
        if not settings:
            logger.warning("tax_setting_missing", applied_rate="0")
            return cls.disabled()

        enabled = require_flag(settings.get("tax_enabled") or False, "tax_enabled")
        rate = settings.get("tax_rate")
        label = settings.get("tax_label") or DEFAULT_TAX_LABEL
        if rate is None:
            if enabled:
                logger.warning("tax_rate_missing", label=label)
            return cls(enabled=False, label=label)
        return cls(enabled=enabled, rate_percent=rate, label=label)
