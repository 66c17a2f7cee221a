import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Frequency(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"        # every 2 weeks
    BIMONTHLY = "bimonthly"      # twice a month, every 15 days
    FOURWEEKLY = "fourweekly"    # every 4 weeks
    MONTHLY = "monthly"
    BIMESTRIAL = "bimestrial"    # every 2 months
    QUARTERLY = "quarterly"
    FOURMONTHLY = "fourmonthly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"
    BIENNIAL = "biennial"        # every 2 years

    @classmethod
    def parse(cls, value) -> "Frequency":
        """Map a stored value to a Frequency; unknown values fall back to MONTHLY."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown frequency %r, treating as monthly", value)
            return cls.MONTHLY

    @property
    def label(self) -> str:
        return FREQUENCY_LABELS[self]


FREQUENCY_LABELS = {
    Frequency.ONCE: "Once",
    Frequency.DAILY: "Daily",
    Frequency.WEEKLY: "Weekly",
    Frequency.BIWEEKLY: "Every 2 weeks",
    Frequency.BIMONTHLY: "Twice a month",
    Frequency.FOURWEEKLY: "Every 4 weeks",
    Frequency.MONTHLY: "Monthly",
    Frequency.BIMESTRIAL: "Every 2 months",
    Frequency.QUARTERLY: "Quarterly",
    Frequency.FOURMONTHLY: "Every 4 months",
    Frequency.SEMIANNUAL: "Every 6 months",
    Frequency.ANNUAL: "Yearly",
    Frequency.BIENNIAL: "Every 2 years",
}
