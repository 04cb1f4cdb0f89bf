"""
Non-fatal diagnostics raised while assembling land reports.

Reporting prefers a best-effort result over aborting: missing variables,
inconsistent sub-category breakdowns and unsupported argument combinations
are recorded as `Diagnostic` events next to the computed value and logged,
while the computation carries on. A strict `Diagnostics` collector turns the
first event into a `StrictModeError`.
"""

from attrs import define, field

from .errors import StrictModeError
from .utils import logger


NOT_FOUND = "not-found"
DATA_CONSISTENCY = "data-consistency"
NO_BREAKDOWN = "no-breakdown"
UNSUPPORTED = "unsupported-combination"


@define(frozen=True)
class Diagnostic:
    kind: str
    message: str
    category: str | None = None


@define
class Diagnostics:
    """
    Collects diagnostics of one reporting call.

    Attributes
    ----------
    strict : bool, default False
        raise `StrictModeError` instead of continuing
    events : list of Diagnostic
    """

    strict: bool = False
    events: list[Diagnostic] = field(factory=list)

    def warn(self, kind, message, category=None):
        event = Diagnostic(kind, message, category)
        self.events.append(event)
        logger().warning(message)
        if self.strict:
            raise StrictModeError(event)
        return event

    def of_kind(self, kind):
        return [event for event in self.events if event.kind == kind]

    def __iter__(self):
        return iter(self.events)

    def __len__(self):
        return len(self.events)
