"""Write commands accepted by the event service.

Each update command names one group of fields, so the service can run
exactly the checks that group needs instead of merging an arbitrary patch.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class CreateEvent:
    title: str
    description: str
    location: str
    start_date: datetime
    end_date: datetime
    capacity: int
    price: Decimal = Decimal("0")
    image_url: str | None = None
    is_featured: bool = False
    publish: bool = False


@dataclass(frozen=True)
class UpdateDetails:
    """Descriptive fields; ``None`` leaves a field unchanged.

    ``clear_image_url`` removes the image, which ``None`` cannot express.
    """

    title: str | None = None
    description: str | None = None
    location: str | None = None
    image_url: str | None = None
    price: Decimal | None = None
    is_featured: bool | None = None
    clear_image_url: bool = False

    def changes(self) -> dict[str, object]:
        changes = {
            name: value
            for name, value in vars(self).items()
            if value is not None and name != "clear_image_url"
        }
        if self.clear_image_url:
            changes["image_url"] = None
        return changes


@dataclass(frozen=True)
class UpdateCapacity:
    capacity: int


@dataclass(frozen=True)
class UpdateDates:
    """New start and/or end; the missing side keeps its stored value."""

    start_date: datetime | None = None
    end_date: datetime | None = None


EventUpdate = UpdateDetails | UpdateCapacity | UpdateDates
