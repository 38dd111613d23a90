from __future__ import annotations

from jobtrack.domain.entities.cancellation import CancellationReason
from jobtrack.domain.entities.photo import PhotoCategory
from jobtrack.domain.entities.status_catalog import StatusCatalog
from jobtrack.domain.entities.status_definition import StatusDefinition

JOB_STATUSES: tuple[StatusDefinition, ...] = (
    StatusDefinition("pending", "Pending", "#ff9800", "Service request received but not yet quoted"),
    StatusDefinition("quoted", "Quoted", "#2196f3", "Quote provided, awaiting customer acceptance"),
    StatusDefinition("accepted", "Accepted", "#4caf50", "Quote accepted, work scheduled"),
    StatusDefinition("in_progress", "In Progress", "#9c27b0", "Work has begun on the vehicle"),
    StatusDefinition("parts_needed", "Parts Needed", "#795548", "Waiting for parts to arrive"),
    StatusDefinition("completed", "Completed", "#607d8b", "Service completed, awaiting payment"),
    StatusDefinition("cancelled", "Cancelled", "#f44336", "Service request cancelled"),
)

PAYMENT_STATUSES: tuple[StatusDefinition, ...] = (
    StatusDefinition("unpaid", "Unpaid", "#f44336"),
    StatusDefinition("pending", "Payment Pending", "#ff9800"),
    StatusDefinition("partial", "Partially Paid", "#2196f3"),
    StatusDefinition("paid", "Paid", "#4caf50"),
    StatusDefinition("refunded", "Refunded", "#9c27b0"),
)

# statuses where the mechanic may still chase the customer
REMINDER_PAYMENT_STATUSES = frozenset({"unpaid", "partial"})

CANCEL_REASONS: tuple[CancellationReason, ...] = (
    CancellationReason("schedule_conflict", "Schedule Conflict"),
    CancellationReason("found_another_mechanic", "Found Another Mechanic"),
    CancellationReason("no_longer_needed", "Service No Longer Needed"),
    CancellationReason("cost_concerns", "Cost Concerns"),
    CancellationReason("vehicle_fixed", "Vehicle Fixed by Other Means"),
    CancellationReason("other", "Other Reason"),
)

PHOTO_CATEGORIES: tuple[PhotoCategory, ...] = (
    PhotoCategory("before", "Before Repair", "#ff9800"),
    PhotoCategory("during", "During Repair", "#2196f3"),
    PhotoCategory("after", "After Repair", "#4caf50"),
    PhotoCategory("parts", "Parts", "#9c27b0"),
    PhotoCategory("damage", "Damage", "#f44336"),
    PhotoCategory("other", "Other", "#607d8b"),
)

COLOR_PALETTE: tuple[str, ...] = (
    "#2196f3", "#4caf50", "#ff9800", "#9c27b0", "#f44336",
    "#607d8b", "#795548", "#009688", "#673ab7", "#3f51b5",
)

DEFAULT_CUSTOM_COLOR = "#2196f3"


def job_catalog(customs: list[StatusDefinition] | tuple[StatusDefinition, ...] | None = None) -> StatusCatalog:
    return StatusCatalog.build(JOB_STATUSES, customs, fallback="first")


def payment_catalog() -> StatusCatalog:
    return StatusCatalog.build(PAYMENT_STATUSES, fallback="first")


def cancel_reason_label(reason_id: str) -> str | None:
    for reason in CANCEL_REASONS:
        if reason.id == reason_id:
            return reason.label
    return None


def photo_category(category_id: str | None) -> PhotoCategory:
    for category in PHOTO_CATEGORIES:
        if category.id == category_id:
            return category
    return PHOTO_CATEGORIES[-1]
