from functools import lru_cache
import logging

from jobtrack.core.config import settings
from jobtrack.application.ports.notifier import NotifierPort
from jobtrack.application.ports.status_feed import StatusFeedPort
from jobtrack.application.use_cases.cancel_job import CancelJobController
from jobtrack.application.use_cases.job_status import JobStatusController
from jobtrack.application.use_cases.mechanic_notes import MechanicNotesController
from jobtrack.application.use_cases.payment_status import PaymentStatusController
from jobtrack.application.use_cases.photo_upload import PhotoUploadController
from jobtrack.application.utils.display import safe_timezone
from jobtrack.domain.catalogs import CANCEL_REASONS, PHOTO_CATEGORIES, job_catalog, payment_catalog
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.infrastructure.feed.polling_feed import PollingStatusFeed
from jobtrack.infrastructure.notify.http_notifier import HttpReminderNotifier
from jobtrack.infrastructure.notify.mock_notifier import MockNotifier
from jobtrack.infrastructure.store.json_store import JsonServiceRequestStore
from jobtrack.infrastructure.store.memory_store import MemoryServiceRequestStore


_store: MemoryServiceRequestStore | JsonServiceRequestStore | None = None


def get_store() -> MemoryServiceRequestStore | JsonServiceRequestStore:
    global _store
    if _store is None:
        if settings.ENV.lower() in {"dev", "local"}:
            _store = JsonServiceRequestStore(data_dir=settings.STORE_DATA_DIR)
        else:
            _store = MemoryServiceRequestStore()
    return _store


def set_store(store: MemoryServiceRequestStore | JsonServiceRequestStore | None) -> None:
    global _store
    _store = store


@lru_cache
def get_notifier() -> NotifierPort:
    logger = logging.getLogger(__name__)
    if not settings.REMINDER_WEBHOOK_URL:
        logger.info("Using MockNotifier (REMINDER_WEBHOOK_URL not set)")
        return MockNotifier()
    logger.info("Using HttpReminderNotifier")
    return HttpReminderNotifier(
        endpoint=settings.REMINDER_WEBHOOK_URL,
        token=settings.REMINDER_WEBHOOK_TOKEN,
        timeout=settings.REMINDER_TIMEOUT_SECONDS,
    )


def get_status_feed() -> StatusFeedPort:
    return PollingStatusFeed(store=get_store(), interval_seconds=settings.STATUS_POLL_INTERVAL_SECONDS)


def custom_status_owner(request: ServiceRequest) -> str | None:
    # custom statuses belong to the mechanic's account
    return request.mechanic_id


async def build_job_status_controller(request: ServiceRequest, actor: ActorRole) -> JobStatusController:
    store = get_store()
    owner_id = custom_status_owner(request)
    customs = await store.list_custom_statuses(owner_id) if owner_id else []
    return JobStatusController(
        request_id=request.id,
        store=store,
        catalog=job_catalog(customs),
        current_status=request.job_status,
        history=request.status_history,
        actor=actor,
        custom_store=store,
        owner_id=owner_id,
        timezone=safe_timezone(settings.DISPLAY_TIMEZONE),
        label_max=settings.CUSTOM_STATUS_LABEL_MAX,
        description_max=settings.CUSTOM_STATUS_DESCRIPTION_MAX,
    )


def build_payment_status_controller(request: ServiceRequest, actor: ActorRole) -> PaymentStatusController:
    return PaymentStatusController(
        request_id=request.id,
        store=get_store(),
        notifier=get_notifier(),
        catalog=payment_catalog(),
        current_status=request.payment_status,
        history=request.payment_history,
        actor=actor,
        timezone=safe_timezone(settings.DISPLAY_TIMEZONE),
    )


def build_cancel_job_controller(request: ServiceRequest, actor: ActorRole) -> CancelJobController:
    return CancelJobController(
        request_id=request.id,
        store=get_store(),
        reasons=CANCEL_REASONS,
        actor=actor,
    )


def build_notes_controller(request: ServiceRequest, actor: ActorRole) -> MechanicNotesController:
    return MechanicNotesController(
        request_id=request.id,
        store=get_store(),
        read_only=actor is not ActorRole.mechanic,
        timezone=safe_timezone(settings.DISPLAY_TIMEZONE),
        preview_length=settings.TEXT_PREVIEW_LENGTH,
    )


def build_photo_controller(request: ServiceRequest, actor: ActorRole) -> PhotoUploadController:
    return PhotoUploadController(
        request_id=request.id,
        store=get_store(),
        categories=PHOTO_CATEGORIES,
        read_only=False,
        timezone=safe_timezone(settings.DISPLAY_TIMEZONE),
    )
