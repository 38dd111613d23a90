from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Header, HTTPException, WebSocket, WebSocketDisconnect

from jobtrack.api.v1.schemas import (
    CancellationReasonSchema,
    CancellationReasonsSchema,
    CancellationRecordSchema,
    CancelRequestSchema,
    CreateRequestSchema,
    CustomStatusSchema,
    HistoryRowSchema,
    MessageSchema,
    NoteCreateSchema,
    NoteSchema,
    PaymentUpdateSchema,
    PaymentViewSchema,
    PhotoCategorySchema,
    PhotoCreateSchema,
    PhotoSchema,
    ServiceRequestSchema,
    StatusDefinitionSchema,
    StatusUpdateResultSchema,
    StatusUpdateSchema,
    StatusViewSchema,
)
from jobtrack.application.exceptions import RequestExistsError, RequestNotFoundError
from jobtrack.application.utils.display import HistoryRow
from jobtrack.domain.entities.action_result import ActionResult, Outcome
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_definition import StatusDefinition
from jobtrack.wiring.dependencies import (
    build_cancel_job_controller,
    build_job_status_controller,
    build_notes_controller,
    build_payment_status_controller,
    build_photo_controller,
    get_status_feed,
    get_store,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def actor_role(value: str | None) -> ActorRole:
    try:
        return ActorRole((value or ActorRole.customer.value).strip().lower())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown actor role: {value}")


async def _load(request_id: str) -> ServiceRequest:
    try:
        return await get_store().get_request(request_id)
    except RequestNotFoundError:
        raise HTTPException(status_code=404, detail=f"Service request {request_id} not found")


def _raise_for(result: ActionResult) -> None:
    if result.outcome is Outcome.blocked:
        raise HTTPException(status_code=400, detail=result.alert.message if result.alert else "Invalid request")
    if result.outcome is Outcome.failed:
        raise HTTPException(status_code=502, detail=result.alert.message if result.alert else "Upstream failure")


def _definition(definition: StatusDefinition) -> StatusDefinitionSchema:
    return StatusDefinitionSchema(**asdict(definition))


def _rows(rows: list[HistoryRow]) -> list[HistoryRowSchema]:
    return [
        HistoryRowSchema(status=_definition(r.status), when=r.when, actor=r.actor, note=r.note, amount=r.amount)
        for r in rows
    ]


@router.post("", response_model=ServiceRequestSchema, status_code=201)
async def create_request(req: CreateRequestSchema):
    try:
        request = await get_store().create_request(req.request_id, req.customer_id, req.mechanic_id)
    except RequestExistsError:
        raise HTTPException(status_code=409, detail=f"Service request {req.request_id} already exists")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ServiceRequestSchema(
        id=request.id,
        job_status=request.job_status,
        payment_status=request.payment_status,
        customer_id=request.customer_id,
        mechanic_id=request.mechanic_id,
    )


@router.get("/{request_id}/status", response_model=StatusViewSchema)
async def get_job_status(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = await build_job_status_controller(request, actor_role(x_actor_role))
    return StatusViewSchema(
        current=_definition(controller.status()),
        options=[_definition(s) for s in controller.options()],
        history=_rows(controller.history(include_collapsed=True)),
    )


@router.post("/{request_id}/status", response_model=StatusUpdateResultSchema)
async def update_job_status(request_id: str, req: StatusUpdateSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = await build_job_status_controller(request, actor_role(x_actor_role))
    result = await controller.request_status_change(req.status, note=req.note)
    _raise_for(result)
    return StatusUpdateResultSchema(changed=result.outcome is Outcome.ok, current=_definition(controller.status()))


@router.get("/{request_id}/custom-statuses", response_model=list[StatusDefinitionSchema])
async def list_custom_statuses(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = await build_job_status_controller(request, actor_role(x_actor_role))
    return [_definition(s) for s in controller.catalog.customs]


@router.post("/{request_id}/custom-statuses", response_model=StatusDefinitionSchema, status_code=201)
async def add_custom_status(request_id: str, req: CustomStatusSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    actor = actor_role(x_actor_role)
    if actor is not ActorRole.mechanic:
        raise HTTPException(status_code=403, detail="Only mechanics can create custom statuses")
    controller = await build_job_status_controller(request, actor)
    result = await controller.add_custom_status(req.label, req.description, req.color)
    _raise_for(result)
    return _definition(result.value)


@router.get("/{request_id}/payment", response_model=PaymentViewSchema)
async def get_payment_status(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_payment_status_controller(request, actor_role(x_actor_role))
    return PaymentViewSchema(
        current=_definition(controller.status()),
        options=[_definition(s) for s in controller.options()],
        history=_rows(controller.history(include_collapsed=True)),
        can_send_reminder=controller.can_send_reminder(),
    )


@router.post("/{request_id}/payment", response_model=StatusUpdateResultSchema)
async def update_payment_status(request_id: str, req: PaymentUpdateSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_payment_status_controller(request, actor_role(x_actor_role))
    result = await controller.request_status_change(req.status, amount=req.amount, note=req.note)
    _raise_for(result)
    return StatusUpdateResultSchema(changed=result.outcome is Outcome.ok, current=_definition(controller.status()))


@router.post("/{request_id}/payment/reminder", response_model=MessageSchema)
async def send_payment_reminder(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_payment_status_controller(request, actor_role(x_actor_role))
    result = await controller.send_reminder()
    _raise_for(result)
    return MessageSchema(title=result.alert.title, message=result.alert.message)


@router.get("/{request_id}/cancellation/reasons", response_model=CancellationReasonsSchema)
async def cancellation_reasons(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_cancel_job_controller(request, actor_role(x_actor_role))
    return CancellationReasonsSchema(
        reasons=[CancellationReasonSchema(id=r.id, label=r.label) for r in controller.reasons],
        notice=controller.notice(),
    )


@router.post("/{request_id}/cancellation", response_model=CancellationRecordSchema)
async def cancel_job(request_id: str, req: CancelRequestSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    if request.job_status == "cancelled":
        raise HTTPException(status_code=409, detail="Job is already cancelled")
    controller = build_cancel_job_controller(request, actor_role(x_actor_role))
    controller.open()
    try:
        controller.select_reason(req.reason_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    controller.set_other_text(req.other_text or "")
    result = await controller.submit()
    _raise_for(result)
    record = result.value
    return CancellationRecordSchema(
        reason_id=record.reason_id,
        reason_text=record.reason_text,
        cancelled_by=record.cancelled_by.value,
        cancelled_at=record.cancelled_at,
    )


@router.get("/{request_id}/notes", response_model=list[NoteSchema])
async def list_notes(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    actor = actor_role(x_actor_role)
    if actor is not ActorRole.mechanic:
        raise HTTPException(status_code=403, detail="Notes are visible only to mechanics")
    controller = build_notes_controller(request, actor)
    return [NoteSchema(**asdict(v)) for v in await controller.list_notes()]


@router.post("/{request_id}/notes", response_model=NoteSchema, status_code=201)
async def add_note(request_id: str, req: NoteCreateSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    actor = actor_role(x_actor_role)
    if actor is not ActorRole.mechanic:
        raise HTTPException(status_code=403, detail="Notes are visible only to mechanics")
    controller = build_notes_controller(request, actor)
    result = await controller.add_note(req.text)
    _raise_for(result)
    return NoteSchema(**asdict(controller.render([result.value])[0]))


@router.delete("/{request_id}/notes/{note_id}", status_code=204)
async def delete_note(request_id: str, note_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    actor = actor_role(x_actor_role)
    if actor is not ActorRole.mechanic:
        raise HTTPException(status_code=403, detail="Notes are visible only to mechanics")
    controller = build_notes_controller(request, actor)
    result = await controller.delete_note(note_id)
    _raise_for(result)
    if result.outcome is Outcome.noop:
        raise HTTPException(status_code=404, detail=f"Note {note_id} not found")


@router.get("/{request_id}/photos", response_model=list[PhotoSchema])
async def list_photos(request_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_photo_controller(request, actor_role(x_actor_role))
    return [_photo(v) for v in await controller.list_photos()]


@router.post("/{request_id}/photos", response_model=PhotoSchema, status_code=201)
async def upload_photo(request_id: str, req: PhotoCreateSchema, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_photo_controller(request, actor_role(x_actor_role))
    try:
        controller.select_category(req.category)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    controller.set_caption(req.caption or "")
    result = await controller.upload(req.uri)
    _raise_for(result)
    return _photo(controller.render([result.value])[0])


@router.delete("/{request_id}/photos/{photo_id}", status_code=204)
async def delete_photo(request_id: str, photo_id: str, x_actor_role: str | None = Header(None)):
    request = await _load(request_id)
    controller = build_photo_controller(request, actor_role(x_actor_role))
    result = await controller.delete_photo(photo_id)
    _raise_for(result)
    if result.outcome is Outcome.noop:
        raise HTTPException(status_code=404, detail=f"Photo {photo_id} not found")


@router.websocket("/{request_id}/watch")
async def watch_request(websocket: WebSocket, request_id: str):
    await websocket.accept()

    async def push(request: ServiceRequest) -> None:
        await websocket.send_json(
            {"id": request.id, "job_status": request.job_status, "payment_status": request.payment_status}
        )

    unsubscribe = await get_status_feed().subscribe(request_id, push)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Watcher disconnected", extra={"request_id": request_id})
    finally:
        unsubscribe()


def _photo(view) -> PhotoSchema:
    return PhotoSchema(
        id=view.id,
        uri=view.uri,
        category=PhotoCategorySchema(**asdict(view.category)),
        caption=view.caption,
        when=view.when,
    )
