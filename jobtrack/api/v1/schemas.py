from decimal import Decimal

from pydantic import BaseModel, Field


class StatusDefinitionSchema(BaseModel):
    id: str
    label: str
    color: str
    description: str | None = None
    is_custom: bool = False


class HistoryRowSchema(BaseModel):
    status: StatusDefinitionSchema
    when: str
    actor: str
    note: str | None = None
    amount: str | None = None


class CreateRequestSchema(BaseModel):
    request_id: str = Field(min_length=1, max_length=64)
    customer_id: str | None = None
    mechanic_id: str | None = None


class ServiceRequestSchema(BaseModel):
    id: str
    job_status: str
    payment_status: str
    customer_id: str | None = None
    mechanic_id: str | None = None


class StatusViewSchema(BaseModel):
    current: StatusDefinitionSchema
    options: list[StatusDefinitionSchema] = Field(default_factory=list)
    history: list[HistoryRowSchema] = Field(default_factory=list)


class PaymentViewSchema(StatusViewSchema):
    can_send_reminder: bool = False


class StatusUpdateSchema(BaseModel):
    status: str
    note: str | None = None


class PaymentUpdateSchema(BaseModel):
    status: str
    amount: Decimal | None = None
    note: str | None = None


class StatusUpdateResultSchema(BaseModel):
    changed: bool
    current: StatusDefinitionSchema


class CustomStatusSchema(BaseModel):
    label: str
    description: str | None = None
    color: str = "#2196f3"


class CancellationReasonSchema(BaseModel):
    id: str
    label: str


class CancellationReasonsSchema(BaseModel):
    reasons: list[CancellationReasonSchema]
    notice: str


class CancelRequestSchema(BaseModel):
    reason_id: str
    other_text: str | None = None


class CancellationRecordSchema(BaseModel):
    reason_id: str
    reason_text: str
    cancelled_by: str
    cancelled_at: str


class NoteCreateSchema(BaseModel):
    text: str


class NoteSchema(BaseModel):
    id: str
    text: str
    when: str
    expandable: bool = False
    expanded: bool = False


class PhotoCreateSchema(BaseModel):
    uri: str
    category: str = "before"
    caption: str | None = None


class PhotoCategorySchema(BaseModel):
    id: str
    label: str
    color: str


class PhotoSchema(BaseModel):
    id: str
    uri: str
    category: PhotoCategorySchema
    caption: str | None = None
    when: str


class MessageSchema(BaseModel):
    title: str
    message: str
