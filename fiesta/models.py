# fiesta/models.py
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ──────────────────────────────────────────────────────────────────────────────
# Status enums (column values as stored)
# ──────────────────────────────────────────────────────────────────────────────
class Role(str, Enum):
    CLIENT = "client"
    PROVIDER = "provider"


class RequestStatus(str, Enum):
    OPEN = "open"
    QUOTED = "quoted"
    HIRED = "hired"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class QuoteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class EventStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    CARD = "Tarjeta"
    TRANSFER = "Transferencia"


class HiredServiceStatus(str, Enum):
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestGroup(str, Enum):
    PENDING = "Pendientes"
    CONFIRMED = "Confirmados"
    FINISHED = "Finalizados"


# ──────────────────────────────────────────────────────────────────────────────
# Session
# ──────────────────────────────────────────────────────────────────────────────
class SessionContext(BaseModel):
    """The authenticated caller, passed explicitly to every workflow call."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: Role = Role.CLIENT
    email: Optional[str] = None


# ──────────────────────────────────────────────────────────────────────────────
# Rows
# ──────────────────────────────────────────────────────────────────────────────
class Row(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Request(Row):
    id: str
    client_id: str
    category_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    guest_count: Optional[int] = None
    status: RequestStatus
    event_id: Optional[str] = None
    created_at: Optional[datetime] = None


class Quote(Row):
    id: str
    request_id: str
    provider_id: str
    proposed_price: Decimal
    notes: Optional[str] = None
    status: QuoteStatus
    created_at: Optional[datetime] = None


class Event(Row):
    id: str
    client_id: str
    title: str
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    guest_count: Optional[int] = None
    status: EventStatus


class Payment(Row):
    id: str
    quote_id: str
    client_id: str
    provider_id: str
    amount: Decimal
    payment_method: PaymentMethod
    status: PaymentStatus
    paid_at: Optional[datetime] = None


class HiredService(Row):
    id: str
    event_id: str
    quote_id: str
    client_id: str
    provider_id: str
    service_name: str
    service_date: Optional[str] = None
    service_time: Optional[str] = None
    price_paid: Decimal
    status: HiredServiceStatus
    payment_id: str


class ServiceCategory(Row):
    id: str
    name: str
    icon: Optional[str] = None


class Profile(Row):
    id: str
    full_name: Optional[str] = None
    business_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None


class ChatChannel(Row):
    id: str
    request_id: str
    client_id: str
    provider_id: str
    created_at: Optional[datetime] = None


class ChatMessage(Row):
    id: str
    channel_id: str
    sender_id: str
    content: str
    created_at: Optional[datetime] = None


# ──────────────────────────────────────────────────────────────────────────────
# Inputs
# ──────────────────────────────────────────────────────────────────────────────
class RequestDetails(BaseModel):
    # presence is checked by the workflow so the error names every missing field
    category_name: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None
    guest_count: Optional[int] = None


class RequestIn(RequestDetails):
    category_id: str = Field(..., min_length=1)


class QuoteIn(BaseModel):
    request_id: str = Field(..., min_length=1)
    proposed_price: Decimal = Field(..., ge=0)
    notes: Optional[str] = None


class PaymentIn(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.CARD


class ChannelIn(BaseModel):
    request_id: str = Field(..., min_length=1)
    provider_id: str = Field(..., min_length=1)


class MessageIn(BaseModel):
    content: str


# ──────────────────────────────────────────────────────────────────────────────
# Listing shapes
# ──────────────────────────────────────────────────────────────────────────────
class ProviderFeed(BaseModel):
    has_services: bool
    requests: list[Request] = []


class QuotedRequest(Request):
    quote_id: str
    quote_status: QuoteStatus
    quote_price: Decimal
