from pydantic import BaseModel, EmailStr, field_validator, Field, ConfigDict, StrictBool
from typing import Optional, List
from datetime import datetime, date, timezone
from decimal import Decimal
from enum import Enum

# ============= MAINTENANCE ENUMS =============

class MaintenanceMode(str, Enum):
    FULL = "full"
    READ_ONLY = "read-only"

class OperationKind(str, Enum):
    LOGIN = "login"
    WRITE = "write"
    READ = "read"

DEFAULT_MAINTENANCE_MESSAGE = "System under maintenance. Please try again later."
READ_ONLY_MESSAGE = "System is in read-only mode. Write operations are temporarily disabled."

# ============= MAINTENANCE SCHEMAS =============

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

def _as_instant(v):
    if v is None or v == "":
        return None
    if isinstance(v, datetime):
        parsed = v
    elif isinstance(v, str):
        try:
            #fromisoformat only understands a trailing Z from 3.11 on
            parsed = datetime.fromisoformat(v.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValueError(f"'{v}' is not a valid ISO-8601 timestamp")
    else:
        raise ValueError("must be an ISO-8601 timestamp string")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class MaintenanceConfig(BaseModel):
    """Persisted maintenance configuration; serialized with camelCase keys"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    enabled: StrictBool = False
    mode: MaintenanceMode = MaintenanceMode.FULL
    message: str = Field(DEFAULT_MAINTENANCE_MESSAGE, max_length=500)
    allow_admins: StrictBool = Field(False, alias="allowAdmins")
    until: Optional[datetime] = None
    updated_at: datetime = Field(default_factory=_utcnow, alias="updatedAt")
    updated_by: Optional[str] = Field(None, alias="updatedBy")

    @field_validator("message")
    @classmethod
    def validate_message(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Message cannot be empty")
        return v

    @field_validator("until", mode="before")
    @classmethod
    def validate_until(cls, v):
        return _as_instant(v)

    @field_validator("updated_at", mode="before")
    @classmethod
    def validate_updated_at(cls, v):
        return _as_instant(v) or _utcnow()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class MaintenanceUpdate(BaseModel):
    """Partial configuration sent by the admin panel; validated by the gate"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    enabled: Optional[StrictBool] = None
    mode: Optional[str] = None
    message: Optional[str] = None
    allow_admins: Optional[StrictBool] = Field(None, alias="allowAdmins")
    until: Optional[str] = None

    def to_partial(self) -> dict:
        return self.model_dump(exclude_unset=True)

# ============= USER SCHEMAS =============

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator('password')
    @classmethod
    def validate_password_strength(cls, v):
        if not any(c.isalpha() for c in v):
            raise ValueError('Password must contain at least one letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one number')
        return v

class User(BaseModel):
    id: int
    email: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserDetail(User):
    is_admin: bool = False

class Token(BaseModel):
    access_token: str
    token_type: str
    expires_at: datetime

class TokenData(BaseModel):
    email: Optional[str] = None

# ============= PAYMENT RECORD SCHEMAS =============

class PaymentRecordCreate(BaseModel):
    salesperson: str = Field(..., min_length=1, max_length=120)
    client_code: str = Field(..., min_length=1, max_length=50)
    client_name: str = Field(..., min_length=1, max_length=200)
    invoice: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    payment_method: str = Field(..., min_length=1, max_length=50)
    issuing_bank: Optional[str] = Field(None, max_length=120)
    receiving_bank: Optional[str] = Field(None, max_length=120)
    reference: str = Field(..., min_length=1, max_length=80)
    collection_type: str = Field(..., min_length=1, max_length=50)
    payment_date: date
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator('reference', 'invoice', 'client_code')
    @classmethod
    def strip_identifiers(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Value cannot be blank')
        return v

class PaymentRecord(PaymentRecordCreate):
    id: int
    created_at: datetime
    created_by: str

    model_config = ConfigDict(from_attributes=True)

class PaymentRecordList(BaseModel):
    items: List[PaymentRecord]
    total: int
