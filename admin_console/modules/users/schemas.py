from enum import Enum
from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime


class PaymentStatus(str, Enum):
    PENDENTE = "pendente"
    APROVADO = "aprovado"


class UserProfile(BaseModel):
    id: str
    email: str = ""
    full_name: Optional[str] = None
    whatsapp: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDENTE
    is_admin: bool = False
    created_at: datetime

    @field_validator("email", mode="before")
    @classmethod
    def null_email_is_blank(cls, v):
        return "" if v is None else v

    @field_validator("payment_status", mode="before")
    @classmethod
    def null_status_is_pending(cls, v):
        return PaymentStatus.PENDENTE if v is None else v

    @field_validator("is_admin", mode="before")
    @classmethod
    def null_admin_is_false(cls, v):
        return False if v is None else v

    class Config:
        from_attributes = True


class ProfileEditForm(BaseModel):
    """Editable fields of the edit dialog, seeded from the record when it opens."""
    full_name: str = ""
    email: str = ""
    payment_status: PaymentStatus = PaymentStatus.PENDENTE
    whatsapp: str = ""

    @classmethod
    def seed(cls, profile: UserProfile) -> "ProfileEditForm":
        return cls(
            full_name=profile.full_name or "",
            email=profile.email or "",
            payment_status=profile.payment_status,
            whatsapp=profile.whatsapp or "",
        )

    def to_update(self) -> dict:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "payment_status": self.payment_status.value,
            # empty whatsapp is stored as absent, never as ""
            "whatsapp": self.whatsapp.strip() or None,
        }


class ProfileEditUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    whatsapp: Optional[str] = None


class ToggleAdminRequest(BaseModel):
    current_is_admin: Optional[bool] = None


class EditingDialog(BaseModel):
    state: Literal["editing"] = "editing"
    user_id: str
    form: ProfileEditForm


class UserScreenResponse(BaseModel):
    users: List[UserProfile]
    loaded_count: int
    total_count: int
    loading: bool
    dialog: dict
