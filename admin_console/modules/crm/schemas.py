from enum import Enum
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Literal
from datetime import date, datetime


class CustomerStatus(str, Enum):
    ATIVO = "ativo"
    INATIVO = "inativo"


class DealStatus(str, Enum):
    PROSPECCAO = "prospeccao"
    QUALIFICADO = "qualificado"
    PROPOSTA = "proposta"
    NEGOCIACAO = "negociacao"
    FECHADO_GANHO = "fechado_ganho"
    FECHADO_PERDIDO = "fechado_perdido"


class Customer(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    status: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_eligible(self) -> bool:
        return self.status == CustomerStatus.ATIVO.value


class CustomerSummary(BaseModel):
    """Customer columns embedded in each deal row."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class Deal(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    customer_id: str
    title: str
    value: float = 0
    status: DealStatus = DealStatus.PROSPECCAO
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    customer: Optional[CustomerSummary] = Field(
        default=None, validation_alias=AliasChoices("crm_customers", "customer")
    )

    @field_validator("value", mode="before")
    @classmethod
    def null_value_is_zero(cls, v):
        return 0 if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def null_status_is_first_stage(cls, v):
        return DealStatus.PROSPECCAO if v is None else v

    @property
    def customer_name(self) -> Optional[str]:
        return self.customer.name if self.customer else None


class DealDraft(BaseModel):
    """Fields of the new-deal form. Unset value/status take the pipeline defaults."""
    title: str = ""
    value: Optional[float] = None
    status: Optional[DealStatus] = None
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None


class SelectCustomerRequest(BaseModel):
    customer_id: str


class CustomerPickingDialog(BaseModel):
    state: Literal["customer_picking"] = "customer_picking"


class DealEditingDialog(BaseModel):
    state: Literal["deal_editing"] = "deal_editing"
    customer_id: str
    draft: Optional[DealDraft] = None  # last submitted draft, kept after a failed save


class DealViewingDialog(BaseModel):
    state: Literal["deal_viewing"] = "deal_viewing"
    deal_id: str


class DealScreenResponse(BaseModel):
    deals: List[Deal]
    loaded_count: int
    loading: bool
    customers: List[Customer]
    dialog: dict
