import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from admin_console.config import settings
from admin_console.database.record_store import RecordStore
from admin_console.modules.crm.schemas import (
    Customer, CustomerStatus, CustomerSummary, Deal, DealDraft, DealStatus
)

# Each deal comes back with its customer's contact columns embedded
DEAL_COLUMNS = "*, crm_customers:customer_id(name, email, phone)"
CUSTOMER_COLUMNS = "id, name, status, email, phone"

logger = logging.getLogger(__name__)


class DealService:
    def __init__(self, store: RecordStore, deals_table: Optional[str] = None, customers_table: Optional[str] = None):
        self.store = store
        self.deals_table = deals_table or settings.deals_table
        self.customers_table = customers_table or settings.customers_table

    async def list_deals(self) -> List[Deal]:
        """All deals with embedded customer, newest first"""
        rows = await self.store.select_ordered(self.deals_table, columns=DEAL_COLUMNS)
        deals = []
        for row in rows:
            try:
                deals.append(Deal(**row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed deal {row.get('id')}: {e.error_count()} invalid field(s)")
        return deals

    async def list_eligible_customers(self) -> List[Customer]:
        """Customers that can receive a new deal (status = ativo), by name"""
        rows = await self.store.select_ordered(
            self.customers_table,
            columns=CUSTOMER_COLUMNS,
            filters={"status": CustomerStatus.ATIVO.value},
            order_by="name",
            desc=False,
        )
        return [Customer(**row) for row in rows]

    async def create_deal(self, customer_id: str, draft: DealDraft, customer: Optional[Customer] = None) -> Deal:
        """Insert a deal with pipeline defaults. `customer` fills the embed the insert response lacks."""
        now = datetime.now(timezone.utc).isoformat()
        row = {
            "customer_id": customer_id,
            "title": draft.title.strip(),
            "value": draft.value if draft.value is not None else 0,
            "status": (draft.status or DealStatus.PROSPECCAO).value,
            "expected_close_date": draft.expected_close_date.isoformat() if draft.expected_close_date else None,
            "notes": draft.notes,
            "created_at": now,
            "updated_at": now,
        }
        created = await self.store.insert_returning(self.deals_table, row)
        deal = Deal(**created)
        if deal.customer is None and customer is not None:
            deal = deal.model_copy(update={
                "customer": CustomerSummary(name=customer.name, email=customer.email, phone=customer.phone)
            })
        return deal
