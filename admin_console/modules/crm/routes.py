from fastapi import APIRouter, Depends, HTTPException
from admin_console.core.dependencies import get_deal_controller, ensure_ok
from admin_console.modules.crm.controller import DealPipelineController
from admin_console.modules.crm.schemas import (
    CustomerPickingDialog, Deal, DealDraft, DealEditingDialog, DealScreenResponse,
    DealViewingDialog, SelectCustomerRequest
)
from typing import Optional

router = APIRouter(prefix="/console/deals", tags=["deals"])


@router.get("", response_model=DealScreenResponse)
async def get_deal_screen(
    search: Optional[str] = None,
    status: Optional[str] = None,
    controller: DealPipelineController = Depends(get_deal_controller)
):
    """Loaded deals filtered by title/customer name and pipeline status ("todos" = any)"""
    return controller.snapshot(search, status)


@router.post("/refresh", response_model=DealScreenResponse)
async def refresh_deals(
    search: Optional[str] = None,
    status: Optional[str] = None,
    controller: DealPipelineController = Depends(get_deal_controller)
):
    """Re-read deals and eligible customers"""
    await controller.activate()
    return controller.snapshot(search, status)


@router.post("/new", response_model=CustomerPickingDialog)
async def start_deal(
    controller: DealPipelineController = Depends(get_deal_controller)
):
    """Open the customer picker (requires at least one active customer)"""
    return ensure_ok(controller.start_deal())


@router.post("/new/customer", response_model=DealEditingDialog)
async def select_customer(
    body: SelectCustomerRequest,
    controller: DealPipelineController = Depends(get_deal_controller)
):
    return ensure_ok(controller.select_customer(body.customer_id))


@router.post("/new/save", response_model=Deal, status_code=201)
async def save_deal(
    draft: DealDraft,
    controller: DealPipelineController = Depends(get_deal_controller)
):
    return ensure_ok(await controller.save_deal(draft))


@router.post("/new/cancel", status_code=204)
async def cancel_deal(
    controller: DealPipelineController = Depends(get_deal_controller)
):
    ensure_ok(controller.cancel_deal())
    return None


@router.post("/{deal_id}/view", response_model=DealViewingDialog)
async def view_deal(
    deal_id: str,
    controller: DealPipelineController = Depends(get_deal_controller)
):
    return ensure_ok(controller.view_deal(deal_id))


@router.get("/view", response_model=Deal)
async def get_viewed_deal(
    controller: DealPipelineController = Depends(get_deal_controller)
):
    """Detail of the deal whose dialog is open"""
    deal = controller.viewed_deal
    if deal is None:
        raise HTTPException(status_code=404, detail="No deal detail open")
    return deal


@router.post("/view/close", status_code=204)
async def close_deal_view(
    controller: DealPipelineController = Depends(get_deal_controller)
):
    ensure_ok(controller.close_deal_view())
    return None
