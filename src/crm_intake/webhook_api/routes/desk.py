"""Inquiry desk routes for staff working the stored inquiries."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..middleware.auth import verify_admin_secret
from ..schemas.inquiry import InquiryCreateRequest, InquiryUpdateRequest
from ..services.inquiries import (
    InquiryDeskService,
    InquiryNotFound,
    inquiry_desk,
    recruit_desk,
)

router = APIRouter(prefix="/v1", tags=["desk"], dependencies=[Depends(verify_admin_secret)])


def _list(
    desk: InquiryDeskService,
    page: Optional[int],
    limit: Optional[int],
    search: Optional[str],
    status: Optional[str],
    manager_id: Optional[str],
):
    return desk.list_inquiries(
        page=page,
        limit=limit,
        search=search,
        status=status,
        manager_id=manager_id,
    )


def _update(desk: InquiryDeskService, inquiry_id: int, payload: InquiryUpdateRequest):
    try:
        return desk.update_inquiry(inquiry_id, payload.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(400, str(e))
    except InquiryNotFound as e:
        raise HTTPException(404, str(e))


@router.get("/inquiries")
async def list_inquiries(
    page: Optional[int] = None,
    limit: Optional[int] = Query(default=None),
    search: Optional[str] = None,
    status: Optional[str] = None,
    manager_id: Optional[str] = Query(default=None, alias="managerId"),
):
    """List product inquiries, newest first."""
    return _list(inquiry_desk(), page, limit, search, status, manager_id)


@router.post("/inquiries", status_code=201)
async def create_inquiry(payload: InquiryCreateRequest):
    """Enter an inquiry taken outside the website forms."""
    try:
        return inquiry_desk().create_inquiry(payload.model_dump())
    except ValueError as e:
        raise HTTPException(400, str(e))


@router.put("/inquiries/{inquiry_id}")
async def update_inquiry(inquiry_id: int, payload: InquiryUpdateRequest):
    return _update(inquiry_desk(), inquiry_id, payload)


@router.get("/recruit-inquiries")
async def list_recruit_inquiries(
    page: Optional[int] = None,
    limit: Optional[int] = Query(default=None),
    search: Optional[str] = None,
    status: Optional[str] = None,
    manager_id: Optional[str] = Query(default=None, alias="managerId"),
):
    """List recruiting inquiries, newest first."""
    return _list(recruit_desk(), page, limit, search, status, manager_id)


@router.put("/recruit-inquiries/{inquiry_id}")
async def update_recruit_inquiry(inquiry_id: int, payload: InquiryUpdateRequest):
    return _update(recruit_desk(), inquiry_id, payload)
