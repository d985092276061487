"""
Stock API endpoints
Categories, stock-in records and the stock movement journal
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from aby_api.api import deps
from aby_api.core.security import Principal
from aby_api.models.stock import MovementType
from aby_api.realtime import stock_gateway
from aby_api.schemas.common import MessageResponse
from aby_api.schemas.stock import (
    StockCategoryCreate,
    StockCategoryResponse,
    StockCategoryUpdate,
    StockHistoryResponse,
    StockInCreate,
    StockInResponse,
    StockInUpdate,
)
from aby_api.services.stock import StockExportService, StockService

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# Categories

@router.get("/category", response_model=List[StockCategoryResponse])
def list_categories(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockService(db, principal).list_categories()


@router.post("/category", response_model=StockCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category_in: StockCategoryCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    category = StockCategoryResponse.model_validate(
        StockService(db, principal).create_category(category_in)
    )
    background_tasks.add_task(stock_gateway.emit, "categoryCreated", category)
    return category


@router.get("/category/{category_id}", response_model=StockCategoryResponse)
def get_category(
    category_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockService(db, principal).get_category(category_id)


@router.put("/category/{category_id}", response_model=StockCategoryResponse)
def update_category(
    category_id: int,
    category_in: StockCategoryUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    category = StockCategoryResponse.model_validate(
        StockService(db, principal).update_category(category_id, category_in)
    )
    background_tasks.add_task(stock_gateway.emit, "categoryUpdated", category)
    return category


@router.delete("/category/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    StockService(db, principal).delete_category(category_id)
    background_tasks.add_task(stock_gateway.emit, "categoryDeleted", {"id": category_id})
    return {"message": "Category deleted successfully"}


# Stock-in records

@router.get("/stockin", response_model=List[StockInResponse])
def list_stock_ins(
    search: Optional[str] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    store_id: Optional[int] = Query(None, alias="storeId"),
    low_stock: bool = Query(False, alias="lowStock"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Retrieve stock-in records with optional filtering.
    """
    return StockService(db, principal).list_stock_ins(
        search=search, category_id=category_id, store_id=store_id, low_stock=low_stock
    )


@router.post("/stockin", response_model=StockInResponse, status_code=status.HTTP_201_CREATED)
def create_stock_in(
    stock_in: StockInCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Register stock in a store. A SKU is generated when none is given.
    """
    stock = StockInResponse.model_validate(StockService(db, principal).create_stock_in(stock_in))
    background_tasks.add_task(stock_gateway.emit, "stockInCreated", stock)
    return stock


@router.get("/stockin/{stock_in_id}", response_model=StockInResponse)
def get_stock_in(
    stock_in_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockService(db, principal).get_stock_in(stock_in_id)


@router.put("/stockin/{stock_in_id}", response_model=StockInResponse)
def update_stock_in(
    stock_in_id: int,
    stock_in: StockInUpdate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    stock = StockInResponse.model_validate(
        StockService(db, principal).update_stock_in(stock_in_id, stock_in)
    )
    background_tasks.add_task(stock_gateway.emit, "stockInUpdated", stock)
    return stock


@router.delete("/stockin/{stock_in_id}", response_model=MessageResponse)
def delete_stock_in(
    stock_in_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    StockService(db, principal).delete_stock_in(stock_in_id)
    background_tasks.add_task(stock_gateway.emit, "stockInDeleted", {"id": stock_in_id})
    return {"message": "Stock item deleted successfully"}


# Movement history

@router.get("/history", response_model=List[StockHistoryResponse])
def list_history(
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Full stock movement journal, newest first.
    """
    return StockService(db, principal).get_history()


@router.get("/history/export")
def export_history(
    stock_in_id: Optional[int] = Query(None, alias="stockInId"),
    movement_type: Optional[MovementType] = Query(None, alias="type"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    """
    Download the movement journal as an Excel workbook.
    """
    entries = StockService(db, principal).get_history(
        stock_in_id=stock_in_id,
        movement_type=movement_type.value if movement_type else None
    )
    content = StockExportService().history_workbook(entries)
    filename = f"stock_history_{datetime.now():%Y%m%d_%H%M%S}.xlsx"

    return StreamingResponse(
        iter([content]),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/history/movement", response_model=List[StockHistoryResponse])
def list_history_by_movement(
    movement_type: str = Query(..., alias="type"),
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockService(db, principal).get_history(movement_type=movement_type)


@router.get("/history/stock/{stock_in_id}", response_model=List[StockHistoryResponse])
def list_history_for_stock(
    stock_in_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    service = StockService(db, principal)
    service.get_stock_in(stock_in_id)
    return service.get_history(stock_in_id=stock_in_id)


@router.get("/history/request/{request_id}", response_model=List[StockHistoryResponse])
def list_history_for_request(
    request_id: int,
    db: Session = Depends(deps.get_db),
    principal: Principal = Depends(deps.get_current_principal)
):
    return StockService(db, principal).get_history(request_id=request_id)
