# drinkshop/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from requests import RequestException

from drinkshop.api.deps import get_order_service
from drinkshop.domain.schemas import CheckoutIn, OrderOut
from drinkshop.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    svc: OrderService = Depends(get_order_service),
):
    """
    Tworzy zamowienie z koszyka sesji.
    Koszyk z niewaznym voucherem jest odrzucany (400),
    rownolegly checkout tej samej sesji dostaje 409.
    """
    try:
        return svc.checkout(
            session_id=payload.session_id,
            user_id=payload.user_id,
            address_id=payload.address_id,
            payment_method=payload.payment_method,
            note=payload.note,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=502, detail=f"Nie udalo sie zapisac zamowienia: {e}")


@router.get("/", response_model=List[OrderOut])
def list_orders(
    user_id: int = Query(..., gt=0),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.list_orders(user_id)
    except RequestException as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.get_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Query(...),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.cancel_order(order_id, user_id)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=502, detail=str(e))
