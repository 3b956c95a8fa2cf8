# drinkshop/api/routers/vouchers.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from requests import RequestException

from drinkshop.api.deps import get_cart_service
from drinkshop.domain.schemas import VoucherOut
from drinkshop.services.cart_service import CartService

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


@router.get("/", response_model=List[VoucherOut])
def list_vouchers(
    session_id: str = Query(...),
    svc: CartService = Depends(get_cart_service),
):
    """
    Lista voucherow, eligible/projected_discount liczone dla koszyka sesji.
    """
    try:
        return svc.list_vouchers(session_id)
    except RequestException as e:
        raise HTTPException(status_code=502, detail=f"Vouchery niedostepne: {e}")
