# drinkshop/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from requests import RequestException

from drinkshop.api.deps import get_cart_service
from drinkshop.domain.schemas import CartOut, ItemIn, QuantityIn, VoucherSelectIn
from drinkshop.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


@router.get("/{session_id}", response_model=CartOut)
def get_cart(session_id: str, svc: CartService = Depends(get_cart_service)):
    return svc.get_cart(session_id)


@router.delete("/{session_id}", response_model=CartOut)
def clear_cart(session_id: str, svc: CartService = Depends(get_cart_service)):
    return svc.clear_cart(session_id)


@router.post("/{session_id}/items", response_model=CartOut)
def add_item(
    session_id: str,
    payload: ItemIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.add_product(
            session_id=session_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            ice=payload.ice,
            sugar=payload.sugar,
            is_drink=payload.is_drink,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=502, detail=f"Katalog niedostepny: {e}")


@router.patch("/{session_id}/items/{item_id}", response_model=CartOut)
def set_quantity(
    session_id: str,
    item_id: str,
    payload: QuantityIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.set_quantity(session_id, item_id, payload.quantity)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{session_id}/items/{item_id}", response_model=CartOut)
def remove_item(
    session_id: str,
    item_id: str,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.remove_item(session_id, item_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{session_id}/voucher", response_model=CartOut)
def select_voucher(
    session_id: str,
    payload: VoucherSelectIn,
    svc: CartService = Depends(get_cart_service),
):
    try:
        return svc.select_voucher(session_id, payload.voucher_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RequestException as e:
        raise HTTPException(status_code=502, detail=f"Vouchery niedostepne: {e}")


@router.delete("/{session_id}/voucher", response_model=CartOut)
def clear_voucher(session_id: str, svc: CartService = Depends(get_cart_service)):
    try:
        return svc.clear_voucher(session_id)
    except RuntimeError as e:
        raise HTTPException(status_code=409, detail=str(e))
