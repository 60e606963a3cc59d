# juliecraft/api/endpoints/cart.py

import copy
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from juliecraft.api.endpoints.auth import get_current_user
from juliecraft.core.errors import ValidationError
from juliecraft.core.permissions import AuthenticatedCaller
from juliecraft.database import get_db
from juliecraft.models.auth import utcnow
from juliecraft.models.cart import UserCart
from juliecraft.schemas.cart import CartLoad, CartMigrate, CartMigrateResult, CartSave
from juliecraft.schemas.auth import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _find_cart(db: Session, user_id: Optional[str] = None, session_id: Optional[str] = None) -> Optional[UserCart]:
    """Looks a cart up by exactly one key; user_id wins when both are given."""
    if user_id:
        return db.query(UserCart).filter(UserCart.user_id == user_id).first()
    if session_id:
        return db.query(UserCart).filter(UserCart.session_id == session_id).first()
    return None


# ***************************************************************
# 1. Load (GET /load)
# ***************************************************************
@router.get("/load", response_model=CartLoad)
def load_cart(
    user_id: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Returns the stored cart blob, or nulls when nothing was saved under that key."""
    if not user_id and not session_id:
        raise ValidationError("User ID or Session ID required")

    cart = _find_cart(db, user_id, session_id)
    if cart is None:
        return {"cart_data": None, "updated_at": None}
    return {"cart_data": cart.cart_data, "updated_at": cart.updated_at}


# ***************************************************************
# 2. Save (POST /save)
# ***************************************************************
@router.post("/save", response_model=MessageResponse)
def save_cart(body: CartSave, db: Session = Depends(get_db)):
    """
    Overwrites the whole cart (last write wins). A user_id-keyed save never
    stores the session id, so the two keys stay disjoint.
    """
    if body.cart_data is None:
        raise ValidationError("Cart data required")
    if not body.user_id and not body.session_id:
        raise ValidationError("User ID or Session ID required")

    cart = _find_cart(db, body.user_id, body.session_id)
    if cart is None:
        if body.user_id:
            cart = UserCart(user_id=body.user_id)
        else:
            cart = UserCart(session_id=body.session_id)
        db.add(cart)

    cart.cart_data = body.cart_data
    cart.updated_at = utcnow()
    db.commit()

    return {"success": True, "message": "Cart saved successfully"}


# ***************************************************************
# 3. Migrate a guest cart into the user's cart (POST /migrate)
# ***************************************************************

def merge_cart_items(user_items: list, guest_items: list) -> list:
    """Adds guest quantities onto matching item ids; new ids are appended."""
    merged = copy.deepcopy(user_items)
    by_id = {item.get("id"): item for item in merged}

    for guest_item in guest_items:
        existing = by_id.get(guest_item.get("id"))
        if existing is not None:
            existing["quantity"] = existing.get("quantity", 0) + guest_item.get("quantity", 0)
        else:
            item = copy.deepcopy(guest_item)
            merged.append(item)
            by_id[item.get("id")] = item

    return merged


@router.post("/migrate", response_model=CartMigrateResult)
def migrate_cart(
    body: CartMigrate,
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    """Called right after login to fold the anonymous cart into the user's cart."""
    if not body.session_id or not body.guest_cart_data:
        raise ValidationError("Session ID and guest cart data are required")

    user_key = str(caller.id)
    user_cart = _find_cart(db, user_id=user_key)
    guest_cart = _find_cart(db, session_id=body.session_id)

    if user_cart is not None and isinstance(user_cart.cart_data, list) and user_cart.cart_data:
        merged = merge_cart_items(user_cart.cart_data, body.guest_cart_data)
        user_cart.cart_data = merged
        if guest_cart is not None:
            db.delete(guest_cart)
        db.commit()
        logger.info("Merged guest cart %s into cart of %s", body.session_id, caller.email)
        return {"success": True, "message": "Guest cart merged with user cart", "cart_data": merged}

    # No usable user cart: the guest cart becomes the user's cart
    if user_cart is not None:
        db.delete(user_cart)
        db.flush()
    if guest_cart is not None:
        guest_cart.user_id = user_key
        guest_cart.session_id = None
        guest_cart.cart_data = body.guest_cart_data
    else:
        db.add(UserCart(user_id=user_key, cart_data=body.guest_cart_data))
    db.commit()

    logger.info("Transferred guest cart %s to %s", body.session_id, caller.email)
    return {"success": True, "message": "Guest cart transferred to user", "cart_data": body.guest_cart_data}
