from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database.core import get_db
from ..auth.service import CurrentUser
from ..schemas.cart import CartResponse, CartCountResponse, CartMutationResponse
from .service import CartService

router = APIRouter(prefix="/cart")

@router.get("/", response_model=CartResponse)
async def get_user_cart(
    current_user: CurrentUser,
    db: Session = Depends(get_db)
):
    """Get user's cart lines with current product data"""
    try:
        return await CartService.get_user_cart(db, current_user.user_id)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve cart: {str(e)}"
        )

@router.get("/count", response_model=CartCountResponse)
async def get_cart_count(
    current_user: CurrentUser,
    db: Session = Depends(get_db)
):
    """Total units in the cart (0 when empty or unavailable)"""
    count = await CartService.get_cart_count(db, current_user.user_id)
    return CartCountResponse(count=count)

@router.post("/items/{product_id}", response_model=CartMutationResponse)
async def add_to_cart(
    product_id: str,
    current_user: CurrentUser,
    db: Session = Depends(get_db)
):
    """Add one unit of a product to the cart"""
    result = await CartService.add_to_cart(db, product_id, current_user.user_id)
    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to add product to cart: {result.get('error')}"
        )
    count = await CartService.get_cart_count(db, current_user.user_id)
    return CartMutationResponse(success=True, count=count)

@router.delete("/items/{product_id}", response_model=CartMutationResponse)
async def remove_from_cart(
    product_id: str,
    current_user: CurrentUser,
    db: Session = Depends(get_db)
):
    """Remove one unit of a product from the cart"""
    result = await CartService.remove_from_cart(db, product_id, current_user.user_id)
    if not result["success"]:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to remove product from cart: {result.get('error')}"
        )
    count = await CartService.get_cart_count(db, current_user.user_id)
    return CartMutationResponse(success=True, count=count)
