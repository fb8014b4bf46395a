"""
Users Router
Endpoints for the authenticated user's own profile and recipes.
"""

from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.recipe import Recipe
from app.models.user import User
from app.schemas.recipe import RecipeResponse
from app.schemas.user import UserResponse, UserStats
from app.api.dependencies import get_current_user
from app.services import recipe_service

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """
    Get current user information.
    """
    return user


@router.get("/me/recipes", response_model=List[RecipeResponse])
async def get_my_recipes(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Recipes created by the current user, newest first.
    """
    result = await db.execute(
        select(Recipe).where(Recipe.owner_id == user.id).order_by(Recipe.created_at.desc())
    )
    return result.unique().scalars().all()


@router.get("/me/stats", response_model=UserStats)
async def get_my_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await recipe_service.user_recipe_stats(db, user.id)
