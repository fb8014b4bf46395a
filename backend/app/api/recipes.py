"""
Recipes Router
Browse recipes publicly; create, update and delete them when authenticated.
"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import NotFound, ValidationError
from app.models.recipe import Recipe, RecipeCategory
from app.models.user import User
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.recipe import CategoryStats, IngredientCount, RecipeCreate, RecipeResponse, RecipeUpdate
from app.api.dependencies import get_current_user
from app.services import recipe_service
from app.services.authorization import RecipeAction, ensure_can_modify
from app.services.cache import cache_response

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=PaginatedResponse[RecipeResponse])
async def list_recipes(
    search: Optional[str] = Query(None, description="Search titles and descriptions"),
    category: Optional[RecipeCategory] = None,
    min_time: Optional[int] = Query(None, ge=0, description="Minimum cooking time in minutes"),
    max_time: Optional[int] = Query(None, ge=0, description="Maximum cooking time in minutes"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    List recipes with filtering and pagination, newest first.
    """
    if min_time is not None and max_time is not None and min_time > max_time:
        raise ValidationError("min_time cannot be greater than max_time")

    conditions = recipe_service.build_recipe_filters(
        search=search,
        category=category,
        min_time=min_time,
        max_time=max_time,
    )
    return await recipe_service.paginate_recipes(db, conditions, page=page, limit=limit)


@router.get("/stats", response_model=List[CategoryStats])
@cache_response("recipes:stats")
async def get_category_stats(request: Request, db: AsyncSession = Depends(get_db)):
    """Recipe count and average cooking time per category."""
    return await recipe_service.category_stats(db)


@router.get("/popular-ingredients", response_model=List[IngredientCount])
@cache_response("recipes:ingredients")
async def get_popular_ingredients(
    request: Request,
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    return await recipe_service.popular_ingredients(db, limit=limit)


@router.get("/user/{user_id}", response_model=PaginatedResponse[RecipeResponse])
async def list_user_recipes(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Recipes created by one user.
    """
    try:
        owner_id = uuid.UUID(user_id)
    except ValueError:
        raise NotFound("User not found") from None

    if await db.get(User, owner_id) is None:
        raise NotFound("User not found")

    conditions = recipe_service.build_recipe_filters(owner_id=owner_id)
    return await recipe_service.paginate_recipes(db, conditions, page=page, limit=limit)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(recipe_id: str, db: AsyncSession = Depends(get_db)):
    return await recipe_service.get_recipe_or_404(db, recipe_id)


@router.post("", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipeCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a recipe owned by the current user.
    """
    recipe = Recipe(**recipe_data.model_dump(), owner_id=user.id)
    recipe.owner = user
    db.add(recipe)
    await db.commit()

    logger.info(f"User {user.id} created recipe {recipe.id}")
    return recipe


@router.put("/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    update_data: RecipeUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the supplied fields of a recipe.
    Allowed for the owner and for admins.
    """
    recipe = await recipe_service.get_recipe_or_404(db, recipe_id)
    ensure_can_modify(user, recipe.owner_id, RecipeAction.UPDATE)

    for field, value in update_data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(recipe, field, value)

    await db.commit()
    return recipe


@router.delete("/{recipe_id}", response_model=MessageResponse)
async def delete_recipe(
    recipe_id: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a recipe.
    Allowed for the owner, moderators and admins.
    """
    recipe = await recipe_service.get_recipe_or_404(db, recipe_id)
    ensure_can_modify(user, recipe.owner_id, RecipeAction.DELETE)

    await db.delete(recipe)
    await db.commit()

    logger.info(f"User {user.id} deleted recipe {recipe_id}")
    return {"message": "Recipe deleted"}
