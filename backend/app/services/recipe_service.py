"""
Recipe Queries
Filtering, pagination and aggregate statistics over recipes.
"""

import math
import uuid
from collections import Counter
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFound
from app.models.recipe import Recipe, RecipeCategory


def escape_like(term: str) -> str:
    """Make `%` and `_` in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_recipe_filters(
    search: Optional[str] = None,
    category: Optional[RecipeCategory] = None,
    min_time: Optional[int] = None,
    max_time: Optional[int] = None,
    owner_id: Optional[uuid.UUID] = None,
) -> list:
    """Translate listing query parameters into SQL conditions."""
    conditions = []

    if search:
        pattern = f"%{escape_like(search.strip())}%"
        conditions.append(
            or_(Recipe.title.ilike(pattern, escape="\\"), Recipe.description.ilike(pattern, escape="\\"))
        )

    if category:
        conditions.append(Recipe.category == category)

    if min_time is not None:
        conditions.append(Recipe.cooking_time >= min_time)

    if max_time is not None:
        conditions.append(Recipe.cooking_time <= max_time)

    if owner_id is not None:
        conditions.append(Recipe.owner_id == owner_id)

    return conditions


async def paginate_recipes(db: AsyncSession, conditions: list, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    """Return one page of recipes matching `conditions`, newest first."""
    total = await db.scalar(select(func.count(Recipe.id)).where(*conditions)) or 0

    stmt = (
        select(Recipe)
        .where(*conditions)
        .order_by(Recipe.created_at.desc(), Recipe.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await db.execute(stmt)
    recipes = result.unique().scalars().all()

    return {
        "items": recipes,
        "total": total,
        "page": page,
        "page_size": limit,
        "total_pages": math.ceil(total / limit) if limit > 0 else 1,
    }


def parse_recipe_id(raw: str) -> uuid.UUID:
    """An id that does not parse cannot resolve to a recipe."""
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise NotFound("Recipe not found") from None


async def get_recipe_or_404(db: AsyncSession, raw_id: str) -> Recipe:
    recipe = await db.get(Recipe, parse_recipe_id(raw_id))
    if recipe is None:
        raise NotFound("Recipe not found")
    return recipe


async def category_stats(db: AsyncSession) -> List[Dict[str, Any]]:
    """Recipe count and average cooking time per category, largest first."""
    recipe_count = func.count(Recipe.id).label("recipe_count")
    stmt = (
        select(Recipe.category, recipe_count, func.avg(Recipe.cooking_time).label("avg_time"))
        .group_by(Recipe.category)
        .order_by(recipe_count.desc(), Recipe.category)
    )
    result = await db.execute(stmt)
    return [
        {
            "category": row.category.value,
            "count": row.recipe_count,
            "avg_cooking_time": round(float(row.avg_time or 0), 1),
        }
        for row in result
    ]


async def popular_ingredients(db: AsyncSession, limit: int = 10) -> List[Dict[str, Any]]:
    """Most frequent ingredient names across all recipes."""
    # Ingredients live in a JSON column, so the counting happens here rather than in SQL
    result = await db.execute(select(Recipe.ingredients))
    counter: Counter = Counter()
    for (ingredients,) in result:
        # Count each ingredient once per recipe
        counter.update({name.strip().lower() for name in ingredients or [] if name and name.strip()})

    ranked = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [{"name": name, "count": n} for name, n in ranked[:limit]]


async def user_recipe_stats(db: AsyncSession, user_id: uuid.UUID) -> Dict[str, Any]:
    stmt = select(
        func.count(Recipe.id),
        func.count(func.distinct(Recipe.category)),
        func.avg(Recipe.cooking_time),
    ).where(Recipe.owner_id == user_id)
    total, categories, avg_time = (await db.execute(stmt)).one()

    return {
        "total_recipes": total or 0,
        "category_count": categories or 0,
        "avg_cooking_time": round(float(avg_time or 0), 1),
    }
