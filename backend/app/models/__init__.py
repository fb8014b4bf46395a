"""
RecipeBox Database Models
Exports all models for use throughout the application.
"""

from app.models.user import User, UserRole
from app.models.recipe import Recipe, RecipeCategory

__all__ = [
    "User",
    "UserRole",
    "Recipe",
    "RecipeCategory",
]
