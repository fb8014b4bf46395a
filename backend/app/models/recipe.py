"""
Recipe Model
A recipe and the user who created it.
"""

import enum
import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, Enum, ForeignKey, JSON, Uuid, Index
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.user import utcnow


class RecipeCategory(str, enum.Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    DESSERT = "Dessert"
    SNACK = "Snack"


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    ingredients = Column(JSON, nullable=False, default=list)
    steps = Column(JSON, nullable=False, default=list)
    image_url = Column(String(1024), nullable=False, default="")
    cooking_time = Column(Integer, nullable=False)  # minutes
    category = Column(
        Enum(RecipeCategory, name="recipe_category", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    # Set once at creation, never reassigned
    owner_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    owner = relationship("User", back_populates="recipes", lazy="joined")

    __table_args__ = (
        Index("ix_recipes_owner_created", "owner_id", "created_at"),
        Index("ix_recipes_category", "category"),
    )

    def __repr__(self):
        return f"<Recipe(id={self.id}, title='{self.title}')>"
