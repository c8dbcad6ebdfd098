from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item. New items always start uncompleted.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "buy milk",
            }
        }
    )

    description: str = Field(..., description="Text of the todo item")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.

    Both fields are optional, but the update always writes both columns:
    an omitted description is stored as "" and an omitted completed flag as false.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "description": "buy oat milk",
                "completed": True,
            }
        }
    )

    description: Optional[str] = Field(default=None, description="New text; omitted means empty")
    completed: Optional[bool] = Field(default=None, description="New completion flag; omitted means false")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "description": "buy milk",
                "completed": False,
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    description: str = Field(..., description="Text of the todo item")
    completed: bool = Field(..., description="Completion status flag")
