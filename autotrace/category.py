"""Category enum for vehicle types."""

from enum import Enum
from typing import Optional, Union


class Category(Enum):
    """Vehicle categories with their own preventive schedule."""

    CAR = "car"
    MOTORCYCLE = "motorcycle"
    TRUCK = "truck"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[Union[str, "Category"]]) -> "Category":
        """Map a category name to a Category, falling back to OTHER."""
        if isinstance(value, Category):
            return value
        if value is None:
            return cls.OTHER
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER
