"""
Base schemas with standardized field types for consistent API responses.
"""
from pydantic import BaseModel, ConfigDict


class StandardizedModel(BaseModel):
    """Base model with standardized JSON encoding"""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True)


class RecordModel(BaseModel):
    """
    Base for records read from the data store or a nested view.

    Unknown columns are ignored so that schema additions upstream do not
    break availability rendering.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)
