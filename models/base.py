"""
Base schema for API bodies and data files.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Block notation is whitespace-sensitive (indentation, blank lines
    between scripts), so strings are kept exactly as sent. Fields with a
    camelCase wire name accept either spelling.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=False,
        validate_assignment=True,
    )
