from typing import List, Optional, Union

from pydantic import BaseModel, Field

from querysift_data_model.filter_strategy import FilterStrategy


class FilterRequestModel(BaseModel):
    """Model for a filter request loaded from JSON"""
    query: str = Field(default="", description="Search query")
    filter_by: Optional[Union[str, List[str]]] = Field(
        None, description="Property name or ordered list of property names to match against")
    strict: bool = Field(default=False, description="Only match string values when enabled")

    def to_strategy(self) -> FilterStrategy:
        """Convert the filter_by field to a FilterStrategy"""
        if self.filter_by is None or self.filter_by == "":
            return FilterStrategy.create_none()
        if isinstance(self.filter_by, str):
            return FilterStrategy.create_property(self.filter_by)
        return FilterStrategy.create_matcher_list(self.filter_by)
