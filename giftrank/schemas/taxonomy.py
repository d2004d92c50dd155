"""Taxonomy schemas"""

from pydantic import BaseModel
from typing import List


class TagResponse(BaseModel):
    """A taxonomy tag with its catalogue count"""

    id: str
    label: str
    count: int


class TaxonomyGroupResponse(BaseModel):
    """A taxonomy group with the distinct items it covers"""

    id: str
    label: str
    emoji: str
    count: int
    tags: List[TagResponse]
