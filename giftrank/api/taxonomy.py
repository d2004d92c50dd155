"""Taxonomy API endpoints"""

from fastapi import APIRouter, Depends
from typing import List

from ..schemas.taxonomy import TagResponse, TaxonomyGroupResponse
from ..services.corpus import Corpus
from ..services.taxonomy import TAXONOMY, count_for_group, count_for_tag
from ..utils.dependencies import get_corpus

router = APIRouter()


@router.get("/", response_model=List[TaxonomyGroupResponse])
def list_taxonomy(corpus: Corpus = Depends(get_corpus)):
    """Taxonomy groups and tags with catalogue counts"""

    return [
        TaxonomyGroupResponse(
            id=group.id,
            label=group.label,
            emoji=group.emoji,
            count=count_for_group(corpus.items, group.id),
            tags=[
                TagResponse(id=tag.id, label=tag.label, count=count_for_tag(corpus.items, tag.id))
                for tag in group.tags
            ]
        )
        for group in TAXONOMY
    ]
