"""
Entity merge endpoint.

POST /api/merge — two named images in, one fused Symbiote out (AI-generated).
For merging two saved gallery cards see POST /api/cards/merge.
"""

from fastapi import APIRouter, HTTPException

from .. import schemas
from ..errors import PareidoError
from ..image_utils import load_request_image, to_data_url
from ..merger import merge_entities
from .errors import to_http_exception

router = APIRouter(tags=["merge"])


@router.post("/merge", response_model=schemas.AnalysisResult)
def merge(request: schemas.MergeRequest):
    """Fuse two entities with Gemini. Materials are normalized like /analyze."""
    if not request.image1 or not request.image2 or not request.name1 or not request.name2:
        raise HTTPException(status_code=400, detail="Two images and two names are required")

    try:
        image1 = to_data_url(*load_request_image(request.image1))
        image2 = to_data_url(*load_request_image(request.image2))
        return merge_entities(image1, request.name1, image2, request.name2)
    except PareidoError as e:
        raise to_http_exception(e)
