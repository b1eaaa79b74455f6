"""
Image analysis endpoint.

POST /api/analyze — photo in, Symbiote (name, creativity score, normalized materials) out.
"""

from fastapi import APIRouter, HTTPException

from .. import schemas
from ..analyzer import analyze_image
from ..errors import PareidoError
from ..image_utils import load_request_image, to_data_url
from .errors import to_http_exception

router = APIRouter(tags=["analysis"])


@router.post("/analyze", response_model=schemas.AnalysisResult)
def analyze(request: schemas.AnalyzeRequest):
    """
    Analyze a photo with Gemini.

    - image: data URL or raw base64 (a camera capture), or the photo_url of /api/photos/upload
    - Materials are always normalized to sum to 10-20
    - Does NOT save anything. Use /api/save to turn the result into a card.
    """
    if not request.image:
        raise HTTPException(status_code=400, detail="Image is required")

    try:
        image = to_data_url(*load_request_image(request.image))
        return analyze_image(image)
    except PareidoError as e:
        raise to_http_exception(e)
