"""
Identify board games from a box art photo to populate the catalog.
"""

import logging
from typing import Optional

from ..config import BOX_ART_EXTRACTION_PROMPT
from ..error_handling import BGGLibraryError, describe_service_error
from ..models import EnrichmentRequest, ImageAnalysisResult
from .client import EnrichmentClient
from .parser import parse_games

logger = logging.getLogger(__name__)


def analyze_game_image(image_bytes: bytes, mime_type: str = "image/jpeg",
                       client: Optional[EnrichmentClient] = None) -> ImageAnalysisResult:
    """
    Extract game information for every box visible in an image.

    Service and configuration failures are reported on the result rather
    than raised.

    Args:
        image_bytes: Photo of one or more game boxes
        mime_type: MIME type of the photo
        client: Client to use; one with the box art prompt is built if omitted

    Returns:
        Analysis result with zero or more games
    """
    try:
        client = client or EnrichmentClient(prompt_template=BOX_ART_EXTRACTION_PROMPT)
        raw = client.call(EnrichmentRequest(image=image_bytes, mime_type=mime_type))
    except BGGLibraryError as e:
        logger.error(f"Box art analysis failed: {e}")
        return ImageAnalysisResult(success=False, error=describe_service_error(e))

    games = parse_games(raw)
    logger.info(f"Identified {len(games)} game(s) in image")
    return ImageAnalysisResult(success=True, games=games, game_count=len(games), raw_response=raw)
