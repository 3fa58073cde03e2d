"""
Knowledge service client for Together.ai integration in the enrichment pipeline.
"""

import base64
import io
import logging
from typing import Any, Dict, List, Optional

from PIL import Image

from ..config import (
    TOGETHER_API_KEY,
    MODEL_NAME,
    MAX_RESPONSE_TOKENS,
    TEMPERATURE,
    MAX_IMAGE_SIZE_MB,
    AGE_LOOKUP_PROMPT,
    TITLE_PLACEHOLDER,
)
from ..error_handling import ConfigurationError, TransientCallError
from ..models import EnrichmentRequest

logger = logging.getLogger(__name__)


def render_prompt(template: str, title: Optional[str]) -> str:
    """Substitute a game title into a prompt template."""
    return template.replace(TITLE_PLACEHOLDER, (title or "").strip())


def optimize_image(image_bytes: bytes, max_size_mb: float = MAX_IMAGE_SIZE_MB) -> Optional[bytes]:
    """
    Shrink an image to reduce upload size and token costs.

    Args:
        image_bytes: Original image bytes
        max_size_mb: Maximum size in MB

    Returns:
        JPEG bytes when the image had to be re-encoded, None when it is
        already within limits or cannot be decoded
    """
    current_size_mb = len(image_bytes) / (1024 * 1024)
    if current_size_mb <= max_size_mb:
        return None

    try:
        image = Image.open(io.BytesIO(image_bytes))
        image = image.convert('RGB')
    except Exception as e:
        logger.warning(f"Error decoding image, sending original: {e}")
        return None

    logger.info(f"Optimizing image from {current_size_mb:.2f}MB to target {max_size_mb}MB")

    width, height = image.size
    aspect_ratio = width / height if height else 1.0
    target_width = width
    target_height = height
    quality = 85

    while True:
        resized = image.resize((target_width, target_height), Image.Resampling.LANCZOS)
        buffer = io.BytesIO()
        resized.save(buffer, format='JPEG', quality=quality, optimize=True, progressive=True)
        size_mb = len(buffer.getvalue()) / (1024 * 1024)

        if size_mb <= max_size_mb or (target_width < 800 and quality <= 70):
            logger.info(f"Image optimized to {size_mb:.2f}MB at {target_width}x{target_height}, q={quality}")
            return buffer.getvalue()

        # Prefer reducing quality a bit before resizing further
        if quality > 70:
            quality -= 5
        else:
            target_width = max(1, int(target_width * 0.9))
            target_height = max(1, int(target_width / aspect_ratio))


class EnrichmentClient:
    """
    Sends one templated prompt (optionally with an image) to Together.ai and
    returns the raw response text.

    The client never retries; callers own retry and pacing policy.
    """

    def __init__(self, prompt_template: str = AGE_LOOKUP_PROMPT, api_key: Optional[str] = None,
                 model_name: str = MODEL_NAME, client: Any = None):
        """
        Initialize the enrichment client.

        Args:
            prompt_template: Prompt with a ``{TITLE}`` placeholder
            api_key: Together.ai API key (defaults to environment variable)
            model_name: Name of the model to use
            client: Pre-built Together-compatible client, bypasses credential checks
        """
        self.prompt_template = prompt_template
        self.model_name = model_name
        self.client = client

        if self.client is None:
            api_key = api_key or TOGETHER_API_KEY
            if not api_key:
                raise ConfigurationError("TOGETHER_API_KEY environment variable is not set")
            self._initialize_client(api_key)

    def _initialize_client(self, api_key: str) -> None:
        """Initialize the Together.ai client."""
        try:
            from together import Together
        except ImportError:
            raise ImportError("Together.ai Python client not installed. Run: pip install together")
        self.client = Together(api_key=api_key)
        logger.info(f"Together.ai client initialized with model: {self.model_name}")

    def build_messages(self, request: EnrichmentRequest) -> List[Dict[str, Any]]:
        """Build the chat messages for one request."""
        prompt = render_prompt(self.prompt_template, request.title)
        if request.image is None:
            return [{"role": "user", "content": prompt}]

        image_bytes = request.image
        mime_type = request.mime_type
        optimized = optimize_image(image_bytes)
        if optimized is not None:
            image_bytes, mime_type = optimized, "image/jpeg"
        encoded = base64.b64encode(image_bytes).decode('utf-8')
        return [{
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
            ],
        }]

    def call(self, request: EnrichmentRequest) -> str:
        """
        Issue exactly one service call.

        Args:
            request: Title and/or image to look up

        Returns:
            The service's response text, unmodified

        Raises:
            TransientCallError: The service call failed or returned no choices
        """
        messages = self.build_messages(request)
        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                max_tokens=MAX_RESPONSE_TOKENS,
                temperature=TEMPERATURE,
            )
        except Exception as e:
            raise TransientCallError(f"Knowledge service call failed: {e}") from e

        if not getattr(response, "choices", None):
            raise TransientCallError("No response from knowledge service")
        return response.choices[0].message.content or ""
