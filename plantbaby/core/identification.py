"""PlantBaby Identification — asks the plant.id API what a photo shows.

One request per call, no retry, no cache. Every failure leaves this module as
one of three errors: ImageConversionError (the photo could not be encoded),
IdentificationApiError (transport failure or non-200 status) or
IdentificationDecodingError (the response had an unexpected shape).
"""

import logging

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from plantbaby.core.config import Settings
from plantbaby.core.errors import IdentificationApiError, IdentificationDecodingError
from plantbaby.core.images import encode_jpeg_base64
from plantbaby.models.plant import Plant

logger = logging.getLogger("plantbaby.identification")

REQUESTED_DETAILS = ["common_names", "scientific_name", "description", "wiki_description"]


class SimilarImage(BaseModel):
    url: str
    similarity: float | None = None


class PlantDetails(BaseModel):
    common_names: list[str] | None = None
    scientific_name: str | None = None
    description: str | None = None
    wiki_description: str | None = None


class Suggestion(BaseModel):
    id: int | str | None = None
    name: str
    probability: float = Field(..., ge=0.0, le=1.0)
    details: PlantDetails = Field(default_factory=PlantDetails)
    images: list[SimilarImage] = Field(default_factory=list, alias="similar_images")

    model_config = ConfigDict(populate_by_name=True)

    def to_plant(self) -> Plant:
        """Draft plant for the "add identified plant" flow."""
        return Plant(
            name=self.name,
            scientific_name=self.details.scientific_name,
            description=self.details.description,
        )


class _Classification(BaseModel):
    suggestions: list[Suggestion]


class _ClassificationResult(BaseModel):
    classification: _Classification


class _IdentifyResponse(BaseModel):
    result: _ClassificationResult


class PlantIdClient:
    """Client for the plant.id identify endpoint."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.endpoint = settings.plant_id_endpoint
        self.transport = transport

    def build_payload(self, image_bytes: bytes) -> dict:
        return {
            "images": [encode_jpeg_base64(image_bytes, self.settings.image_jpeg_quality)],
            "organs": ["leaf"],
            "similar_images": True,
            "details": REQUESTED_DETAILS,
        }

    async def identify(self, image_bytes: bytes) -> list[Suggestion]:
        """Return candidate species for a photo, best match first."""
        payload = self.build_payload(image_bytes)
        if not self.settings.plant_id_api_key:
            logger.warning("PLANTBABY_PLANT_ID_API_KEY not set — request will likely be rejected")

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.plant_id_timeout_seconds,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json=payload,
                    headers={"Authorization": f"Api-Key {self.settings.plant_id_api_key}"},
                )
        except httpx.HTTPError as e:
            logger.warning(f"Identification request failed: {e}")
            raise IdentificationApiError(f"Could not reach the identification service: {e}") from e

        if response.status_code != 200:
            message = self._error_message(response)
            logger.warning(f"Identification API returned {response.status_code}: {message}")
            raise IdentificationApiError(message, status=response.status_code)

        suggestions = self._parse_response(response)
        logger.info(f"Identification returned {len(suggestions)} suggestions")
        return suggestions

    def _error_message(self, response: httpx.Response) -> str | None:
        """Best-effort "message" field from an error body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and isinstance(body.get("message"), str):
            return body["message"]
        return None

    def _parse_response(self, response: httpx.Response) -> list[Suggestion]:
        try:
            parsed = _IdentifyResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(f"Unexpected identification response: {e.error_count()} errors")
            raise IdentificationDecodingError() from e
        return parsed.result.classification.suggestions
