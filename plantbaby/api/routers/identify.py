"""Identify router — photo identification and adopting a suggestion."""

from fastapi import APIRouter, Depends, Request

from plantbaby.api.deps import get_plantbaby
from plantbaby.api.routers.plants import _mutation_response
from plantbaby.api.schemas import PlantMutationResponse, SimilarImageResponse, SuggestionResponse
from plantbaby.core.core import PlantBaby
from plantbaby.core.identification import PlantDetails, SimilarImage, Suggestion

router = APIRouter()


def _suggestion_response(suggestion: Suggestion) -> SuggestionResponse:
    details = suggestion.details
    return SuggestionResponse(
        id=suggestion.id,
        name=suggestion.name,
        probability=suggestion.probability,
        common_names=details.common_names or [],
        scientific_name=details.scientific_name,
        description=details.description,
        wiki_description=details.wiki_description,
        similar_images=[
            SimilarImageResponse(url=img.url, similarity=img.similarity) for img in suggestion.images
        ],
    )


@router.post("", response_model=list[SuggestionResponse])
async def identify_plant(
    request: Request,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Identify the plant in the request body image; best matches first."""
    image_bytes = await request.body()
    suggestions = await plantbaby.identify(image_bytes)
    return [_suggestion_response(s) for s in suggestions]


@router.post("/adopt", response_model=PlantMutationResponse, status_code=201)
def adopt_suggestion(
    body: SuggestionResponse,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Create a plant from a suggestion returned by POST /api/identify."""
    suggestion = Suggestion(
        id=body.id,
        name=body.name,
        probability=body.probability,
        details=PlantDetails(
            common_names=body.common_names or None,
            scientific_name=body.scientific_name,
            description=body.description,
            wiki_description=body.wiki_description,
        ),
        images=[SimilarImage(url=img.url, similarity=img.similarity) for img in body.similar_images],
    )
    plant, result = plantbaby.adopt_suggestion(suggestion)
    return _mutation_response(plant, result.persisted, plantbaby)
