"""PlantBaby API — dependency injection."""

from fastapi import Request

from plantbaby.core.core import PlantBaby


def get_plantbaby(request: Request) -> PlantBaby:
    """Get the PlantBaby instance from app state."""
    return request.app.state.plantbaby
