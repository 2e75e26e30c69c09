"""PlantBaby CLI — main entry point for `plantbaby`."""


def main():
    """Start the PlantBaby server."""
    import uvicorn
    from plantbaby.core.config import get_settings

    settings = get_settings()

    print("🌿 PlantBaby — houseplant care tracker")
    print(f"   Starting on http://{settings.host}:{settings.port}")
    print(f"   API Docs:  http://{settings.host}:{settings.port}/docs")
    print("")

    uvicorn.run(
        "plantbaby.api.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
