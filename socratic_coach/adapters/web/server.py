"""FastAPI application and startup."""

import uvicorn
from fastapi import FastAPI

from socratic_coach.adapters.web.routes import coach_router, coach
from socratic_coach.config import CONFIG, __version__

app = FastAPI(title="Socratic Coach", version=__version__)
app.include_router(coach_router)


@app.get("/status")
async def status():
    """Server status endpoint"""
    provider = coach.provider
    return {
        "version": __version__,
        "aiProvider": CONFIG["ai_provider"],
        "model": CONFIG["model"],
        "providerConfigured": getattr(provider, "is_configured", True),
    }


def main():
    uvicorn.run(app, host="0.0.0.0", port=CONFIG["port"], log_level="info")


if __name__ == "__main__":
    main()
