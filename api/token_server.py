"""
Token server - issues voice provider access tokens to browser clients.

Run with:
    uvicorn api.token_server:app --port 8000
"""
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import settings
from services.voice_token_client import VoiceTokenClient, VoiceTokenError

logger = logging.getLogger(__name__)

TOKEN_ERROR_MESSAGE = "Failed to get access token"


def get_token_client() -> VoiceTokenClient:
    """Token client built from the current settings."""
    return VoiceTokenClient.from_settings(settings)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(title=f"{settings.APP_NAME} Token Server")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/auth/token")
    async def get_access_token(client: VoiceTokenClient = Depends(get_token_client)):
        """Return a fresh access token as {"accessToken": ...}."""
        try:
            access_token = await client.fetch_access_token()
        except VoiceTokenError as e:
            logger.error(f"Error fetching voice access token: {e}")
            return JSONResponse(status_code=500, content={"error": TOKEN_ERROR_MESSAGE})
        except Exception as e:
            logger.error(f"Unexpected error fetching voice access token: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": TOKEN_ERROR_MESSAGE})

        return {"accessToken": access_token}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(app, host=settings.TOKEN_SERVER_HOST, port=settings.TOKEN_SERVER_PORT)
