"""FastAPI service run by the ECS tasks."""

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"


app = FastAPI(title="App", description="Workload behind the load balancer")


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for the target group."""
    return HealthResponse()


@app.get("/", response_class=PlainTextResponse)
async def index() -> str:
    """Plain text greeting."""
    return "Hello World from FastAPI!"


def main() -> None:
    """Run the service on `PORT`."""
    port = int(os.environ.get("PORT") or DEFAULT_PORT)
    logger.info(f"Server is running at http://localhost:{port}")
    uvicorn.run(app, host="0.0.0.0", port=port)  # nosec B104
