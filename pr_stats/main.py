import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hypercorn.asyncio import serve
from hypercorn.config import Config

from .config import Settings
from .gh_client import GitHubClient
from .models import ErrorResponse, StatsReport, StatsRequest
from .stats import search_prs_by_date

from dotenv import load_dotenv
load_dotenv(override=True)

log = logging.getLogger("main")

router = APIRouter()


def get_client(request: Request) -> GitHubClient:
    return request.app.state.gh_client

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/")
async def home():
    return JSONResponse({"message": "Hello World"})

@router.post(
    "/github-stats",
    response_model=StatsReport,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def github_stats(
    payload: Optional[StatsRequest] = None,
    client: GitHubClient = Depends(get_client),
    settings: Settings = Depends(get_settings),
):
    if payload is None or payload.usernames is None or not payload.startDate:
        return JSONResponse(status_code=400, content={"error": "Usernames and startDate are required."})
    try:
        return await search_prs_by_date(
            client, payload.usernames, payload.startDate, max_concurrency=settings.max_concurrency
        )
    except Exception:
        log.exception("Error handling /github-stats request")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch GitHub stats."})


async def invalid_body(request: Request, exc: RequestValidationError):
    log.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body."})


def create_app(client: Optional[GitHubClient] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if client is None:
        client = GitHubClient(settings.github_token, settings.repo_owner, settings.repo_name)

    app = FastAPI(title="PR Review Stats")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, invalid_body)
    app.include_router(router)
    app.state.settings = settings
    app.state.gh_client = client
    return app


app = create_app()


if __name__ == "__main__":
    settings = app.state.settings
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = Config()
    config.bind = [f"{settings.host}:{settings.port}"]

    log.info("App listening on http://localhost:%s", settings.port)
    asyncio.run(serve(app, config))
