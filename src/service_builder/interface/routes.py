"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from service_builder.interface.dependencies import UseCaseFactory, get_use_case_factory
from service_builder.interface.schemas import BuildRequest, BuildResponse

router = APIRouter()


@router.post(
    "/builds",
    response_model=BuildResponse,
    responses={
        422: {"description": "Invalid commit SHA"},
        403: {"description": "Repository access denied"},
        404: {"description": "Commit not found"},
        409: {"description": "Workspace is checked out at another commit"},
        429: {"description": "GitHub API rate limit exceeded"},
        502: {"description": "Commit diff could not be fetched or is malformed"},
    },
)
async def create_build(
    body: BuildRequest,
    factory: UseCaseFactory = Depends(get_use_case_factory),
) -> BuildResponse:
    """Classify a commit and build every service directory it affects."""
    report = await factory(body.commit_sha).execute(body.commit_sha)
    return BuildResponse.from_report(report)


@router.get("/health", include_in_schema=False)
async def health() -> dict[str, str]:
    return {"status": "ok"}
