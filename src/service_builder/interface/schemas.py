"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from service_builder.domain.entities import DirectoryStatus, RunReport


class BuildRequest(BaseModel):
    """Request body for ``POST /builds``."""

    commit_sha: str

    @field_validator("commit_sha")
    @classmethod
    def _must_be_hex(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "commit_sha must not be empty."
            raise ValueError(msg)
        if any(c not in "0123456789abcdefABCDEF" for c in stripped):
            msg = f"Invalid commit SHA: '{stripped}'."
            raise ValueError(msg)
        return stripped


class DirectoryResultSchema(BaseModel):
    directory: str
    status: DirectoryStatus
    built: bool
    error: str | None = None


class BuildResponse(BaseModel):
    """Outcome of ``POST /builds``."""

    success: bool
    directories: list[DirectoryResultSchema]

    @classmethod
    def from_report(cls, report: RunReport) -> BuildResponse:
        return cls(
            success=report.success,
            directories=[
                DirectoryResultSchema(
                    directory=r.directory, status=r.status, built=r.built, error=r.error
                )
                for r in report.results
            ],
        )


class ErrorResponse(BaseModel):
    """Body of every failed request; *error* names the exception class."""

    status: str = "error"
    error: str
    message: str
