"""
POST /api/analyze-bug
=====================
Runs the bug-localization pipeline for one issue against a local workspace
and returns the full AnalysisResult (candidates, commits, notes, suggestion).

Error Mapping:
    400 — issue record unusable, or workspace root missing / unreadable
    502 — reasoning collaborator failed or timed out
    504 — the whole analysis exceeded ANALYSIS_TIMEOUT_SECONDS
"""
import asyncio
import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, field_validator

from buglocator.agents.orchestrator import Orchestrator
from buglocator.core.config import ANALYSIS_TIMEOUT_SECONDS
from buglocator.core.errors import ReasoningError, WorkspaceAccessError
from buglocator.llm.client import LLMClient
from buglocator.models.analysis_result import AnalysisResult
from buglocator.services.issue_intake import bug_report_from_issue, is_bug_issue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bug Analysis"])


# ---------------------------------------------------------------------------
# Request schema
# ---------------------------------------------------------------------------
class AnalyzeBugRequest(BaseModel):
    issue: dict[str, Any]
    workspace_path: str
    include_globs: Optional[list[str]] = None
    exclude_globs: Optional[list[str]] = None

    @field_validator("workspace_path")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("workspace_path must not be empty")
        return value


def build_orchestrator() -> tuple[Orchestrator, LLMClient]:
    """Factory seam so tests can swap in a fake reasoning client."""
    client = LLMClient()
    return Orchestrator(reasoning_client=client), client


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------
@router.post("/analyze-bug", response_model=AnalysisResult)
async def analyze_bug(request: AnalyzeBugRequest):
    """Analyse one defect ticket and return ranked locations and a fix suggestion."""
    try:
        report = bug_report_from_issue(request.issue)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not is_bug_issue(request.issue):
        logger.info("[API] %s is not typed as a bug; analysing anyway", report.issue_key)

    logger.info("[API] New bug analysis request for %s in %s", report.issue_key, request.workspace_path)

    orchestrator, client = build_orchestrator()
    start = time.time()
    try:
        result = await asyncio.wait_for(
            orchestrator.analyze(
                report,
                workspace_root=request.workspace_path,
                include_globs=request.include_globs,
                exclude_globs=request.exclude_globs,
            ),
            timeout=ANALYSIS_TIMEOUT_SECONDS,
        )
    except WorkspaceAccessError as exc:
        logger.error("[API] %s", exc)
        raise HTTPException(status_code=400, detail=str(exc))
    except ReasoningError as exc:
        logger.error("[API] %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except asyncio.TimeoutError:
        elapsed = time.time() - start
        logger.warning("[API] TIMEOUT after %.1fs for %s", elapsed, report.issue_key)
        raise HTTPException(status_code=504, detail=f"Analysis timed out after {elapsed:.0f}s")
    finally:
        await client.close()

    logger.info(
        "[API] Analysis finished for %s in %.1fs | candidates=%d commits=%d",
        report.issue_key, time.time() - start, len(result.candidates), len(result.commits),
    )
    return result
