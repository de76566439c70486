"""Lambda routes (read-only)."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from stackview.api.deps import service
from stackview.aws.lambda_service import LambdaService

router = APIRouter()


@router.get("/functions")
async def functions(
    function_name: Optional[str] = Query(None, alias="functionName"),
    svc: LambdaService = Depends(service(LambdaService)),
) -> dict[str, Any]:
    """List functions, or describe one when ``functionName`` is given."""
    if function_name:
        return await svc.get_function(function_name)
    return await svc.alist_functions()
