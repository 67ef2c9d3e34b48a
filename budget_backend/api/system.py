from datetime import datetime, timezone
from typing import Dict

from fastapi import APIRouter

from ..core.version import get_version_info

router = APIRouter()


@router.get("/healthcheck")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/system/version")
def version() -> Dict[str, str]:
    """Build metadata for deployment diagnostics."""
    return get_version_info()
