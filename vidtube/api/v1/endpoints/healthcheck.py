# ============================================================================
# FILE: vidtube/api/v1/endpoints/healthcheck.py
# ============================================================================
from fastapi import APIRouter
from vidtube.schemas.common import api_response

router = APIRouter()

@router.get("")
async def health_check():
    return api_response({"status": "OK"}, "Service is healthy")
