from fastapi import APIRouter

from skillcanon.core.config import settings
from skillcanon.taxonomy import get_default_taxonomy

router = APIRouter()


@router.get("/health", summary="Health Check", description="Service status and the loaded taxonomy version.")
async def health_check():
    taxonomy = get_default_taxonomy()
    return {
        "status": "healthy",
        "taxonomy_version": taxonomy.version,
        "clusters": taxonomy.cluster_count,
        "provider": settings.ai_provider,
        "model": settings.gemini_model,
    }
