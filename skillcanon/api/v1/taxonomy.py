from fastapi import APIRouter

from skillcanon.taxonomy import get_default_taxonomy

router = APIRouter()


@router.get("/taxonomy", summary="Skill taxonomy", description="Domains and clusters used to tag skills.")
def taxonomy_document():
    return get_default_taxonomy().as_document()
