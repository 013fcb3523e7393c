from contextlib import asynccontextmanager
import logging

from skillcanon.core.config import settings
from skillcanon.storage import get_interaction_store
from skillcanon.taxonomy import get_default_taxonomy

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    taxonomy = get_default_taxonomy()
    logger.info(
        "taxonomy_loaded version=%s domains=%s clusters=%s",
        taxonomy.version,
        len(taxonomy.domains()),
        taxonomy.cluster_count,
    )
    store = get_interaction_store() if settings.interactions_enabled else None
    yield
    if store is not None:
        store.close()
