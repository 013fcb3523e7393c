from functools import lru_cache

from skillcanon.core.config import settings

from .local_taxonomy import LocalTaxonomy
from .provider import ClusterInfo, DomainInfo, TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy() -> LocalTaxonomy:
    return LocalTaxonomy(settings.taxonomy_path)


__all__ = ["ClusterInfo", "DomainInfo", "TaxonomyProvider", "LocalTaxonomy", "get_default_taxonomy"]
