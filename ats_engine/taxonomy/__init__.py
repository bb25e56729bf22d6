from functools import lru_cache

from .local_taxonomy import LocalTaxonomy
from .provider import TaxonomyError, TaxonomyProvider


@lru_cache(maxsize=1)
def get_default_taxonomy() -> LocalTaxonomy:
    return LocalTaxonomy()


__all__ = ["TaxonomyError", "TaxonomyProvider", "LocalTaxonomy", "get_default_taxonomy"]
