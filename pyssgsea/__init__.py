'''
pyssgsea calculates single-sample and classic gene set enrichment scores
for every sample of an expression matrix.
'''

from . import (
    enrichments, loading, utils, version,
)
from .enrichments import (
    DegenerateGeneSetError, DegenerateNormalizationError, InvalidInputError,
    ssgsea,
)


__all__ = [
    'enrichments',
    'loading',
    'utils',
    'version',

    'ssgsea',
    'DegenerateGeneSetError',
    'DegenerateNormalizationError',
    'InvalidInputError',
]
