# -*- coding: utf-8 -*-
'''
This module does most of the heavy lifting for pyssgsea.

It includes functions for ranking samples, calculating single-sample
(ssGSEA) and classic (GSEA) enrichment scores, and normalizing the assembled
score matrix.
'''

from collections import OrderedDict
from collections.abc import Mapping
import logging

import numpy as np
import pandas as pd

from . import utils


LOGGER = logging.getLogger('pyssgsea.enrichments')

DEFAULT_ALPHA = 0.25
'''
Exponent applied to the ranks of gene set members when weighting the
running sum. Larger values up-weight highly expressed genes more strongly.
'''
DEFAULT_SCALE = True
'''
Divide each running-sum profile by the number of genes in the matrix, making
scores comparable between matrices of different sizes.
'''
DEFAULT_NORM = False
'''
Divide the whole score matrix by its global range (max - min).
'''
DEFAULT_SINGLE = True
'''
Use the single-sample (integral) score instead of the classic signed
maximum deviation.
'''
DEFAULT_ON_DEGENERATE = 'raise'
DEGENERATE_POLICIES = (
    'raise',
    'nan',
)
'''
Policies for gene sets / normalizations that would divide by zero. 'raise'
fails with an exception, 'nan' fills the affected scores with NaN.
'''
ESS_METHODS = {
    'max_abs': lambda x: max(x, key=abs),
    'integral': lambda x: np.sum(x),
}
'''
Functions reducing a running-sum profile to a single enrichment score.
'''


class InvalidInputError(ValueError):
    '''
    Raised when an expression matrix or gene set collection cannot be scored.
    '''


class DegenerateGeneSetError(ValueError):
    '''
    Raised when a gene set matches none or all of the genes in a matrix.
    '''
    def __init__(self, name, n_hits, n_genes):
        self.name = name
        self.n_hits = n_hits
        self.n_genes = n_genes

        super(DegenerateGeneSetError, self).__init__(
            'Gene set {}matches {} of {} genes in the expression matrix'
            .format(
                '' if name is None else '{!r} '.format(name),
                n_hits,
                n_genes,
            )
        )


class DegenerateNormalizationError(ValueError):
    '''
    Raised when the score matrix has no range to normalize by.
    '''


def check_expression(expr):
    '''
    Validate an expression matrix and convert its values to floats.

    Every column must already have a numeric dtype; object columns, even
    ones holding numeric strings, are rejected.

    Parameters
    ----------
    expr : :class:`pandas.DataFrame`
        Genes (rows) x samples (columns).

    Returns
    -------
    expr : :class:`pandas.DataFrame`
    '''
    if not isinstance(expr, pd.DataFrame):
        expr = pd.DataFrame(expr)

    if expr.shape[0] == 0 or expr.shape[1] == 0:
        raise InvalidInputError(
            'Expression matrix is empty ({} genes x {} samples)'
            .format(*expr.shape)
        )

    non_numeric = [
        col
        for col, dtype in expr.dtypes.items()
        if not pd.api.types.is_numeric_dtype(dtype)
    ]

    if non_numeric:
        raise InvalidInputError(
            'Expression matrix has non-numeric sample columns: {}'
            .format(non_numeric)
        )

    values = expr.values.astype(float)

    if not np.isfinite(values).all():
        raise InvalidInputError(
            'Expression matrix contains {} NaN / infinite values'
            .format((~np.isfinite(values)).sum())
        )

    return pd.DataFrame(values, index=expr.index, columns=expr.columns)


def get_gene_sets(gene_sets):
    '''
    Convert a gene set collection into an ordered mapping of name to set.

    Parameters
    ----------
    gene_sets : dict of (str, list of str) or :class:`pandas.DataFrame`
        Either a mapping or a data frame with 'name' and 'set' columns, as
        returned by :func:`pyssgsea.loading.read_gmt`.

    Returns
    -------
    gene_sets : :class:`collections.OrderedDict` of (str, set of str)
    '''
    if isinstance(gene_sets, pd.DataFrame):
        for col in ['name', 'set']:
            if col not in gene_sets.columns:
                raise InvalidInputError(
                    'Gene set table is missing column {!r}'.format(col)
                )

        items = list(zip(gene_sets['name'], gene_sets['set']))
    elif isinstance(gene_sets, Mapping):
        items = list(gene_sets.items())
    else:
        raise InvalidInputError(
            'Unsupported gene set collection: {}'.format(type(gene_sets))
        )

    ret = OrderedDict()

    for name, genes in items:
        if name in ret:
            raise InvalidInputError(
                'Duplicate gene set name: {!r}'.format(name)
            )

        try:
            ret[name] = utils.flatten_set(genes)
        except TypeError as err:
            raise InvalidInputError(
                'Gene set {!r} is not a collection of gene IDs: {}'
                .format(name, err)
            ) from err

    return ret


def rank_samples(expr):
    '''
    Rank genes within each sample, lowest value first. Tied values are
    assigned the mean of the ranks they span.

    Parameters
    ----------
    expr : :class:`pandas.DataFrame`

    Returns
    -------
    ranks : :class:`pandas.DataFrame`
    '''
    return expr.rank(axis=0, method='average')


def get_hits(index, gene_set):
    '''
    Find which rows of an expression matrix belong to a gene set. Genes
    missing from the matrix are ignored.

    Parameters
    ----------
    index : :class:`pandas.Index`
    gene_set : set of str

    Returns
    -------
    hits : :class:`numpy.ndarray` of bool
    '''
    return np.asarray(pd.Index(index).isin(set(gene_set)), dtype=bool)


def calculate_es_s(
    ranks,
    hits,
    alpha=None,
    scale=None,
    single=None,
    name=None,
):
    '''
    Calculate the enrichment score of one gene set in one sample.

    Genes are walked from the highest to the lowest rank. The running sum is
    the rank-weighted CDF of gene set members minus the CDF of the remaining
    genes.

    Parameters
    ----------
    ranks : :class:`numpy.ndarray` of float
        The sample's ranks, as returned by :func:`rank_samples`.
    hits : :class:`numpy.ndarray` of bool
        Gene set membership, aligned with ranks.
    alpha : float, optional
    scale : bool, optional
    single : bool, optional
    name : str, optional
        Gene set name, used in error messages.

    Returns
    -------
    dict
        'ess' is the enrichment score, 'cumscore' the running-sum profile,
        'hits' the membership mask in walking order and 'order' the walking
        order itself.
    '''
    if alpha is None:
        alpha = DEFAULT_ALPHA

    if scale is None:
        scale = DEFAULT_SCALE

    if single is None:
        single = DEFAULT_SINGLE

    ranks = np.asarray(ranks, dtype=float)
    hits = np.asarray(hits, dtype=bool)

    if ranks.shape != hits.shape:
        raise InvalidInputError(
            'Ranks and hits have different shapes: {} != {}'
            .format(ranks.shape, hits.shape)
        )

    n = ranks.shape[0]
    order = np.argsort(-ranks, kind='mergesort')
    in_set = hits[order]
    not_in_set = ~in_set
    n_h = int(in_set.sum())

    if n_h == 0 or n_h == n:
        raise DegenerateGeneSetError(name, n_h, n)

    weights = np.where(in_set, ranks[order] ** alpha, 0)

    cumscore = (
        np.cumsum(weights) / weights.sum()
    ) - (
        np.cumsum(not_in_set) / not_in_set.sum()
    )

    if scale:
        cumscore = cumscore / n

    ess = ESS_METHODS['integral' if single else 'max_abs'](cumscore)

    return {
        'ess': float(ess),
        'cumscore': cumscore,
        'hits': in_set,
        'order': order,
    }


def normalize_scores(scores, on_degenerate=None):
    '''
    Divide a score matrix by its global range (max - min). Only finite
    entries contribute to the range.

    Parameters
    ----------
    scores : :class:`pandas.DataFrame`
    on_degenerate : str, optional
        One of {'raise', 'nan'}.

    Returns
    -------
    scores : :class:`pandas.DataFrame`
    '''
    if on_degenerate is None:
        on_degenerate = DEFAULT_ON_DEGENERATE

    values = scores.values.astype(float)
    finite = values[np.isfinite(values)]

    spread = (finite.max() - finite.min()) if finite.size > 0 else 0

    if spread == 0:
        msg = (
            'Cannot normalize scores: range of {} finite scores is zero'
            .format(finite.size)
        )

        if on_degenerate == 'raise':
            raise DegenerateNormalizationError(msg)

        LOGGER.warning(msg)

        return scores * np.nan

    LOGGER.info('Normalizing scores by range {:.4g}'.format(spread))

    return scores / spread


def ssgsea(
    expr,
    gene_sets,
    alpha=None,
    scale=None,
    norm=None,
    single=None,
    on_degenerate=None,
):
    '''
    Calculate enrichment scores for each gene set in each sample.

    Parameters
    ----------
    expr : :class:`pandas.DataFrame`
        Genes (rows) x samples (columns).
    gene_sets : dict of (str, list of str) or :class:`pandas.DataFrame`
    alpha : float, optional
    scale : bool, optional
    norm : bool, optional
    single : bool, optional
    on_degenerate : str, optional
        One of {'raise', 'nan'}.

    Returns
    -------
    scores : :class:`pandas.DataFrame`
        Gene sets (rows, in collection order) x samples (columns, in matrix
        order).

    Examples
    --------
    >>> expr = pd.DataFrame(
    ...     {'s1': [5, 3, 1], 's2': [1, 2, 3]},
    ...     index=['g1', 'g2', 'g3'],
    ... )
    >>> scores = ssgsea(expr, {'up': ['g1', 'g2']}, scale=False)
    >>> [round(float(i), 4) for i in scores.loc['up']]
    [1.5253, -1.4568]
    '''
    if alpha is None:
        alpha = DEFAULT_ALPHA

    if scale is None:
        scale = DEFAULT_SCALE

    if norm is None:
        norm = DEFAULT_NORM

    if single is None:
        single = DEFAULT_SINGLE

    if on_degenerate is None:
        on_degenerate = DEFAULT_ON_DEGENERATE

    if on_degenerate not in DEGENERATE_POLICIES:
        raise InvalidInputError(
            'Unknown degenerate policy: {!r}'.format(on_degenerate)
        )

    expr = check_expression(expr)
    gene_sets = get_gene_sets(gene_sets)

    if not gene_sets:
        raise InvalidInputError('No gene sets provided')

    LOGGER.info(
        'Calculating enrichment scores for {} gene sets '
        '({} genes x {} samples)'
        .format(len(gene_sets), expr.shape[0], expr.shape[1])
    )

    ranks = rank_samples(expr)
    n = expr.shape[0]

    scores = pd.DataFrame(
        np.nan,
        index=pd.Index(list(gene_sets.keys()), name='name'),
        columns=expr.columns,
        dtype=float,
    )

    for set_ind, (name, gene_set) in enumerate(gene_sets.items()):
        hits = get_hits(expr.index, gene_set)
        n_hits = int(hits.sum())

        if n_hits == 0 or n_hits == n:
            if on_degenerate == 'raise':
                raise DegenerateGeneSetError(name, n_hits, n)

            LOGGER.warning(
                'Gene set {!r} matches {} of {} genes, filling with NaN'
                .format(name, n_hits, n)
            )
            continue

        LOGGER.debug(
            '-- {}: {} / {} genes present'.format(name, n_hits, len(gene_set))
        )

        scores.iloc[set_ind] = [
            calculate_es_s(
                ranks.iloc[:, col].values,
                hits,
                alpha=alpha,
                scale=scale,
                single=single,
                name=name,
            )['ess']
            for col in range(ranks.shape[1])
        ]

    if norm:
        scores = normalize_scores(scores, on_degenerate=on_degenerate)

    LOGGER.info('Calculated {} enrichment scores'.format(scores.size))

    return scores
