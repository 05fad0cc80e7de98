'''
This module provides functionality for loading and saving data.

Functionality includes reading expression matrices and GMT gene set files,
filtering gene sets by their coverage of a matrix, and writing score tables.
'''

# Built-ins
from collections import OrderedDict
import logging
import os

# Core data analysis libraries
import pandas as pd

from . import enrichments, utils


LOGGER = logging.getLogger('pyssgsea.loading')


def read_expression(path, sep='\t'):
    '''
    Read a gene x sample expression matrix from a delimited text file.

    The first column holds gene identifiers and the header row holds sample
    identifiers.

    Parameters
    ----------
    path : str
    sep : str, optional

    Returns
    -------
    expr : :class:`pandas.DataFrame`
    '''
    LOGGER.info('Loading expression matrix from {}'.format(path))

    expr = pd.read_csv(path, sep=sep, index_col=0)
    expr.index = expr.index.astype(str)
    expr.columns = expr.columns.astype(str)

    LOGGER.info(
        'Loaded {} genes x {} samples'.format(expr.shape[0], expr.shape[1])
    )

    return expr


def read_gmt(path, encoding='utf-8'):
    '''
    Read gene sets from a GMT file.

    Each line holds a set name, a description, and one gene per remaining
    tab-separated field.

    Parameters
    ----------
    path : str
    encoding : str, optional

    Returns
    -------
    df : :class:`pandas.DataFrame`
        Gene sets with 'name' and 'set' columns.
    '''
    LOGGER.info('Loading gene sets from {}'.format(path))

    def _get_data(line):
        fields = line.rstrip('\r\n').split('\t')

        if len(fields) < 2:
            raise enrichments.InvalidInputError(
                'Malformed GMT line: {!r}'.format(line)
            )

        return fields[0], set(i.strip() for i in fields[2:] if i.strip())

    with open(path, encoding=encoding) as f:
        pathways_df = pd.DataFrame(
            data=[
                _get_data(line)
                for line in f
                if line.strip()
            ],
            columns=['name', 'set'],
        )

    LOGGER.info('Loaded {} gene sets'.format(pathways_df.shape[0]))

    return pathways_df


def filter_gene_sets(gene_sets, expr, min_hits=1):
    '''
    Filter gene sets to include only those with at least a given number of
    hits in an expression matrix. Sets covering every gene in the matrix are
    dropped as well.

    Parameters
    ----------
    gene_sets : dict of (str, list of str) or :class:`pandas.DataFrame`
    expr : :class:`pandas.DataFrame`
    min_hits : int, optional

    Returns
    -------
    gene_sets : :class:`collections.OrderedDict` of (str, set of str)
    '''
    LOGGER.info('Filtering gene sets')

    total_sets = enrichments.get_gene_sets(gene_sets)
    all_genes = set(expr.index)

    gene_sets = OrderedDict(
        (name, genes)
        for name, genes in total_sets.items()
        if len(all_genes.intersection(genes)) >= max([min_hits, 1]) and
        not all_genes.issubset(genes)
    )

    LOGGER.info(
        'Filtered {} gene sets down to {} with >= {} genes present'
        .format(len(total_sets), len(gene_sets), min_hits)
    )

    return gene_sets


def write_scores(scores, path, sep='\t'):
    '''
    Write a score matrix to a delimited text file.

    Parameters
    ----------
    scores : :class:`pandas.DataFrame`
    path : str
    sep : str, optional

    Returns
    -------
    path : str
    '''
    utils.makedirs(os.path.dirname(path))

    LOGGER.info('Writing {} scores to {}'.format(scores.size, path))

    scores.to_csv(path, sep=sep)

    return path
