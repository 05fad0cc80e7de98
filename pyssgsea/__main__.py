"""
Main module for running pyssgsea from the commandline.
"""

import argparse
import logging
import sys

from . import enrichments, loading


LOGGER = logging.getLogger("pyssgsea.main")


def _parse_args(args):
    """
    Parses arguments.

    Parameters
    ----------
    args : list of str

    Returns
    -------
    argparse.Namespace
    """
    parser = argparse.ArgumentParser(
        prog="pyssgsea",
        description="Score gene sets in each sample of an expression matrix.",
    )

    parser.add_argument(
        "expression",
        help="Tab-delimited genes x samples expression matrix.",
    )
    parser.add_argument(
        "gene_sets",
        help="Gene sets in GMT format.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Increase verbosity of output.",
    )
    parser.add_argument(
        "--alpha",
        type=float, default=enrichments.DEFAULT_ALPHA,
        help="Exponent used to weight gene set members by rank.",
    )
    parser.add_argument(
        "--no-scale",
        dest="scale", action="store_false",
        help="Do not divide running sums by the number of genes.",
    )
    parser.add_argument(
        "--norm",
        action="store_true",
        help="Divide all scores by their global range.",
    )
    parser.add_argument(
        "--classic",
        dest="single", action="store_false",
        help="Report the signed maximum deviation instead of the integral.",
    )
    parser.add_argument(
        "--min-hits",
        type=int, default=0,
        help="Drop gene sets with fewer genes present in the matrix.",
    )
    parser.add_argument(
        "--out",
        help="Write the score matrix to this path instead of printing it.",
    )

    return parser.parse_args(args)


def format_scores(scores):
    """
    Format a score matrix as one line per sample.

    Parameters
    ----------
    scores : :class:`pandas.DataFrame`

    Returns
    -------
    list of str
    """
    return [
        "\t".join(
            [str(sample)] + [
                "{}={:.4f}".format(name, val)
                for name, val in scores.iloc[:, col].items()
            ]
        )
        for col, sample in enumerate(scores.columns)
    ]


def main(args):
    """
    Calculate enrichment scores from commandline arguments.

    Parameters
    ----------
    args : list of str

    Returns
    -------
    int
        Exit status.
    """
    args = _parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        expr = loading.read_expression(args.expression)
        gene_sets = loading.read_gmt(args.gene_sets)

        if args.min_hits > 0:
            gene_sets = loading.filter_gene_sets(
                gene_sets, expr,
                min_hits=args.min_hits,
            )

        scores = enrichments.ssgsea(
            expr,
            gene_sets,
            alpha=args.alpha,
            scale=args.scale,
            norm=args.norm,
            single=args.single,
        )

        if args.out:
            loading.write_scores(scores, args.out)
    except (OSError, ValueError):
        LOGGER.error("Failed to calculate enrichment scores", exc_info=True)
        return 1

    if not args.out:
        for line in format_scores(scores):
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
