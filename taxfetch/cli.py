#!/usr/bin/env python3
"""Command-line interface for taxfetch."""

import sys
import argparse
import logging
from typing import List, Optional

from taxfetch import __version__
from taxfetch.core.utils import (
    setup_logging, CATALOG_SOURCES, DEFAULT_FILE_TYPE, FILE_TYPES, TAXDUMP_URL
)
from taxfetch.models.config import FetchConfig
from taxfetch.models.errors import TaxfetchError, TaxonomyError

logger = logging.getLogger(__name__)

def create_parser() -> argparse.ArgumentParser:
    """
    Create and return the argument parser for taxfetch.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="taxfetch",
        description="Download all NCBI genomes of the taxonomy sub-tree below a taxon ID",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s v{__version__}'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        'taxid',
        type=int,
        help='taxon ID of the sub-tree to download, e.g. 203682 for Planctomycetes'
    )
    parser.add_argument(
        '--type', '-t',
        choices=list(FILE_TYPES),
        default=DEFAULT_FILE_TYPE,
        help='file type to download for each assembly'
    )
    parser.add_argument(
        '--all-levels', '-a',
        action='store_true',
        help='download assemblies of every assembly level, not only "Complete Genome"'
    )
    parser.add_argument(
        '--outdir', '-o',
        type=str,
        default=".",
        help='directory for taxonomy, catalog and genome files'
    )
    parser.add_argument(
        '--taxdump',
        type=str,
        default=None,
        help='local nodes.dmp or taxdump.tar.gz instead of downloading it (or set TAXFETCH_TAXDUMP)'
    )
    parser.add_argument(
        '--catalog',
        type=str,
        default=None,
        help='local assembly_summary.txt instead of downloading the branch catalog'
    )
    parser.add_argument(
        '--source',
        choices=list(CATALOG_SOURCES),
        default='refseq',
        help='NCBI assembly catalog to select genomes from'
    )
    parser.add_argument(
        '--no-fungi',
        action='store_true',
        help='only resolve taxa within Bacteria, Archaea and Viruses'
    )
    parser.add_argument(
        '--threads',
        type=int,
        default=4,
        help='maximum number of concurrent downloads'
    )
    parser.add_argument(
        '--manifest',
        type=str,
        default=None,
        help='write a TSV of the selected assemblies to this path'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='print the download URLs without downloading'
    )

    return parser

def load_tree(config: FetchConfig, fetcher):
    """
    Load the taxonomy from a local dump or from NCBI.

    Args:
        config: Run configuration
        fetcher: Fetcher used for the taxdump download

    Returns:
        TaxonomyTree
    """
    from taxfetch.io.parsers import extract_nodes, load_taxonomy

    if config.taxdump:
        return load_taxonomy(config.taxdump)

    logger.info(f"Downloading {TAXDUMP_URL}")
    archive = fetcher.fetch(TAXDUMP_URL, config.outdir).path
    nodes_path = extract_nodes(archive, config.outdir)
    return load_taxonomy(nodes_path)

def run_fetch(config: FetchConfig, fetcher=None, out=None) -> int:
    """
    Run the end-to-end selection and download.

    Args:
        config: Run configuration
        fetcher: Fetcher for all transfers, created from config if None
        out: Stream for --dry-run URLs, defaults to stdout

    Returns:
        Exit code (0 for success, 1 if any genome failed to download)
    """
    from taxfetch.core.fetcher import Fetcher

    if fetcher is not None:
        return _run_fetch(config, fetcher, out or sys.stdout)
    with Fetcher(workers=config.threads, show_progress=not config.verbose) as fetcher:
        return _run_fetch(config, fetcher, out or sys.stdout)

def _run_fetch(config: FetchConfig, fetcher, out) -> int:
    from taxfetch.core.branches import build_branch_table, resolve_branch
    from taxfetch.core.catalog import CatalogStats, derive_target_url, filter_catalog
    from taxfetch.io.parsers import read_catalog_rows
    from taxfetch.io.writers import write_manifest

    config.outdir.mkdir(parents=True, exist_ok=True)

    tree = load_tree(config, fetcher)
    if config.taxid not in tree:
        raise TaxonomyError(f"Taxon ID {config.taxid} is not found in taxonomy")

    branch_table = build_branch_table(config.include_fungi, config.source)
    branch = resolve_branch(tree, config.taxid, branch_table)
    logger.info(f"Taxon {config.taxid} belongs to {branch.name}")

    if config.catalog:
        catalog_path = config.catalog
    else:
        logger.info(f"Downloading assembly summary {branch.catalog_url}")
        catalog_path = fetcher.fetch(
            branch.catalog_url,
            config.outdir,
            filename=f"assembly_summary_{config.source}_{branch.name.lower()}.txt"
        ).path

    stats = CatalogStats()
    records = list(filter_catalog(
        tree,
        read_catalog_rows(catalog_path),
        config.taxid,
        config.include_all_levels,
        stats
    ))
    logger.info(f"Catalog scan: {stats.summary()}")

    if config.manifest:
        write_manifest(records, config.manifest, config.suffix)

    urls = [derive_target_url(record.ftp_path, config.suffix) for record in records]

    if config.dry_run:
        for url in urls:
            print(url, file=out)
        return 0

    logger.info(f"Downloading {len(urls)} genomes")
    summary = fetcher.fetch_all(urls, config.outdir)
    if not summary.ok:
        logger.error(f"{len(summary.failed)} of {len(urls)} genomes failed to download")
        return 1
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the taxfetch command-line interface.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    logger = setup_logging(args.verbose)

    try:
        config = FetchConfig.from_args(args)
        return run_fetch(config)

    except TaxfetchError as e:
        logger.error(f"Error: {str(e)}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {str(e)}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
