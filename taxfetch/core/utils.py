"""Utility functions and constants for taxfetch."""

import logging

# Well-known taxon ids
ROOT_TAXID = 1
CELLULAR_ORGANISMS_TAXID = 131567
BACTERIA_TAXID = 2
ARCHAEA_TAXID = 2157
EUKARYOTA_TAXID = 2759
FUNGI_TAXID = 4751
VIRUSES_TAXID = 10239

# Queries too coarse to resolve to a single branch
UNRESOLVABLE_TAXIDS = {
    ROOT_TAXID: "the universal root",
    CELLULAR_ORGANISMS_TAXID: "'cellular organisms'",
}

NCBI_HOST = "ftp.ncbi.nlm.nih.gov"
TAXDUMP_URL = f"https://{NCBI_HOST}/pub/taxonomy/taxdump.tar.gz"
NODES_FILENAME = "nodes.dmp"
CATALOG_FILENAME = "assembly_summary.txt"

# Suffix appended to an assembly's base name for each downloadable file type
FILE_TYPES = {
    'gbff': '_genomic.gbff.gz',
    'fna': '_genomic.fna.gz',
    'faa': '_protein.faa.gz',
    'gff': '_genomic.gff.gz',
}
DEFAULT_FILE_TYPE = 'gbff'
CATALOG_SOURCES = ('refseq', 'genbank')
COMPLETE_GENOME = "Complete Genome"

def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the taxfetch application.

    Args:
        verbose: Whether to enable verbose (DEBUG) logging

    Returns:
        Logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    return logging.getLogger('taxfetch')
