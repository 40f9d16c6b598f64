"""Streaming selection of assemblies from a branch catalog."""

import logging
from collections import Counter
from typing import Iterable, Iterator, Optional, Sequence

from taxfetch.models.assembly import AssemblyRecord
from taxfetch.models.errors import ConfigError
from taxfetch.core.taxonomy import TaxonomyTree
from taxfetch.core.utils import COMPLETE_GENOME, FILE_TYPES

logger = logging.getLogger(__name__)

class CatalogStats:
    """Counts of catalog rows seen, accepted and skipped by reason."""

    def __init__(self):
        self.rows = 0
        self.accepted = 0
        self.skipped = Counter()

    def skip(self, reason: str) -> None:
        self.skipped[reason] += 1

    def summary(self) -> str:
        parts = [f"{self.rows} rows read", f"{self.accepted} accepted"]
        parts += [f"{count} {reason}" for reason, count in sorted(self.skipped.items())]
        return ", ".join(parts)

def resolve_suffix(file_type: str) -> str:
    """
    Look up the filename suffix for a file type.

    Raises:
        ConfigError: If file_type is not one of FILE_TYPES
    """
    try:
        return FILE_TYPES[file_type]
    except KeyError:
        raise ConfigError(f"File type must be one of {{{', '.join(FILE_TYPES)}}}, got '{file_type}'")

def derive_target_url(base_location: str, suffix: str) -> str:
    """
    Build the download URL of an assembly file.

    The last path segment of the base location is the assembly name, so
    ``https://host/genomes/ASM123`` with ``_genomic.fna.gz`` becomes
    ``https://host/genomes/ASM123/ASM123_genomic.fna.gz``.
    """
    base = base_location.rstrip("/")
    name = base.split("/")[-1]
    return f"{base}/{name}{suffix}"

def filter_catalog(
    tree: TaxonomyTree,
    rows: Iterable[Sequence[str]],
    taxid: int,
    include_all_levels: bool = False,
    stats: Optional[CatalogStats] = None
) -> Iterator[AssemblyRecord]:
    """
    Yield the catalog records that belong to the subtree rooted at taxid.

    Rows are processed one at a time in catalog order; every qualifying row
    is yielded, including repeated taxa.

    Args:
        tree: Taxonomy tree
        rows: Iterable of tab-split catalog rows
        taxid: Query taxid
        include_all_levels: Accept every assembly level, not only "Complete Genome"
        stats: Optional CatalogStats updated as rows are consumed

    Yields:
        AssemblyRecord for every accepted row
    """
    if stats is None:
        stats = CatalogStats()

    for row_number, fields in enumerate(rows, start=1):
        if not fields or fields[0].startswith("#") or not "".join(fields).strip():
            continue
        stats.rows += 1

        record = AssemblyRecord.from_fields(fields, row_number)
        if record is None:
            logger.warning(f"Skipping short catalog row {row_number} ({len(fields)} fields)")
            stats.skip("short rows")
            continue

        if not include_all_levels and record.assembly_level != COMPLETE_GENOME:
            stats.skip("below quality level")
            continue

        try:
            row_taxid = int(record.taxid)
        except ValueError:
            logger.warning(f"Skipping catalog row {row_number}: invalid taxon ID '{record.taxid}'")
            stats.skip("invalid taxon IDs")
            continue
        if row_taxid not in tree:
            logger.warning(f"Taxon ID {row_taxid} not found in taxonomy (row {row_number}, {record.accession})")
            stats.skip("unknown taxon IDs")
            continue

        if not tree.is_ancestor(taxid, row_taxid):
            stats.skip("outside subtree")
            continue

        if not record.has_location:
            logger.warning(f"No download location for {record.accession} (row {row_number})")
            stats.skip("without location")
            continue

        stats.accepted += 1
        yield record

def iter_target_locations(
    tree: TaxonomyTree,
    rows: Iterable[Sequence[str]],
    taxid: int,
    include_all_levels: bool = False
) -> Iterator[str]:
    """Yield the base download location of each accepted catalog row."""
    for record in filter_catalog(tree, rows, taxid, include_all_levels):
        yield record.ftp_path
