"""Resolution of a taxon to the top-level branch whose catalog lists it."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from taxfetch.models.assembly import Branch
from taxfetch.models.errors import BranchError, ConfigError, TaxonomyError
from taxfetch.core.taxonomy import TaxonomyTree
from taxfetch.core.utils import (
    ARCHAEA_TAXID, BACTERIA_TAXID, CATALOG_FILENAME, CATALOG_SOURCES, CELLULAR_ORGANISMS_TAXID,
    EUKARYOTA_TAXID, FUNGI_TAXID, NCBI_HOST, UNRESOLVABLE_TAXIDS, VIRUSES_TAXID
)

logger = logging.getLogger(__name__)

# (name, catalog key, directory under genomes/<source>/)
BRANCH_DIRECTORIES = [
    ("Bacteria", BACTERIA_TAXID, "bacteria"),
    ("Archaea", ARCHAEA_TAXID, "archaea"),
    ("Viruses", VIRUSES_TAXID, "viral"),
    ("Fungi", FUNGI_TAXID, "fungi"),
]

@dataclass(frozen=True)
class DescendRule:
    """Replace a grouping node with the next node down the lineage."""
    grouping_taxid: int
    enabled: bool = True

    def apply(self, candidate: int, depth: int, lineage: Sequence[int]) -> Tuple[int, int]:
        if not self.enabled or candidate != self.grouping_taxid:
            return candidate, depth
        if depth + 1 >= len(lineage):
            raise BranchError(
                f"Taxon {lineage[-1]} has no classification below grouping node {self.grouping_taxid}",
                lineage
            )
        return lineage[depth + 1], depth + 1

@dataclass(frozen=True)
class RemapRule:
    """Map a taxonomy node onto a different catalog key."""
    taxid: int
    catalog_taxid: int
    enabled: bool = True

    def apply(self, candidate: int, depth: int, lineage: Sequence[int]) -> Tuple[int, int]:
        if self.enabled and candidate == self.taxid:
            return self.catalog_taxid, depth
        return candidate, depth

# Applied in order to the first node below the root
DEFAULT_RULES = (
    # cellular organisms: descend to decide between Bacteria, Archaea and Eukaryota
    DescendRule(CELLULAR_ORGANISMS_TAXID),
    # Eukaryota: fungal assemblies are catalogued under the Fungi id
    RemapRule(EUKARYOTA_TAXID, FUNGI_TAXID),
)

def catalog_url(source: str, directory: str) -> str:
    """Return the assembly summary URL for a catalog source and branch directory."""
    return f"https://{NCBI_HOST}/genomes/{source}/{directory}/{CATALOG_FILENAME}"

def build_branch_table(include_fungi: bool = True, source: str = 'refseq') -> Dict[int, Branch]:
    """
    Build the mapping of catalog key taxid to Branch.

    Args:
        include_fungi: Whether fungal assemblies are supported
        source: Catalog source, 'refseq' or 'genbank'

    Returns:
        Dict mapping catalog key taxid to Branch

    Raises:
        ConfigError: If source is not a known catalog source
    """
    if source not in CATALOG_SOURCES:
        raise ConfigError(f"Catalog source must be one of {{{', '.join(CATALOG_SOURCES)}}}, got '{source}'")

    table = {}
    for name, taxid, directory in BRANCH_DIRECTORIES:
        if taxid == FUNGI_TAXID and not include_fungi:
            continue
        table[taxid] = Branch(name, taxid, catalog_url(source, directory))
    return table

def _describe_branches(branch_table: Dict[int, Branch]) -> str:
    names = [branch.name for branch in branch_table.values()]
    if len(names) <= 1:
        return "".join(names)
    return f"{', '.join(names[:-1])}, or {names[-1]}"

def resolve_branch(
    tree: TaxonomyTree,
    taxid: int,
    branch_table: Dict[int, Branch],
    rules: Optional[Sequence] = None
) -> Branch:
    """
    Determine which branch catalog lists assemblies for taxid.

    Args:
        tree: Taxonomy tree
        taxid: Query taxid
        branch_table: Dict mapping catalog key taxid to Branch
        rules: Substitution rules applied to the first node below the root,
            defaults to DEFAULT_RULES

    Returns:
        The Branch for taxid

    Raises:
        BranchError: If taxid is too coarse or outside every supported branch
        TaxonomyError: If taxid is missing or the taxonomy is corrupted
    """
    if taxid in UNRESOLVABLE_TAXIDS:
        raise BranchError(
            f"Taxon ID {taxid} is {UNRESOLVABLE_TAXIDS[taxid]} and spans several branches. "
            f"Please choose a taxon within {_describe_branches(branch_table)}."
        )
    if taxid not in tree:
        raise TaxonomyError(f"Taxon ID {taxid} is not found in taxonomy")

    lineage: List[int] = tree.checked_lineage(taxid)
    if len(lineage) < 2:
        raise BranchError(f"Taxon ID {taxid} is the universal root or entirely unclassified", lineage)

    candidate, depth = lineage[1], 1
    for rule in DEFAULT_RULES if rules is None else rules:
        candidate, depth = rule.apply(candidate, depth, lineage)

    branch = branch_table.get(candidate)
    if branch is None:
        raise BranchError(
            f"Taxon {taxid} does not seem to belong to {_describe_branches(branch_table)} "
            f"(lineage is {' '.join(map(str, lineage))})",
            lineage
        )

    logger.debug(f"Taxon {taxid} resolved to branch {branch.name} via {candidate}")
    return branch
