"""Taxonomy tree built from an NCBI nodes.dmp style dump."""

import logging
from typing import Dict, Iterable, List, Optional

from taxfetch.models.errors import TaxonomyError
from taxfetch.core.utils import ROOT_TAXID

logger = logging.getLogger(__name__)

class TaxonomyTree:
    """In-memory mapping of taxon id to parent taxon id.

    The tree is rooted at taxid 1, which is its own parent. It is populated
    once by :meth:`from_lines` and only read afterwards.
    """

    def __init__(self, parents: Optional[Dict[int, int]] = None):
        """
        Initialize the tree from an existing id -> parent id mapping.

        Args:
            parents: Dict mapping each taxid to its parent taxid
        """
        self._parents = dict(parents) if parents else {}

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> 'TaxonomyTree':
        """
        Build a tree from pipe-delimited taxonomy records.

        The first field of each line is the taxid and the second its parent;
        any further fields are ignored. Lines without two integer fields are
        skipped. Later duplicates overwrite earlier ones.

        Args:
            lines: Iterable of raw nodes.dmp lines

        Returns:
            Populated TaxonomyTree
        """
        parents = {}
        skipped = 0
        for line_number, line in enumerate(lines, start=1):
            fields = line.split("|")
            if len(fields) < 2:
                if line.strip():
                    logger.warning(f"Skipping malformed taxonomy line {line_number}: {line.strip()!r}")
                    skipped += 1
                continue
            try:
                taxid = int(fields[0])
                parent = int(fields[1])
            except ValueError:
                logger.warning(f"Skipping malformed taxonomy line {line_number}: {line.strip()!r}")
                skipped += 1
                continue
            parents[taxid] = parent

        logger.debug(f"Loaded {len(parents)} taxonomy nodes, skipped {skipped} lines")
        return cls(parents)

    def __len__(self) -> int:
        return len(self._parents)

    def __contains__(self, taxid) -> bool:
        return taxid in self._parents

    def contains(self, taxid: int) -> bool:
        """Return True if taxid is a node of the tree."""
        return taxid in self._parents

    def parent_of(self, taxid: int) -> Optional[int]:
        """Return the parent of taxid, or None if taxid is not in the tree."""
        return self._parents.get(taxid)

    def is_ancestor(self, ancestor: int, descendant: int) -> bool:
        """
        Test whether ancestor is descendant itself or lies on its path to the root.

        Args:
            ancestor: Candidate ancestor taxid
            descendant: Taxid whose lineage is walked

        Returns:
            True if ancestor == descendant or ancestor is above descendant
        """
        if ancestor not in self._parents:
            logger.warning(f"Taxon ID {ancestor} not found in taxonomy")
            return False
        if descendant not in self._parents:
            logger.warning(f"Taxon ID {descendant} not found in taxonomy")
            return False

        current = descendant
        visited = set()
        while True:
            if current == ancestor:
                return True
            parent = self._parents.get(current)
            if parent is None or parent == current:
                return False
            if current in visited:
                logger.warning(f"Cycle in taxonomy at taxon ID {current}")
                return False
            visited.add(current)
            current = parent

    def lineage(self, taxid: int) -> List[int]:
        """
        Walk from taxid to the root and return the path root first.

        If taxid is not in the tree the result is ``[taxid]``. Callers that
        need a valid lineage should use :meth:`checked_lineage`.

        Args:
            taxid: Taxid to retrieve the lineage for

        Returns:
            List of taxids from the root down to taxid
        """
        if taxid not in self._parents:
            logger.warning(f"Taxon ID {taxid} not found in taxonomy")
            return [taxid]

        path = [taxid]
        seen = {taxid}
        current = taxid
        while current in self._parents and self._parents[current] != current:
            current = self._parents[current]
            if current in seen:
                logger.warning(f"Cycle in taxonomy at taxon ID {current}")
                break
            seen.add(current)
            path.append(current)
        path.reverse()
        return path

    def checked_lineage(self, taxid: int) -> List[int]:
        """
        Return the lineage of taxid, requiring that it starts at the root.

        Raises:
            TaxonomyError: If the lineage does not begin with the root taxid
        """
        path = self.lineage(taxid)
        if path[0] != ROOT_TAXID:
            raise TaxonomyError(
                f"Taxonomy corrupted: root node is not {ROOT_TAXID}, but is {path[0]} "
                f"(lineage of {taxid} is {' '.join(map(str, path))})"
            )
        return path
