"""Data models for assembly catalogs and branches."""

from typing import List, Optional, Sequence
from dataclasses import dataclass

# 0-based columns of an NCBI assembly_summary.txt row
ACCESSION_COL = 0
TAXID_COL = 5
ORGANISM_NAME_COL = 7
ASSEMBLY_LEVEL_COL = 11
FTP_PATH_COL = 19
MIN_CATALOG_FIELDS = FTP_PATH_COL + 1

NO_FTP_PATH = "na"

@dataclass(frozen=True)
class Branch:
    """A top-level taxonomic domain with its own assembly catalog."""
    name: str
    taxid: int
    catalog_url: str

@dataclass(frozen=True)
class AssemblyRecord:
    """One data row of an assembly catalog."""
    accession: str
    taxid: str
    organism_name: str
    assembly_level: str
    ftp_path: str
    row_number: int = 0

    @classmethod
    def from_fields(cls, fields: Sequence[str], row_number: int = 0) -> Optional['AssemblyRecord']:
        """Create from a split catalog row, or None if the row is too short."""
        if len(fields) < MIN_CATALOG_FIELDS:
            return None
        return cls(
            accession=fields[ACCESSION_COL],
            taxid=fields[TAXID_COL].strip(),
            organism_name=fields[ORGANISM_NAME_COL],
            assembly_level=fields[ASSEMBLY_LEVEL_COL],
            ftp_path=fields[FTP_PATH_COL].strip(),
            row_number=row_number
        )

    @property
    def has_location(self) -> bool:
        return self.ftp_path not in ("", NO_FTP_PATH)

    def as_row(self) -> List[str]:
        """Convert to a list of manifest column values."""
        return [self.accession, self.taxid, self.organism_name, self.assembly_level, self.ftp_path]
