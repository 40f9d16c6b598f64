"""Configuration management for taxfetch."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from taxfetch.models.errors import ConfigError
from taxfetch.core.catalog import resolve_suffix
from taxfetch.core.utils import CATALOG_SOURCES, DEFAULT_FILE_TYPE, UNRESOLVABLE_TAXIDS

@dataclass(frozen=True)
class FetchConfig:
    """Immutable settings for one run."""
    taxid: int
    file_type: str = DEFAULT_FILE_TYPE
    include_all_levels: bool = False
    outdir: Path = Path(".")
    taxdump: Optional[Path] = None
    catalog: Optional[Path] = None
    source: str = 'refseq'
    include_fungi: bool = True
    threads: int = 4
    manifest: Optional[Path] = None
    dry_run: bool = False
    verbose: bool = False

    def __post_init__(self):
        resolve_suffix(self.file_type)
        if self.taxid < 1:
            raise ConfigError(f"Taxon ID must be a positive integer, got {self.taxid}")
        if self.taxid in UNRESOLVABLE_TAXIDS:
            raise ConfigError(
                f"Taxon ID {self.taxid} is {UNRESOLVABLE_TAXIDS[self.taxid]}; "
                "please choose a taxon within a single branch."
            )
        if self.source not in CATALOG_SOURCES:
            raise ConfigError(f"Catalog source must be one of {{{', '.join(CATALOG_SOURCES)}}}, got '{self.source}'")
        if self.threads < 1:
            raise ConfigError(f"--threads must be at least 1, got {self.threads}")

    @property
    def suffix(self) -> str:
        return resolve_suffix(self.file_type)

    @classmethod
    def from_args(cls, args: Optional[Any] = None) -> 'FetchConfig':
        """
        Initialize configuration from args and environment.

        Args:
            args: Arguments from argparse

        Returns:
            Validated configuration

        Raises:
            ConfigError: If required configuration is missing or invalid
        """
        taxid = getattr(args, 'taxid', None)
        if taxid is None:
            raise ConfigError("Usage: taxfetch <taxon id>")
        try:
            taxid = int(taxid)
        except (TypeError, ValueError):
            raise ConfigError(f"Taxon ID must be an integer, got '{taxid}'")

        # Local taxonomy, falling back to the environment
        taxdump = getattr(args, 'taxdump', None) or os.environ.get("TAXFETCH_TAXDUMP")
        catalog = getattr(args, 'catalog', None)
        manifest = getattr(args, 'manifest', None)

        return cls(
            taxid=taxid,
            file_type=getattr(args, 'type', DEFAULT_FILE_TYPE),
            include_all_levels=getattr(args, 'all_levels', False),
            outdir=Path(getattr(args, 'outdir', None) or "."),
            taxdump=Path(taxdump) if taxdump else None,
            catalog=Path(catalog) if catalog else None,
            source=getattr(args, 'source', 'refseq'),
            include_fungi=not getattr(args, 'no_fungi', False),
            threads=getattr(args, 'threads', 4),
            manifest=Path(manifest) if manifest else None,
            dry_run=getattr(args, 'dry_run', False),
            verbose=getattr(args, 'verbose', False)
        )
