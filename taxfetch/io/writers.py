"""File writers for taxfetch."""

import logging
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from taxfetch.models.assembly import AssemblyRecord
from taxfetch.models.errors import InputError
from taxfetch.core.catalog import derive_target_url

logger = logging.getLogger(__name__)

MANIFEST_COLUMNS = ["accession", "tax_id", "organism_name", "assembly_level", "ftp_path", "url"]

def write_manifest(
    records: Iterable[AssemblyRecord],
    tsv_output_path: Path,
    suffix: str
) -> pd.DataFrame:
    """
    Write the selected assemblies and their download URLs to a TSV file.

    Args:
        records: Accepted catalog records, in catalog order
        tsv_output_path: Path to output .tsv file
        suffix: Filename suffix of the selected file type

    Returns:
        DataFrame of the manifest

    Raises:
        InputError: If the manifest cannot be written
    """
    rows: List[List[str]] = [
        record.as_row() + [derive_target_url(record.ftp_path, suffix)]
        for record in records
    ]
    try:
        manifest_df = pd.DataFrame(rows, columns=MANIFEST_COLUMNS)
        manifest_df.to_csv(tsv_output_path, sep='\t', index=False)
        logger.info(f"Wrote manifest of {len(manifest_df)} assemblies to {tsv_output_path}")
        return manifest_df

    except OSError as e:
        raise InputError(f"Error writing manifest: {str(e)}")
