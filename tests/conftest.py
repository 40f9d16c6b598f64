"""Shared pytest fixtures for taxfetch tests."""

from pathlib import Path
from typing import List

import pytest

from taxfetch.core.taxonomy import TaxonomyTree

HOST = "https://ftp.ncbi.nlm.nih.gov/genomes/all/GCF"


def catalog_row(accession: str, taxid, level: str = "Complete Genome", ftp_path: str = None) -> List[str]:
    """Build a 22-column assembly_summary.txt row."""
    fields = ["na"] * 22
    fields[0] = accession
    fields[5] = str(taxid)
    fields[7] = f"Organism {taxid}"
    fields[11] = level
    fields[19] = ftp_path if ftp_path is not None else f"{HOST}/{accession}_ASM{taxid}v1"
    return fields


def nodes_line(taxid: int, parent: int, rank: str = "no rank") -> str:
    """Build a nodes.dmp line."""
    return f"{taxid}\t|\t{parent}\t|\t{rank}\t|\t\t|\t0\t|\n"


# 1 root, 131567 cellular organisms, 2 Bacteria, 2157 Archaea, 2759 Eukaryota,
# 4751 Fungi, 10239 Viruses; 1224 Proteobacteria below Bacteria, 562 E. coli below it
NODES = {
    1: 1,
    131567: 1,
    2: 131567,
    1224: 2,
    562: 1224,
    2157: 131567,
    2759: 131567,
    33208: 2759,
    4751: 2759,
    4932: 4751,
    10239: 1,
    11320: 10239,
    12908: 1,
}


@pytest.fixture
def tree():
    """Small NCBI-shaped taxonomy."""
    return TaxonomyTree(NODES)


@pytest.fixture
def nodes_file(tmp_path) -> Path:
    """nodes.dmp for the NODES taxonomy."""
    path = tmp_path / "nodes.dmp"
    path.write_text("".join(nodes_line(taxid, parent) for taxid, parent in NODES.items()))
    return path


@pytest.fixture
def catalog_file(tmp_path) -> Path:
    """assembly_summary.txt with bacterial assemblies."""
    rows = [
        catalog_row("GCF_000005845.2", 562),
        catalog_row("GCF_000008865.2", 562, level="Scaffold"),
        catalog_row("GCF_000001.1", 1224),
        catalog_row("GCF_000002.1", 2157),
        catalog_row("GCF_000003.1", 562, ftp_path="na"),
    ]
    path = tmp_path / "assembly_summary.txt"
    lines = ["#   See ftp://ftp.ncbi.nlm.nih.gov/genomes/README_assembly_summary.txt",
             "# assembly_accession\tbioproject\tbiosample"]
    lines += ["\t".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n")
    return path
