"""File readers for taxonomy dumps and assembly catalogs."""

import gzip
import io
import logging
import tarfile
from pathlib import Path
from typing import Iterator, List, Union

from taxfetch.models.errors import InputError, TaxonomyError
from taxfetch.core.taxonomy import TaxonomyTree
from taxfetch.core.utils import NODES_FILENAME

logger = logging.getLogger(__name__)

def open_text(path: Path):
    """Open a plain or gzip-compressed text file for reading."""
    if str(path).endswith(".gz"):
        return gzip.open(path, "rt", encoding="utf-8", errors="replace")
    return open(path, "r", encoding="utf-8", errors="replace")

def is_taxdump_archive(path: Path) -> bool:
    return str(path).endswith((".tar.gz", ".tgz", ".tar"))

def read_taxonomy_lines(path: Path) -> Iterator[str]:
    """
    Lazily yield the lines of nodes.dmp.

    Args:
        path: Path to nodes.dmp, or to a taxdump archive containing it

    Yields:
        Raw nodes.dmp lines

    Raises:
        InputError: If the file cannot be read
        TaxonomyError: If the archive holds no nodes.dmp
    """
    path = Path(path)
    try:
        if is_taxdump_archive(path):
            with tarfile.open(path, "r:*") as tar:
                try:
                    member = tar.getmember(NODES_FILENAME)
                except KeyError:
                    raise TaxonomyError(f"{NODES_FILENAME} not found in {path}")
                file_obj = tar.extractfile(member)
                if file_obj is None:
                    raise TaxonomyError(f"{NODES_FILENAME} in {path} is not a regular file")
                with io.TextIOWrapper(file_obj, encoding="utf-8", errors="replace") as text:
                    yield from text
        else:
            with open_text(path) as file:
                yield from file
    except (OSError, tarfile.TarError) as e:
        raise InputError(f"Error reading taxonomy file {path}: {str(e)}")

def extract_nodes(archive: Path, dest_dir: Path) -> Path:
    """
    Extract nodes.dmp from a taxdump archive.

    Only the nodes.dmp member is written, through extractfile(), so member
    names are never used as output paths.

    Args:
        archive: Path to taxdump.tar.gz
        dest_dir: Directory to write nodes.dmp into

    Returns:
        Path to the extracted nodes.dmp
    """
    dest_dir = Path(dest_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest_path = dest_dir / NODES_FILENAME
    try:
        with tarfile.open(archive, "r:*") as tar:
            try:
                member = tar.getmember(NODES_FILENAME)
            except KeyError:
                raise TaxonomyError(f"{NODES_FILENAME} not found in {archive}")
            file_obj = tar.extractfile(member)
            if file_obj is None:
                raise TaxonomyError(f"{NODES_FILENAME} in {archive} is not a regular file")
            with open(dest_path, "wb") as dest:
                while True:
                    chunk = file_obj.read(1 << 20)
                    if not chunk:
                        break
                    dest.write(chunk)
    except (OSError, tarfile.TarError) as e:
        raise InputError(f"Error extracting {NODES_FILENAME} from {archive}: {str(e)}")

    logger.info(f"Extracted {NODES_FILENAME} to {dest_path}")
    return dest_path

def load_taxonomy(path: Path) -> TaxonomyTree:
    """
    Build a TaxonomyTree from nodes.dmp or a taxdump archive.

    Raises:
        TaxonomyError: If no taxonomy nodes could be read
    """
    logger.info(f"Reading taxonomy from {path}")
    tree = TaxonomyTree.from_lines(read_taxonomy_lines(path))
    if len(tree) == 0:
        raise TaxonomyError(f"No taxonomy nodes found in {path}")
    logger.info(f"Loaded {len(tree)} taxonomy nodes")
    return tree

def read_catalog_rows(path: Union[str, Path]) -> Iterator[List[str]]:
    """
    Lazily yield the tab-split rows of an assembly catalog.

    Args:
        path: Path to assembly_summary.txt (optionally gzip-compressed)

    Yields:
        List of field strings for each line, comment lines included

    Raises:
        InputError: If the catalog cannot be read
    """
    try:
        with open_text(Path(path)) as file:
            for line in file:
                yield line.rstrip("\r\n").split("\t")
    except OSError as e:
        raise InputError(f"Error reading assembly catalog {path}: {str(e)}")
