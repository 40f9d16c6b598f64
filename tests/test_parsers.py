"""Tests for taxonomy and catalog readers."""

import gzip
import io
import tarfile

import pytest

from taxfetch.core.catalog import filter_catalog
from taxfetch.io.parsers import (
    extract_nodes, load_taxonomy, read_catalog_rows, read_taxonomy_lines
)
from taxfetch.models.errors import InputError, TaxonomyError

from conftest import NODES, catalog_row


def make_taxdump(path, nodes_text, names=("nodes.dmp",)):
    """Write a tar.gz archive holding the given members."""
    data = nodes_text.encode("utf-8")
    with tarfile.open(path, "w:gz") as tar:
        for name in names:
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


class TestReadTaxonomy:
    """Reading nodes.dmp directly and from a taxdump archive."""

    def test_plain_file(self, nodes_file):
        lines = list(read_taxonomy_lines(nodes_file))
        assert len(lines) == len(NODES)
        assert lines[0].startswith("1\t|\t1\t|")

    def test_gzip_file(self, tmp_path, nodes_file):
        gz_path = tmp_path / "nodes.dmp.gz"
        with gzip.open(gz_path, "wt") as out:
            out.write(nodes_file.read_text())
        assert len(list(read_taxonomy_lines(gz_path))) == len(NODES)

    def test_archive(self, tmp_path, nodes_file):
        archive = make_taxdump(tmp_path / "taxdump.tar.gz", nodes_file.read_text())
        tree = load_taxonomy(archive)
        assert len(tree) == len(NODES)
        assert tree.is_ancestor(2, 562)

    def test_archive_without_nodes(self, tmp_path):
        archive = make_taxdump(tmp_path / "taxdump.tar.gz", "x", names=("names.dmp",))
        with pytest.raises(TaxonomyError, match="nodes.dmp not found"):
            list(read_taxonomy_lines(archive))

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            list(read_taxonomy_lines(tmp_path / "missing.dmp"))

    def test_empty_taxonomy(self, tmp_path):
        path = tmp_path / "nodes.dmp"
        path.write_text("not a taxonomy\n")
        with pytest.raises(TaxonomyError, match="No taxonomy nodes"):
            load_taxonomy(path)


class TestExtractNodes:
    """Extracting nodes.dmp from taxdump.tar.gz."""

    def test_extracts_only_nodes(self, tmp_path, nodes_file):
        archive = make_taxdump(tmp_path / "taxdump.tar.gz", nodes_file.read_text(),
                               names=("nodes.dmp", "names.dmp"))
        out_dir = tmp_path / "out"
        path = extract_nodes(archive, out_dir)
        assert path == out_dir / "nodes.dmp"
        assert path.read_text() == nodes_file.read_text()
        assert not (out_dir / "names.dmp").exists()

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "taxdump.tar.gz"
        archive.write_bytes(b"not an archive")
        with pytest.raises(InputError):
            extract_nodes(archive, tmp_path / "out")


class TestReadCatalogRows:
    """Tab-split catalog rows."""

    def test_rows(self, catalog_file):
        rows = list(read_catalog_rows(catalog_file))
        assert rows[0][0].startswith("#")
        assert rows[2][0] == "GCF_000005845.2"
        assert rows[2][5] == "562"
        assert len(rows[2]) == 22

    def test_strips_line_endings(self, tmp_path):
        path = tmp_path / "assembly_summary.txt"
        path.write_bytes(b"a\tb\tc\r\n")
        assert list(read_catalog_rows(path)) == [["a", "b", "c"]]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputError):
            list(read_catalog_rows(tmp_path / "missing.txt"))


class TestUndecodableBytes:
    """Bytes that are not valid UTF-8 do not abort reading."""

    def test_catalog_with_latin1_organism_name(self, tmp_path, tree):
        bad = catalog_row("BAD", 562)
        good = catalog_row("GOOD", 1224)
        path = tmp_path / "assembly_summary.txt"
        bad_line = "\t".join(bad).encode("utf-8").replace(b"Organism 562", b"Org\xe9nism")
        path.write_bytes(bad_line + b"\n" + "\t".join(good).encode("utf-8") + b"\n")

        records = list(filter_catalog(tree, read_catalog_rows(path), 2))
        assert [record.accession for record in records] == ["BAD", "GOOD"]
        assert records[0].organism_name == "Org\ufffdnism"

    def test_gzip_catalog(self, tmp_path):
        path = tmp_path / "assembly_summary.txt.gz"
        with gzip.open(path, "wb") as out:
            out.write(b"GCF_1\tOrg\xe9nism\n")
        assert list(read_catalog_rows(path)) == [["GCF_1", "Org\ufffdnism"]]

    def test_taxonomy_archive(self, tmp_path):
        archive = tmp_path / "taxdump.tar.gz"
        data = b"1\t|\t1\t|\tno rank\t|\n2\t|\t1\t|\tsuperkingdom\xff\t|\n"
        with tarfile.open(archive, "w:gz") as tar:
            info = tarfile.TarInfo("nodes.dmp")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
        tree = load_taxonomy(archive)
        assert tree.parent_of(2) == 1
