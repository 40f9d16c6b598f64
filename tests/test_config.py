"""Tests for run configuration."""

import argparse
import dataclasses
from pathlib import Path

import pytest

from taxfetch.cli import create_parser
from taxfetch.models.config import FetchConfig
from taxfetch.models.errors import ConfigError


def parse(*argv):
    return FetchConfig.from_args(create_parser().parse_args(list(argv)))


class TestFetchConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TAXFETCH_TAXDUMP", raising=False)
        config = parse("203682")
        assert config.taxid == 203682
        assert config.file_type == "gbff"
        assert config.suffix == "_genomic.gbff.gz"
        assert not config.include_all_levels
        assert config.include_fungi
        assert config.outdir == Path(".")
        assert config.taxdump is None

    def test_options(self, tmp_path):
        config = parse("562", "-t", "faa", "-a", "--no-fungi", "--threads", "8",
                       "--outdir", str(tmp_path), "--manifest", "m.tsv", "--dry-run")
        assert config.suffix == "_protein.faa.gz"
        assert config.include_all_levels
        assert not config.include_fungi
        assert config.threads == 8
        assert config.outdir == tmp_path
        assert config.manifest == Path("m.tsv")
        assert config.dry_run

    def test_taxdump_from_environment(self, monkeypatch):
        monkeypatch.setenv("TAXFETCH_TAXDUMP", "/data/taxdump.tar.gz")
        assert parse("562").taxdump == Path("/data/taxdump.tar.gz")
        assert parse("562", "--taxdump", "nodes.dmp").taxdump == Path("nodes.dmp")

    def test_invalid_file_type(self):
        with pytest.raises(ConfigError, match="File type must be one of .gbff, fna, faa, gff., got 'gbk'"):
            FetchConfig(taxid=562, file_type="gbk")

    def test_file_type_checked_through_resolve_suffix(self, monkeypatch):
        calls = []

        def fake_resolve_suffix(file_type):
            calls.append(file_type)
            return "_x.gz"

        monkeypatch.setattr("taxfetch.models.config.resolve_suffix", fake_resolve_suffix)
        config = FetchConfig(taxid=562, file_type="fna")
        assert config.suffix == "_x.gz"
        assert calls == ["fna", "fna"]

    def test_invalid_file_type_on_command_line(self):
        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args(["562", "-t", "gbk"])
        assert excinfo.value.code != 0

    @pytest.mark.parametrize("taxid", [1, 131567])
    def test_rejects_coarse_taxa(self, taxid):
        with pytest.raises(ConfigError, match="single branch"):
            FetchConfig(taxid=taxid)

    def test_rejects_non_positive_taxid(self):
        with pytest.raises(ConfigError):
            FetchConfig(taxid=0)

    def test_missing_taxid(self):
        with pytest.raises(ConfigError, match="Usage"):
            FetchConfig.from_args(argparse.Namespace())

    def test_rejects_bad_threads(self):
        with pytest.raises(ConfigError):
            FetchConfig(taxid=562, threads=0)

    def test_rejects_bad_source(self):
        with pytest.raises(ConfigError):
            FetchConfig(taxid=562, source="ensembl")

    def test_frozen(self):
        config = FetchConfig(taxid=562)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.taxid = 2
