"""taxfetch: download NCBI genomes for a taxonomy sub-tree."""

__version__ = "1.0.0"
