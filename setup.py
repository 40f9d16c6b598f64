# setup.py
from setuptools import setup, find_packages

setup(
    name="taxfetch",
    version="1.0.0",
    description="Download NCBI genome assemblies for all taxa below a taxon ID",
    author="taxfetch Contributors",
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "taxfetch=taxfetch.cli:main",
        ],
    },
    install_requires=[
        "pandas>=1.1",
        "requests>=2.20",
        "tqdm>=4.0",
    ],
    extras_require={
        "test": ["pytest>=6.0"],
    },
    python_requires=">=3.7",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
    ],
)
