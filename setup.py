from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="pdfgrid",
    version="0.1.0",
    description="Grid and metadata model for multi-dimensional parton distribution function sets",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    package_data={"pdfgrid": ["schemas/*.json"]},
    install_requires=[
        "numpy>=1.24",
        "jsonschema>=4.17",
    ],
    extras_require={
        "dataframe": ["pandas>=1.5"],
        "plot": ["matplotlib>=3.6"],
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["pdfgrid=pdfgrid.cli:main"],
    },
    python_requires=">=3.10",
    classifiers=[
        "Topic :: Scientific/Engineering :: Physics",
        "Programming Language :: Python :: 3",
    ],
)
