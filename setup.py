"""
mappergen - ts-sql-query table mapper generator
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="mappergen",
    version="0.1.0",
    author="mappergen contributors",
    author_email="",
    description="Generate ts-sql-query Table/View mappers from a tbls schema dump",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"mappergen": ["*.j2"]},
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.5.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mappergen=mappergen.cli:cli_main",
        ],
    },
    keywords="ts-sql-query, tbls, typescript, generator, code-generator, sql",
)
