from setuptools import setup, find_packages


setup(
    name="dirsnap",
    version="1.0.1",
    packages=find_packages(exclude=["dirsnap.tests"]),
    description="Dated, compressed snapshots of a directory tree, with listing of previous snapshots.",
    author="vercingetorx",
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": [
            "dirsnap=dirsnap.cli:main",
        ]
    },
)
