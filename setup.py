from setuptools import setup, find_packages

with open("requirements.txt") as f:
    required = f.read().splitlines()

setup(
    name="showfiles",
    version="0.1.0",
    packages=find_packages(include=["showfiles", "showfiles.*"]),
    install_requires=required,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["showfiles = showfiles.cli:main"]},
    description="Print the contents of selected files under a directory, with an optional pruned tree",
)
