#!/usr/bin/env python
import os
import os.path
import subprocess

from setuptools import find_namespace_packages, setup

from src.strato.cli.constants import DESC

HERE = os.path.abspath(os.path.dirname(__file__))


# gets the version from the latest tag via git describe
# so we don't have to do anything to manage version number
# aside from tagging releases
def git_version(gitdir, default="0.0.0"):
    try:
        desc = subprocess.run(
            [
                "git",
                "--git-dir",
                gitdir,
                "describe",
                "--long",
                "--tags",
                "--dirty",
            ],
            capture_output=True,
        )
    except Exception:
        return default

    if desc.returncode != 0:
        return default

    # example output: v0.5.1-8-gb38722d-dirty
    parts = desc.stdout.decode().strip().lstrip("v").split("-", maxsplit=2)
    if int(parts[1]) > 0 or "dirty" in parts[2]:
        return f'{parts[0]}+{parts[1]}.{parts[2].replace("-",".")}'
    else:
        return parts[0]


# in the case of a tagged release, we
# are passed a version in an env var
VERSION = os.environ.get(
    "STRATO_VERSION",
    git_version(os.path.join(HERE, ".git")),
)


def read_requirements(filename):
    with open(os.path.join(HERE, filename), encoding="utf-8") as f:
        reqs = f.read().split("\n")
    return [x.strip() for x in reqs if x.strip() and not x.startswith("#")]


with open(os.path.join(HERE, "README.md"), encoding="utf-8") as f:
    readme = f.read()


setup(
    name="strato-cli",
    python_requires=">=3.11",
    packages=find_namespace_packages("src"),
    package_dir={"": "src"},
    version=VERSION,
    description=DESC,
    long_description=readme,
    long_description_content_type="text/markdown",
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "test": read_requirements("requirements-dev.txt"),
    },
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    license="Apache-2.0",
    include_package_data=True,
    entry_points="""
        [console_scripts]
        strato=strato.cli.__main__:main
    """,
)
