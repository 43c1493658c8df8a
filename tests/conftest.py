"""Shared fixtures: catalog documents, descriptors and platforms."""

import copy
import json

import pytest
import yaml

from catalog.models import (
    CaskDescriptor,
    DevelopmentBranch,
    FormulaDescriptor,
    PrebuiltEntry,
    SourceArchive,
)
from resolution.platform import PlatformTag

FOO_SOURCE_URL = "https://example.com/foo-1.2.3.tar.gz"
FOO_LINUX_BOTTLE_URL = "https://ghcr.io/v2/core/foo/blobs/sha256:1111"
FOO_SONOMA_ARM_BOTTLE_URL = "https://ghcr.io/v2/core/foo/blobs/sha256:2222"

FOO_DOCUMENT = {
    "name": "foo",
    "versions": {"stable": "1.2.3"},
    "revision": 0,
    "urls": {
        "stable": {"url": FOO_SOURCE_URL, "checksum": "abcd"},
    },
    "bottle": {
        "stable": {
            "rebuild": 0,
            "root_url": "https://ghcr.io/v2/core",
            "files": {
                "x86_64_linux": {"url": FOO_LINUX_BOTTLE_URL, "sha256": "1111"},
                "arm64_sonoma": {"url": FOO_SONOMA_ARM_BOTTLE_URL, "sha256": "2222"},
            },
        },
    },
}

BAR_DOCUMENT = {
    "name": "bar",
    "versions": {"stable": "0.9"},
    "revision": 2,
    "urls": {
        "stable": {"url": "https://example.com/downloads/bar-0.9.tar.xz", "checksum": None},
        "head": {"url": "https://github.com/example/bar.git", "branch": "main", "using": None},
    },
    "requirements": [{"name": "macos"}],
}

BAZ_DOCUMENT = {
    "token": "baz",
    "version": "2.0",
    "url": "https://example.com/baz-2.0-intel.dmg",
    "sha256": "ffff",
    "variations": {
        "arm64_sonoma": {"url": "https://example.com/baz-2.0-arm.dmg"},
    },
}


@pytest.fixture
def foo_document():
    return copy.deepcopy(FOO_DOCUMENT)


@pytest.fixture
def bar_document():
    return copy.deepcopy(BAR_DOCUMENT)


@pytest.fixture
def baz_document():
    return copy.deepcopy(BAZ_DOCUMENT)


@pytest.fixture
def foo():
    """Formula with linux/x86_64 and sonoma/arm64 bottles, a source archive and no HEAD."""
    linux = PlatformTag("linux", "x86_64")
    sonoma_arm = PlatformTag("sonoma", "arm64")
    return FormulaDescriptor(
        name="foo",
        version="1.2.3",
        prebuilts={
            linux: PrebuiltEntry(tag=linux, url=FOO_LINUX_BOTTLE_URL, sha256="1111"),
            sonoma_arm: PrebuiltEntry(tag=sonoma_arm, url=FOO_SONOMA_ARM_BOTTLE_URL, sha256="2222"),
        },
        source=SourceArchive(url=FOO_SOURCE_URL, sha256="abcd"),
    )


@pytest.fixture
def bar():
    """macOS-only formula with a HEAD branch and no bottles."""
    return FormulaDescriptor(
        name="bar",
        version="0.9",
        revision=2,
        source=SourceArchive(url="https://example.com/downloads/bar-0.9.tar.xz"),
        head=DevelopmentBranch(url="https://github.com/example/bar.git", branch="main"),
        supported_os=frozenset({"macos"}),
    )


@pytest.fixture
def baz():
    return CaskDescriptor(name="baz", version="2.0",
                          source=SourceArchive(url="https://example.com/baz-2.0-intel.dmg"))


@pytest.fixture
def sonoma_arm():
    return PlatformTag("sonoma", "arm64")


@pytest.fixture
def linux_intel():
    return PlatformTag("linux", "x86_64")


@pytest.fixture
def catalog_dir(tmp_path):
    """A directory catalog mixing YAML and JSON files."""
    directory = tmp_path / "catalog"
    (directory / "formula").mkdir(parents=True)
    (directory / "cask").mkdir()
    with open(directory / "formula" / "foo.yml", "w", encoding="utf-8") as handle:
        yaml.safe_dump(FOO_DOCUMENT, handle)
    with open(directory / "formula" / "bar.json", "w", encoding="utf-8") as handle:
        json.dump(BAR_DOCUMENT, handle)
    with open(directory / "cask" / "baz.yaml", "w", encoding="utf-8") as handle:
        yaml.safe_dump(BAZ_DOCUMENT, handle)
    return directory
