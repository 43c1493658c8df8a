"""Tests for cache path derivation."""

import hashlib
from pathlib import Path

import pytest

from constants import PackageKinds
from resolution.locator import CacheLocator, bottle_filename, url_basename
from resolution.models import HeadCheckout, Prebuilt, Source, Unavailable
from resolution.platform import PlatformTag

ROOT = Path("/var/cache/brewcache")


def _digest(url):
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


@pytest.fixture
def locator():
    return CacheLocator(ROOT)


class TestPrebuilt:
    """Bottle cache names."""

    def test_bottle_path(self, locator):
        url = "https://ghcr.io/v2/core/foo/blobs/sha256:2222"
        ref = Prebuilt(package="foo", version="1.2.3", tag=PlatformTag("sonoma", "arm64"), location=url)
        assert locator.locate(ref) == ROOT / "downloads" / f"{_digest(url)}--foo--1.2.3.arm64_sonoma.bottle.tar.gz"

    def test_rebuild_is_in_file_name(self):
        assert bottle_filename("foo", "1.0_1", "x86_64_linux", 2) == "foo--1.0_1.x86_64_linux.bottle.2.tar.gz"

    def test_intel_macos_tag(self):
        assert bottle_filename("foo", "1.0", "ventura") == "foo--1.0.ventura.bottle.tar.gz"


class TestSource:
    """Source archive and cask download cache names."""

    def test_source_uses_url_basename(self, locator):
        url = "https://example.com/releases/foo-1.2.3.tar.gz?mirror=1"
        ref = Source(package="foo", version="1.2.3", location=url)
        assert locator.locate(ref) == ROOT / "downloads" / f"{_digest(url)}--foo-1.2.3.tar.gz"

    def test_percent_encoded_basename(self):
        assert url_basename("https://example.com/My%20App.dmg") == "My App.dmg"

    def test_basename_fallback(self, locator):
        url = "https://example.com/"
        ref = Source(package="foo", version="1.2.3", location=url)
        assert locator.locate(ref).name == f"{_digest(url)}--foo--1.2.3"

    def test_cask_download(self, locator):
        url = "https://example.com/baz-2.0-arm.dmg"
        ref = Source(package="baz", version="2.0", location=url, package_kind=PackageKinds.CASK)
        assert locator.locate(ref) == ROOT / "downloads" / f"{_digest(url)}--baz-2.0-arm.dmg"


class TestHead:
    """Development checkouts."""

    def test_git_checkout(self, locator):
        ref = HeadCheckout(package="bar", location="https://github.com/example/bar.git")
        assert locator.locate(ref) == ROOT / "bar--git"

    def test_other_scm(self, locator):
        ref = HeadCheckout(package="bar", location="https://hg.example.com/bar", scm="hg")
        assert locator.locate(ref) == ROOT / "bar--hg"


def test_unavailable_has_no_location(locator):
    with pytest.raises(ValueError):
        locator.locate(Unavailable("no development variant defined"))


def test_locate_is_pure(locator):
    ref_a = Prebuilt(package="foo", version="1.0", tag=PlatformTag("linux", "arm64"), location="https://e.com/b")
    ref_b = Prebuilt(package="foo", version="1.0", tag=PlatformTag("linux", "arm64"), location="https://e.com/b")
    assert locator.locate(ref_a) == locator.locate(ref_a) == locator.locate(ref_b)
    assert CacheLocator(ROOT).locate(ref_a) == locator.locate(ref_a)


def test_different_urls_never_collide(locator):
    one = Source(package="foo", version="1.0", location="https://a.example.com/foo-1.0.tgz")
    two = Source(package="foo", version="1.0", location="https://b.example.com/foo-1.0.tgz")
    assert locator.locate(one) != locator.locate(two)
