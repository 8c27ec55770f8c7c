import os

import pytest

from broken_md_links.checker import cache as cache_module
from broken_md_links.checker.cache import DocumentCache
from broken_md_links.core.exceptions import ReadError


def test_document_is_parsed_once(tmp_path, monkeypatch):  # type: ignore
    doc = tmp_path / "b.md"
    doc.write_text("# Intro\n\n## Usage\n", encoding="utf-8")

    calls: list[str] = []
    original = cache_module.extract_headings

    def counting_extract(text: str):  # type: ignore[no-untyped-def]
        calls.append(text)
        return original(text)

    monkeypatch.setattr(cache_module, "extract_headings", counting_extract)

    cache = DocumentCache()
    first = cache.get_slugs(doc)
    second = cache.get_slugs(doc)

    assert first is second
    assert first.slugs == frozenset({"intro", "usage"})
    assert "usage" in first
    assert len(calls) == 1
    assert (cache.misses, cache.hits) == (1, 1)


def test_paths_are_canonicalized(tmp_path):  # type: ignore
    (tmp_path / "sub").mkdir()
    doc = tmp_path / "b.md"
    doc.write_text("# Title\n", encoding="utf-8")

    cache = DocumentCache()
    cache.get_slugs(tmp_path / "sub" / ".." / "b.md")
    cache.get_slugs(str(doc))

    assert len(cache) == 1
    assert list(cache) == [doc.resolve()]
    assert tmp_path / "." / "b.md" in cache


def test_symlinks_share_one_entry(tmp_path):  # type: ignore
    doc = tmp_path / "real.md"
    doc.write_text("# Title\n", encoding="utf-8")
    link = tmp_path / "alias.md"
    try:
        os.symlink(doc, link)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not supported here")

    cache = DocumentCache()
    assert cache.get_slugs(link) is cache.get_slugs(doc)
    assert len(cache) == 1


def test_unreadable_documents_raise_read_error(tmp_path):  # type: ignore
    cache = DocumentCache()
    with pytest.raises(ReadError):
        cache.get_slugs(tmp_path / "missing.md")

    binary = tmp_path / "binary.md"
    binary.write_bytes(b"\xff\xfe# not utf-8\x80")
    with pytest.raises(ReadError) as excinfo:
        cache.get_slugs(binary)
    assert excinfo.value.path == binary.resolve()
    assert len(cache) == 0


def test_seed_does_not_replace_existing_entries(tmp_path):  # type: ignore
    doc = tmp_path / "a.md"
    doc.write_text("# On disk\n", encoding="utf-8")

    cache = DocumentCache()
    seeded = cache.seed(doc, "# In memory\n")
    assert seeded.slugs == frozenset({"in-memory"})
    assert cache.seed(doc, "# Other\n") is seeded
    assert cache.get_slugs(doc) is seeded
    assert [heading.text for heading in seeded.headings] == ["In memory"]
