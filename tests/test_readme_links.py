from __future__ import annotations

from pathlib import Path

from broken_md_links import check_file, extract_links

REPO_ROOT = Path(__file__).resolve().parents[1]
README_PATH = REPO_ROOT / "README.md"


def test_readme_links_exist() -> None:
    errors = check_file(README_PATH)

    assert not errors, f"README links are broken: {[e.message for e in errors]}"


def test_readme_has_internal_links() -> None:
    links = extract_links(README_PATH.read_text(encoding="utf-8"))

    assert any(link.path is None and link.fragment for link in links)
    assert any(link.path == "DESIGN.md" for link in links)
