import logging
import textwrap

from broken_md_links.core.enums import LinkStyle
from broken_md_links.markdown.links import (
    extract_links,
    is_external_target,
    normalize_label,
    split_target,
)


def _doc(content: str) -> str:
    return textwrap.dedent(content).lstrip("\n")


def targets(content: str, **kwargs) -> list[str]:  # type: ignore[no-untyped-def]
    return [link.raw_target for link in extract_links(_doc(content), **kwargs)]


def test_inline_links_are_split_into_path_and_fragment() -> None:
    links = extract_links(
        _doc(
            """
            See [the guide](docs/guide.md#install "Install it") for details.

            Jump to [usage](#usage) or [the file](other.md).
            """
        )
    )

    assert [(link.path, link.fragment, link.source_line) for link in links] == [
        ("docs/guide.md", "install", 1),
        (None, "usage", 3),
        ("other.md", None, 3),
    ]
    assert links[0].label == "the guide"
    assert all(link.style is LinkStyle.INLINE for link in links)


def test_reference_links_resolve_definitions_anywhere() -> None:
    links = extract_links(
        _doc(
            """
            Read [the guide][Guide Ref], the [FAQ][] and the [changelog].

            [guide ref]: docs/guide.md#setup "Setup"
            [faq]: <docs/f a q.md>
            [changelog]: CHANGELOG.md
            """
        )
    )

    assert [(link.raw_target, link.style) for link in links] == [
        ("docs/guide.md#setup", LinkStyle.REFERENCE),
        ("docs/f a q.md", LinkStyle.COLLAPSED),
        ("CHANGELOG.md", LinkStyle.SHORTCUT),
    ]
    assert {link.source_line for link in links} == {1}


def test_first_definition_wins_and_undefined_references_are_text() -> None:
    assert targets(
        """
        [a][x] [b][missing] [plain brackets]

        [x]: first.md
        [X]: second.md
        """
    ) == ["first.md"]


def test_footnotes_are_not_links() -> None:
    assert targets(
        """
        A claim[^1].

        [^1]: Some supporting text.
        """
    ) == []


def test_images_are_opt_in() -> None:
    content = """
    ![diagram](img/diagram.png)
    [![build](badge.svg)](https://ci.example.com)
    """
    assert targets(content) == ["https://ci.example.com"]
    assert targets(content, include_images=True) == [
        "img/diagram.png",
        "https://ci.example.com",
        "badge.svg",
    ]
    image = extract_links(_doc(content), include_images=True)[0]
    assert image.is_image


def test_code_autolinks_and_html_are_skipped() -> None:
    assert targets(
        """
        Inline `[code](nope.md)` span and <https://example.com> autolink.
        <a href="x.md">[html](inside.md)</a>

        ```
        [fenced](nope.md)
        ```

            [indented](nope.md)
        """
    ) == ["inside.md"]


def test_destination_syntax_variants() -> None:
    assert targets(
        """
        [parens](docs/func(1).md)
        [angle](<my file.md#Some Heading>)
        [single title](a.md 'title')
        [paren title](b.md (title))
        [spaced]( c.md )
        [empty]()
        [unclosed](d.md
        [bad title](e.md "oops)
        """
    ) == [
        "docs/func(1).md",
        "my file.md#Some Heading",
        "a.md",
        "b.md",
        "c.md",
    ]


def test_nested_brackets_in_label() -> None:
    links = extract_links("[a [nested] label](target.md)\n")
    assert [(link.label, link.raw_target) for link in links] == [
        ("a [nested] label", "target.md")
    ]


def test_label_spanning_lines_reports_opening_line() -> None:
    links = extract_links("intro\n[multi\nline](x.md)\n")
    assert [link.source_line for link in links] == [2]


def test_external_targets_are_tagged() -> None:
    links = extract_links(
        "[a](https://example.com/x.md#y) [b](mailto:me@example.com) "
        "[c](//cdn.example.com/lib.js) [d](local.md)\n"
    )
    assert [link.is_external for link in links] == [True, True, True, False]


def test_split_target() -> None:
    assert split_target("a.md#frag") == ("a.md", "frag")
    assert split_target("#only") == (None, "only")
    assert split_target("a.md") == ("a.md", None)
    assert split_target(r"weird\#name.md#sec") == ("weird#name.md", "sec")
    assert split_target("my%20file.md#caf%C3%A9") == ("my file.md", "café")
    assert split_target("page.md?plain=1#L3") == ("page.md", "L3")
    assert split_target("a.md#x#y") == ("a.md", "x#y")


def test_helpers() -> None:
    assert normalize_label("  Foo\n  Bar ") == "foo bar"
    assert is_external_target("HTTPS://example.com")
    assert not is_external_target("C:/docs/readme.md")
    assert not is_external_target("../readme.md")


def test_undefined_references_are_warned_about(caplog) -> None:  # type: ignore[no-untyped-def]
    caplog.set_level(logging.WARNING, logger="broken_md_links")

    links = extract_links(
        _doc(
            """
            - [ ] open task
            - [x] done task

            See [text][nope] and [Other Page][].
            Also [lonely] and [^note].

            [^note]: A footnote.
            """
        )
    )

    assert links == []
    assert caplog.messages == [
        "Missing target for link 'nope' at line 4",
        "Missing target for link 'other page' at line 4",
        "Missing target for link 'lonely' at line 5",
    ]
