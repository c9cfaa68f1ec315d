import pytest

from xrefnum import NumberingConfig, SoupTree, SymbolTable, number_document
from xrefnum.doc.anchors import (
    Anchor,
    LabelInfo,
    RefFormat,
    XrefMarker,
    format_ref,
    implicit_id,
)
from xrefnum.render.resolver import (
    UnresolvedReason,
    lookup_marker,
    resolve_references,
)

DOC = """<html><body><main><article>
<section class="sec" id="intro"><h2 class="section-title">Intro</h2>
<definition id="def:kernel" data-title="Kernel"></definition>
<theorem data-title="Main result"></theorem>
<equation></equation>
<figure><figcaption>Plot</figcaption></figure>
<p id="refs">{refs}</p>
</section>
</article></main></body></html>"""


def resolve(refs: str):
    tree = SoupTree.from_html(DOC.format(refs=refs))
    report = number_document(tree)
    return tree.soup, report


def links(soup):
    return soup.find_all("a", class_="xref")


def test_explicit_target_renders_the_label():
    soup, report = resolve('<xref to="theorem:s1-2"></xref>')
    (a,) = links(soup)
    assert a["href"] == "#theorem:s1-2"
    assert a["data-type"] == "theorem"
    assert a["aria-label"] == "Theorem 1.2"
    assert a.get_text() == "Theorem 1.2"
    assert soup.find("xref") is None
    assert report.unresolved == []


def test_leading_hash_is_stripped():
    soup, _ = resolve('<xref to="#intro"></xref>')
    (a,) = links(soup)
    assert a["href"] == "#intro"
    assert a.get_text() == "Section 1"
    assert a["data-type"] == "section"


def test_target_attribute_alias():
    soup, _ = resolve('<xref target="fig:s1-1"></xref>')
    (a,) = links(soup)
    assert a.get_text() == "Figure 1.1"


@pytest.mark.parametrize(
    "fmt,expected",
    [
        ("full", "Theorem 1.2"),
        ("bare", "1.2"),
        ("title", "Main result"),
        ("paren", "Theorem 1.2"),
        ("auto", "Theorem 1.2"),
        ("nonsense", "Theorem 1.2"),
        # Format names are case-sensitive
        ("BARE", "Theorem 1.2"),
    ],
)
def test_formats_for_theorems(fmt, expected):
    soup, _ = resolve(f'<xref to="theorem:s1-2" format="{fmt}"></xref>')
    (a,) = links(soup)
    assert a.get_text() == expected
    # The accessible label is always the full label
    assert a["aria-label"] == "Theorem 1.2"


def test_equations_default_to_parenthesized():
    soup, _ = resolve(
        '<xref to="eq:s1-1"></xref>'
        '<xref to="eq:s1-1" format="paren"></xref>'
        '<xref to="eq:s1-1" format="bare"></xref>'
    )
    assert [a.get_text() for a in links(soup)] == ["(1.1)", "(1.1)", "1.1"]


def test_title_format_without_title_is_empty():
    soup, _ = resolve('<xref to="eq:s1-1" format="title"></xref>')
    (a,) = links(soup)
    assert a.get_text() == ""
    assert a["href"] == "#eq:s1-1"


def test_literal_text_overrides_display_text():
    soup, _ = resolve('<xref to="theorem:s1-2" format="bare">the main theorem</xref>')
    (a,) = links(soup)
    assert a.get_text() == "the main theorem"
    assert a["href"] == "#theorem:s1-2"
    assert a["data-type"] == "theorem"
    assert a["aria-label"] == "Theorem 1.2"


def test_implicit_reference_by_text():
    soup, _ = resolve("<xref>Kernel</xref>")
    (a,) = links(soup)
    assert a["href"] == "#def:kernel"
    assert a.get_text() == "Kernel"
    assert a["data-type"] == "definition"
    assert a["aria-label"] == "Definition 1.1"


def test_implicit_reference_falls_back_to_titles():
    # Nobody wrote id="def:main-result", but the theorem is titled "Main result"
    soup, _ = resolve("<xref>Main Result</xref>")
    (a,) = links(soup)
    assert a["href"] == "#theorem:s1-2"
    assert a.get_text() == "Main Result"


def test_dangling_reference_is_left_alone():
    soup, report = resolve('<xref to="eq:foo"></xref>')
    assert links(soup) == []
    marker = soup.find("xref")
    assert marker is not None
    assert marker["to"] == "eq:foo"
    (u,) = report.unresolved
    assert u.reason is UnresolvedReason.Dangling
    assert "eq:foo" in u.describe()
    assert report.symbols.lookup("eq:foo") is None


def test_dangling_reference_leaves_the_rest_of_the_tree_unchanged():
    with_ref, _ = resolve('<xref to="eq:foo"></xref>')
    without_ref, _ = resolve("")
    with_ref.find("xref").decompose()
    assert str(with_ref) == str(without_ref)


def test_marker_without_target_or_text_is_left_alone():
    soup, report = resolve("<xref></xref><xref>   </xref>")
    assert links(soup) == []
    assert len(soup.find_all("xref")) == 2
    assert [u.reason for u in report.unresolved] == [
        UnresolvedReason.NoTarget,
        UnresolvedReason.NoTarget,
    ]


def test_forward_references_resolve():
    html = """<main><article>
<section class="sec"><h2 class="section-title">A</h2><p>See <xref to="lemma:s2-1"></xref>.</p></section>
<section class="sec"><h2 class="section-title">B</h2><lemma></lemma></section>
</article></main>"""
    tree = SoupTree.from_html(html)
    number_document(tree)
    (a,) = links(tree.soup)
    assert a.get_text() == "Lemma 2.1"


def test_references_inside_code_are_resolved():
    soup, report = resolve('see <code><xref to="theorem:s1-2"></xref></code>')
    (a,) = links(soup)
    assert a.parent.name == "code"
    assert a.get_text() == "Theorem 1.2"
    assert report.unresolved == []


def test_dangling_references_inside_code_are_reported():
    soup, report = resolve('<pre><code><xref to="eq:nowhere"></xref></code></pre>')
    assert links(soup) == []
    (u,) = report.unresolved
    assert u.reason is UnresolvedReason.Dangling


def test_marker_skip_kinds_are_configurable():
    tree = SoupTree.from_html(DOC.format(refs='<code><xref to="intro"></xref></code>'))
    report = number_document(tree, NumberingConfig(xref_skip_kinds=("code",)))
    assert links(tree.soup) == []
    assert report.unresolved == []


def test_empty_target_falls_through_to_the_alias():
    soup, report = resolve('<xref to="" target="theorem:s1-2"></xref>')
    (a,) = links(soup)
    assert a["href"] == "#theorem:s1-2"
    assert a.get_text() == "Theorem 1.2"
    assert report.unresolved == []


def test_resolving_needs_a_frozen_table():
    tree = SoupTree.from_html("<xref to='x'></xref>")
    with pytest.raises(RuntimeError, match="frozen"):
        resolve_references(tree, SymbolTable())


def test_format_ref():
    lemma = LabelInfo(kind="lemma", label="Lemma 2.3", short="2.3", title="Kernel")
    assert format_ref(lemma, RefFormat.Full) == "Lemma 2.3"
    assert format_ref(lemma, RefFormat.Bare) == "2.3"
    assert format_ref(lemma, RefFormat.Title) == "Kernel"
    assert format_ref(lemma, RefFormat.Auto) == "Lemma 2.3"
    eq = LabelInfo(kind="equation", label="(2.3)", short="2.3")
    assert format_ref(eq, RefFormat.Full) == "(2.3)"
    assert format_ref(eq, RefFormat.Paren) == "(2.3)"
    assert RefFormat.parse(None) is RefFormat.Auto
    assert RefFormat.parse("full") is RefFormat.Full
    assert RefFormat.parse(" FULL ") is RefFormat.Auto
    assert RefFormat.parse("sideways") is RefFormat.Auto


def test_implicit_ids():
    assert implicit_id("  Inner Product Space ") == "def:inner-product-space"
    marker = XrefMarker(target=None, fmt=RefFormat.Auto, literal_text=" Kernel ")
    assert marker.lookup_id() == "def:kernel"
    assert marker.is_implicit()
    explicit = XrefMarker(target="x", fmt=RefFormat.Auto, literal_text="Kernel")
    assert explicit.lookup_id() == "x"
    assert not explicit.is_implicit()


def test_lookup_marker_is_exact_match():
    symbols = SymbolTable()
    symbols.register(
        Anchor("theorem", "thm:a"), LabelInfo(kind="theorem", label="Theorem 1.1", short="1.1")
    )
    symbols.freeze()
    marker = XrefMarker(target="thm:A", fmt=RefFormat.Auto, literal_text="")
    assert lookup_marker(symbols, marker) is None
    marker = XrefMarker(target="thm:a", fmt=RefFormat.Auto, literal_text="")
    assert lookup_marker(symbols, marker) == (
        "thm:a",
        LabelInfo(kind="theorem", label="Theorem 1.1", short="1.1"),
    )
