"""Configuration for numbering a document.

NumberingConfig controls which nodes are scopes, items and references.
MathJaxConfig is passed straight through to the math typesetter - the numbering engine never reads it.

Both can be loaded from a JSON file of the form `{"numbering": {...}, "mathjax": {...}}`."""

import dataclasses
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar, Union

from xrefnum.doc.anchors import THEOREM_LIKE_KINDS
from xrefnum.doc.symbols import TitleCollisions
from xrefnum.errors import ConfigError

T = TypeVar("T")

MATHJAX_SRC = "https://cdn.jsdelivr.net/npm/mathjax@4/tex-chtml.js"

# Tags whose contents are never numbered or typeset
DEFAULT_SKIP_KINDS = ("script", "noscript", "style", "textarea", "pre", "code")


@dataclass(frozen=True)
class NumberingConfig:
    # Scopes are <section class="sec"> / <section class="appendix"> directly under these ancestors (outermost first)
    scope_parent_path: Tuple[str, ...] = ("main", "article")
    scope_kind: str = "section"
    section_class: str = "sec"
    appendix_class: str = "appendix"
    subsection_class: str = "subsec"

    heading_kind: str = "h2"
    heading_class: str = "section-title"

    numbered_theorem_kinds: Tuple[str, ...] = THEOREM_LIKE_KINDS
    # Appendices only count theorem/lemma/corollary/proposition, definition and remark are left unnumbered there.
    lettered_theorem_kinds: Tuple[str, ...] = (
        "theorem",
        "lemma",
        "corollary",
        "proposition",
    )

    xref_kind: str = "xref"
    target_attrs: Tuple[str, ...] = ("to", "target")
    format_attr: str = "format"
    title_attr: str = "data-title"

    skip_kinds: Tuple[str, ...] = DEFAULT_SKIP_KINDS
    # Markers are resolved wherever they appear, code samples included, unless listed here
    xref_skip_kinds: Tuple[str, ...] = ()
    title_collisions: TitleCollisions = TitleCollisions.LastWins

    toc_class: str = "toc-tree"

    def all_item_kinds(self) -> Tuple[str, ...]:
        kinds = list(self.numbered_theorem_kinds)
        kinds.extend(k for k in self.lettered_theorem_kinds if k not in kinds)
        kinds.extend(["equation", "figure", "table"])
        return tuple(kinds)


@dataclass(frozen=True)
class MathJaxConfig:
    """Pass-through options for MathJax. Mirrors the `window.MathJax` object."""

    load: Tuple[str, ...] = ("[tex]/ams", "[tex]/physics", "[tex]/html")
    packages: Tuple[str, ...] = ("ams", "physics", "html")
    inline_math: Tuple[Tuple[str, str], ...] = (("$", "$"),)
    display_math: Tuple[Tuple[str, str], ...] = (("$$", "$$"),)
    tags: str = "none"
    skip_html_tags: Tuple[str, ...] = DEFAULT_SKIP_KINDS
    scale: float = 1
    font: str = "mathjax-newcm"
    src: str = MATHJAX_SRC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loader": {"load": list(self.load)},
            "tex": {
                "inlineMath": [list(d) for d in self.inline_math],
                "displayMath": [list(d) for d in self.display_math],
                "packages": {"[+]": list(self.packages)},
                "tags": self.tags,
            },
            "options": {
                "skipHtmlTags": list(self.skip_html_tags),
                "renderActions": {"addMenu": [0, "", ""]},
            },
            "chtml": {"scale": self.scale},
            "output": {"font": self.font},
        }

    def to_script(self) -> str:
        return f"window.MathJax = {json.dumps(self.to_dict(), indent=2)};"


@dataclass(frozen=True)
class XrefConfig:
    numbering: NumberingConfig = field(default_factory=NumberingConfig)
    mathjax: MathJaxConfig = field(default_factory=MathJaxConfig)


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a JSON value into the type of the field's default"""
    if isinstance(default, TitleCollisions):
        try:
            return TitleCollisions(value)
        except ValueError:
            raise ConfigError(
                f"{name} must be one of {[c.value for c in TitleCollisions]}, got {value!r}"
            )
    if isinstance(default, tuple):
        if not isinstance(value, list):
            raise ConfigError(f"{name} must be a list, got {value!r}")
        return tuple(
            tuple(v) if isinstance(v, list) else v for v in value
        )
    if isinstance(default, bool) or not isinstance(default, (int, float, str)):
        return value
    if isinstance(default, (int, float)) and isinstance(value, (int, float)):
        return value
    if not isinstance(value, type(default)):
        raise ConfigError(
            f"{name} must be a {type(default).__name__}, got {value!r}"
        )
    return value


def config_from_dict(cls: Type[T], section: str, data: Mapping[str, Any]) -> T:
    """Build one of the frozen config dataclasses from a JSON-ish mapping.

    Unknown keys are ignored with a warning, badly-typed values raise ConfigError."""
    if not isinstance(data, Mapping):
        raise ConfigError(f"'{section}' must be a JSON object, got {data!r}")
    defaults = cls()
    known = {f.name: f for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    kwargs = {}
    for key, value in data.items():
        if key not in known:
            print(f"Warning: ignoring unknown config field '{section}.{key}'")
            continue
        kwargs[key] = _coerce(f"{section}.{key}", value, getattr(defaults, key))
    return cls(**kwargs)


def load_config(path: Union[str, "os.PathLike[str]"]) -> XrefConfig:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config file {path} isn't valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    sections: Dict[str, Any] = {}
    for key, value in data.items():
        if key not in ("numbering", "mathjax"):
            print(f"Warning: ignoring unknown config section '{key}' in {path}")
            continue
        sections[key] = value

    return XrefConfig(
        numbering=config_from_dict(
            NumberingConfig, "numbering", sections.get("numbering", {})
        ),
        mathjax=config_from_dict(MathJaxConfig, "mathjax", sections.get("mathjax", {})),
    )


def describe_config(config: XrefConfig) -> List[str]:
    """One line per numbering setting, for the CLI's --show-config"""
    lines = []
    for f in dataclasses.fields(config.numbering):
        value = getattr(config.numbering, f.name)
        if isinstance(value, TitleCollisions):
            value = value.value
        lines.append(f"{f.name}: {value}")
    return lines
