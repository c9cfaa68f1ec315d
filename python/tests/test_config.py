import json

import pytest

from xrefnum import ConfigError, MathJaxConfig, NumberingConfig, load_config
from xrefnum.config import describe_config
from xrefnum.doc.symbols import TitleCollisions


def write_config(tmp_path, data) -> str:
    path = tmp_path / "xrefnum.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_defaults():
    config = NumberingConfig()
    assert config.section_class == "sec"
    assert config.appendix_class == "appendix"
    assert "definition" in config.numbered_theorem_kinds
    assert "definition" not in config.lettered_theorem_kinds
    assert config.all_item_kinds()[-3:] == ("equation", "figure", "table")
    assert len(set(config.all_item_kinds())) == len(config.all_item_kinds())


def test_load_config(tmp_path):
    config = load_config(
        write_config(
            tmp_path,
            {
                "numbering": {
                    "section_class": "chapter",
                    "target_attrs": ["ref"],
                    "title_collisions": "error",
                },
                "mathjax": {"tags": "ams", "inline_math": [["\\(", "\\)"]]},
            },
        )
    )
    assert config.numbering.section_class == "chapter"
    assert config.numbering.target_attrs == ("ref",)
    assert config.numbering.title_collisions is TitleCollisions.Error
    assert config.numbering.appendix_class == "appendix"
    assert config.mathjax.tags == "ams"
    assert config.mathjax.inline_math == (("\\(", "\\)"),)


def test_unknown_keys_warn(tmp_path, capsys):
    config = load_config(
        write_config(tmp_path, {"numbering": {"bogus": 1}, "extra": {}})
    )
    out = capsys.readouterr().out
    assert "Warning: ignoring unknown config field 'numbering.bogus'" in out
    assert "Warning: ignoring unknown config section 'extra'" in out
    assert config.numbering == NumberingConfig()


@pytest.mark.parametrize(
    "data",
    [
        {"numbering": {"skip_kinds": "pre"}},
        {"numbering": {"section_class": 3}},
        {"numbering": {"title_collisions": "sometimes"}},
        {"numbering": []},
        [],
    ],
)
def test_bad_values_raise(tmp_path, data):
    with pytest.raises(ConfigError):
        load_config(write_config(tmp_path, data))


def test_invalid_json_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="valid JSON"):
        load_config(str(path))


def test_mathjax_script():
    cfg = MathJaxConfig()
    d = cfg.to_dict()
    assert d["tex"]["tags"] == "none"
    assert d["tex"]["packages"] == {"[+]": ["ams", "physics", "html"]}
    assert d["tex"]["inlineMath"] == [["$", "$"]]
    assert "code" in d["options"]["skipHtmlTags"]
    script = cfg.to_script()
    assert script.startswith("window.MathJax = {")
    assert script.endswith("};")
    assert json.loads(script[len("window.MathJax = ") : -1]) == d


def test_describe_config():
    from xrefnum import XrefConfig

    lines = describe_config(XrefConfig())
    assert "section_class: sec" in lines
    assert "title_collisions: last-wins" in lines
