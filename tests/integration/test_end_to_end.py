"""End-to-end tests: raw JSON in, HTML out, through the services and the CLI."""

import copy

import pytest

lxml = pytest.importorskip("lxml")

from contract_renderer import RenderService, parse_document
from contract_renderer import cli

AGREEMENT_WITH_CLAUSES = [
    {"children": [
        {"type": "h1", "children": [{"text": "Service Agreement"}]},
        {"type": "p", "children": [
            {"type": "clause", "children": [
                {"text": "First clause for "},
                {"type": "mention", "id": "m1", "color": "rgb(20, 170, 245)", "title": "Client",
                 "children": [{"text": "Initech"}]},
            ]},
        ]},
        {"type": "p", "children": [
            {"type": "clause", "children": [
                {"text": "Second clause"},
                {"type": "clause", "children": [
                    {"text": "Nested, again for "},
                    {"type": "mention", "id": "m1", "color": "rgb(20, 170, 245)", "title": "Client",
                     "children": [{"text": "Initech"}]},
                ]},
            ]},
        ]},
    ]},
]


@pytest.fixture
def agreement_data():
    return copy.deepcopy(AGREEMENT_WITH_CLAUSES)


def _labels(element):
    return element.xpath('//div[@class="clause-number"]/text()')


def _mention_styles(element, mention_id):
    return [el.get("style") for el in element.xpath(f'//span[@data-mention-id="{mention_id}"]')]


def test_clause_labels(agreement_data):
    service = RenderService()
    service.load(parse_document(agreement_data))
    result = service.render()
    assert result.success
    assert _labels(result.element) == ["1.", "2.", "(a)"]
    nested = result.element.xpath('//div[@class="clause clause-nested"]/div[@class="clause-number"]/text()')
    assert nested == ["(a)"]


def test_color_change_shows_at_every_occurrence(agreement_data):
    document = parse_document(agreement_data)
    service = RenderService()
    service.load(document)

    before = service.render()
    service.mentions.update_mention_color("m1", "#00ff00")
    after = service.render()

    for style in _mention_styles(before.element, "m1"):
        assert style.startswith("background-color: rgb(20, 170, 245);")
    styles = _mention_styles(after.element, "m1")
    assert len(styles) == 2
    assert all(style.startswith("background-color: rgb(0, 255, 0);") for style in styles)
    # numbering unaffected by the edit
    assert _labels(after.element) == ["1.", "2.", "(a)"]


def test_value_change_does_not_mutate_input(agreement_data):
    pristine = copy.deepcopy(agreement_data)
    document = parse_document(agreement_data)
    service = RenderService()
    service.load(document)

    service.mentions.update_mention_value("m1", "Globex")
    html = service.render().content

    assert html.count(">Globex</span>") == 2
    assert "Initech" not in html
    assert agreement_data == pristine
    mention_nodes = [n for n in document.iter_nodes() if n.id == "m1"]
    assert all(n.first_child_text() == "Initech" for n in mention_nodes)


class TestCli:

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(cli, "setup_logging", lambda: None)

    def test_render_to_stdout(self, write_json, agreement_data, capsys):
        assert cli.main([str(write_json(agreement_data))]) == 0
        out = capsys.readouterr().out
        assert out.startswith('<div class="document-container">')
        assert out.count('class="clause-number"') == 3

    def test_edits_and_output_file(self, write_json, agreement_data, tmp_path, capsys):
        out_path = tmp_path / "out.html"
        code = cli.main([
            str(write_json(agreement_data)),
            "--out", str(out_path),
            "--set-value", "m1=Globex",
            "--set-color", "m1=#00ff00",
        ])
        assert code == 0
        html = out_path.read_text(encoding="utf-8")
        assert html.count(">Globex</span>") == 2
        assert html.count("background-color: rgb(0, 255, 0)") == 2
        assert f"Wrote {out_path}" in capsys.readouterr().err

    def test_validation_warning_and_reports(self, write_json, service_agreement_data, capsys):
        code = cli.main([
            str(write_json(service_agreement_data)),
            "--set-value", "effective_date=tomorrow",
            "--validate",
            "--stats",
        ])
        assert code == 0
        err = capsys.readouterr().err
        assert 'Warning: effective_date: Date must be in format "Month DD, YYYY"' in err
        assert '"isValid": false' in err
        assert '"total": 2' in err

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "nope.json")]) == 1
        assert capsys.readouterr().err.startswith("Error: Failed to load document data")

    def test_bad_assignment_is_usage_error(self, write_json, agreement_data):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([str(write_json(agreement_data)), "--set-value", "no-equals-sign"])
        assert excinfo.value.code == 2
