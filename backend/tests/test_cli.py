import json

from litfund import cli
from litfund.engine.llm import ModelGateway


def _fake_complete(answer):
    async def complete(self, parts):
        complete.parts = parts
        return answer

    return complete


def _intake(tmp_path, **fields):
    path = tmp_path / "intake.json"
    path.write_text(json.dumps({"caseNarrative": "Trade secret theft.", "fundingRequest": "500000", **fields}))
    return path


def test_analyze_prints_sections(tmp_path, monkeypatch, capsys, prompt_file):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("SYSTEM_PROMPT_PATH", str(prompt_file))
    fake = _fake_complete("## Liability\nStrong case.\n## Damages\nConditional on expert report.")
    monkeypatch.setattr(ModelGateway, "complete", fake)
    photo = tmp_path / "scene.png"
    photo.write_bytes(b"\x89PNG")

    code = cli.main(["analyze", str(_intake(tmp_path)), "--attach", str(photo), "--json"])

    assert code == 0
    sections = json.loads(capsys.readouterr().out)
    assert [(s["title"], s["verdict"]) for s in sections] == [
        ("Liability", "pass"),
        ("Damages", "caution"),
    ]
    assert [p.kind for p in fake.parts] == ["text", "image"]


def test_analyze_reports_missing_key(tmp_path, monkeypatch, capsys, prompt_file):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("SYSTEM_PROMPT_PATH", str(prompt_file))

    code = cli.main(["analyze", str(_intake(tmp_path))])

    assert code == 1
    assert "ANTHROPIC_API_KEY is not set" in capsys.readouterr().err


def test_analyze_rejects_incomplete_intake(tmp_path, capsys):
    code = cli.main(["analyze", str(_intake(tmp_path, fundingRequest=""))])
    assert code == 1
    assert "fundingRequest" in capsys.readouterr().err


def test_empty_answer_is_an_error(tmp_path, monkeypatch, capsys, prompt_file):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
    monkeypatch.setenv("SYSTEM_PROMPT_PATH", str(prompt_file))
    monkeypatch.setattr(ModelGateway, "complete", _fake_complete(""))

    assert cli.main(["analyze", str(_intake(tmp_path))]) == 1
    assert "Empty response" in capsys.readouterr().err
