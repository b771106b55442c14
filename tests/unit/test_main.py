"""Unit tests for the CLI entrypoint."""

from __future__ import annotations

import base64
import json
from pathlib import Path

import pytest

import subtasking_worker.worker.main as cli
from subtasking_worker.worker.messages import ProcessResponse


def _write_task(path: Path, **overrides: object) -> Path:
    request = {
        "session_id": "session-1",
        "task_id": "T3",
        "communication_token": "tok",
        "payload": base64.b64encode(b"abc").decode("ascii"),
        "task_options": {"options": {"UseCase": "HelloWorker"}},
        "expected_output_keys": ["root-result"],
    }
    request.update(overrides)
    path.write_text(json.dumps(request), encoding="utf-8")
    return path


@pytest.fixture
def patched_agent(clean_env, agent, monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    created: list[dict[str, object]] = []

    def fake_client(**kwargs: object):
        created.append(kwargs)
        return agent

    monkeypatch.setattr(cli, "HttpAgentClient", fake_client)
    monkeypatch.setattr(cli, "configure_logging", lambda _level: None)
    return agent, created


def test_process_command_prints_ok(patched_agent, tmp_path: Path, capsys) -> None:
    agent, created = patched_agent
    task_file = _write_task(tmp_path / "task.json")

    code = cli.main(["process", "--task", str(task_file), "--agent-url", "http://other:9000"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True, "error": None}
    assert agent.results["root-result"] == b"abc_SonId_T3"
    assert agent.closed
    assert created[0]["base_url"] == "http://other:9000"
    assert created[0]["session_id"] == "session-1"
    assert created[0]["communication_token"] == "tok"


def test_process_command_reports_task_error(patched_agent, tmp_path: Path, capsys) -> None:
    task_file = _write_task(tmp_path / "task.json", task_options={"options": {"UseCase": "X"}})

    code = cli.main(["process", "--task", str(task_file)])

    assert code == 1
    out = json.loads(capsys.readouterr().out)
    # Same shape as the HTTP process endpoint.
    assert out == {"ok": False, "error": "UseCase not found"}
    assert ProcessResponse.model_validate(out) == ProcessResponse(ok=False, error="UseCase not found")


def test_process_command_rejects_invalid_file(patched_agent, tmp_path: Path) -> None:
    task_file = tmp_path / "task.json"
    task_file.write_text("{not json", encoding="utf-8")

    assert cli.main(["process", "--task", str(task_file)]) == 2
    assert cli.main(["process", "--task", str(tmp_path / "missing.json")]) == 2


def test_process_command_rejects_non_http_agent_url(
    patched_agent, tmp_path: Path, capsys
) -> None:
    agent, created = patched_agent
    task_file = _write_task(tmp_path / "task.json")

    code = cli.main(["process", "--task", str(task_file), "--agent-url", "agent:9000"])

    assert code == 2
    assert "--agent-url must be an http(s) URL" in capsys.readouterr().err
    assert created == []
    assert agent.calls == []


def test_configuration_error_exits_with_2(clean_env, tmp_path: Path, capsys) -> None:
    clean_env.chdir(tmp_path)
    clean_env.setenv("SUBTASKING_AGENT_URL", "not-a-url")

    assert cli.main(["process", "--task", "unused.json"]) == 2
    assert "Configuration error" in capsys.readouterr().err
