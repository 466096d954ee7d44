from __future__ import annotations

import pytest

from revtrack.domain.deployment import DeploymentResult, TagWriteResult
from revtrack.domain.model import PendingReason
from revtrack.domain.reconciliation import PendingService, ReconciliationResult, SeedResult
from revtrack.domain.revision_log import ParserConfig, RevisionLogReadError
from revtrack.ui import cli


def test_resolve_prints_rebuild_list(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_resolve(log_path: str, **kwargs: object) -> ReconciliationResult:
        captured["log_path"] = log_path
        captured.update(kwargs)
        return ReconciliationResult(
            pending=[
                PendingService("svcA", "r1", "aaaaaaa", PendingReason.NEW),
                PendingService("svcB", "r2", "bbbbbbb", PendingReason.CHANGED),
            ]
        )

    monkeypatch.setattr(cli, "resolve_pending_services", fake_resolve)

    cli.main(["--db-host", "db.internal", "resolve", "revisions.log", "--commit-id-length", "9"])

    assert capsys.readouterr().out == "svcA/pom.xml,svcB/pom.xml\n"
    assert captured["log_path"] == "revisions.log"
    assert captured["db_host"] == "db.internal"
    assert captured["database_uri"] is None
    parser_config = captured["parser_config"]
    assert isinstance(parser_config, ParserConfig)
    assert parser_config.commit_id_length == 9


def test_seed_prints_confirmation(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "seed_service_revisions", lambda *_, **__: SeedResult(seeded=3))

    cli.main(["seed", "revisions.log"])

    assert capsys.readouterr().out == "Service entry initialization finished.\n"


def test_deployed_passes_lists_and_prints_commit_ids(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_record(
        descriptor_paths: list[str], service_names: list[str], tag: str, **_: object
    ) -> tuple[DeploymentResult, TagWriteResult]:
        captured.update(paths=descriptor_paths, services=service_names, tag=tag)
        return DeploymentResult(commit_ids=["aaaaaaa", "bbbbbbb"]), TagWriteResult()

    monkeypatch.setattr(cli, "record_deployment", fake_record)

    cli.main(
        [
            "deployed",
            "--deploy-list",
            "svcA/pom.xml,svcB/pom.xml",
            "--services",
            "svc-a svc-b",
            "--tag",
            "1.4.2",
        ]
    )

    assert capsys.readouterr().out == "aaaaaaa|bbbbbbb\n"
    assert captured == {
        "paths": ["svcA/pom.xml", "svcB/pom.xml"],
        "services": ["svc-a", "svc-b"],
        "tag": "1.4.2",
    }


def test_tags_prints_joined_entries(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: dict[str, object] = {}

    def fake_list(environment: str, **kwargs: object) -> list[str]:
        captured["environment"] = environment
        captured.update(kwargs)
        return ["All", "svcC:v3:running"]

    monkeypatch.setattr(cli, "list_promotable_tags", fake_list)

    cli.main(["tags", "beta", "--exclude", "svcA|svcB"])

    assert capsys.readouterr().out == "All,svcC:v3:running\n"
    assert captured["environment"] == "beta"
    assert captured["exclude"] == frozenset({"svcA", "svcB"})


def test_promote_prints_nothing(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    calls: list[str] = []

    def fake_promote(value: str, **_: object) -> bool:
        calls.append(value)
        return True

    monkeypatch.setattr(cli, "promote_service_tag", fake_promote)

    cli.main(["promote", "alpha:svcA:v1"])

    assert calls == ["alpha:svcA:v1"]
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "argv",
    [
        ["promote", "gamma:svcA:v1"],
        ["promote", "alpha:svcA"],
        ["resolve", "revisions.log", "--commit-id-length", "0"],
        ["deployed", "--deploy-list", "a/pom.xml", "--services", "a", "--tag", " "],
        ["tags", "gamma"],
    ],
)
def test_invalid_input_exits_with_two(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)

    assert excinfo.value.code == 2


def test_fatal_errors_exit_with_one(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def fake_resolve(*_: object, **__: object) -> ReconciliationResult:
        raise RevisionLogReadError("Can't read revision list file: missing.log")

    monkeypatch.setattr(cli, "resolve_pending_services", fake_resolve)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["resolve", "missing.log"])

    assert excinfo.value.code == 1
    assert capsys.readouterr().out == ""
