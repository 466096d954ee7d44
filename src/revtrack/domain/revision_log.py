"""Parse a change-log stream into a per-service revision index.

The log is produced by something like::

    git log --pretty=format:'@@@%H%n%b###' --name-status

Every entry starts with a header line (``@@@`` + full commit hash), carries a
``Change-Id:`` trailer in its body, and ends its header part with ``###``.
What follows until the next header are ``<change type>\\t<path>`` lines. A
path is attributed to a service when it contains one of the module markers
(``/src``, ``/pom.xml``, ``/Dockerfile``); the service name is everything in
front of the marker.

Entries are expected newest first, so index 0 of each service's sequence is
its latest change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = getLogger(__name__)

type RevisionIndex = dict[str, list[str]]
type ChangeToCommitMap = dict[str, str]

DEFAULT_COMMIT_ID_LENGTH = 7
CHANGE_ID_LENGTH = 41


class PathMarker(StrEnum):
    """Path fragments identifying a module, in classification priority order."""

    SOURCE = "/src"
    BUILD_DESCRIPTOR = "/pom.xml"
    CONTAINER_DESCRIPTOR = "/Dockerfile"


class RevisionLogReadError(OSError):
    """Raised when the revision log cannot be opened or read."""


@dataclass(frozen=True, slots=True)
class ParserConfig:
    header_marker: str = "@@@"
    footer_marker: str = "###"
    change_id_label: str = "Change-Id: "
    change_id_length: int = CHANGE_ID_LENGTH
    commit_id_length: int = DEFAULT_COMMIT_ID_LENGTH
    delete_change_types: frozenset[str] = frozenset({"D", "Delete"})
    markers: tuple[PathMarker, ...] = (
        PathMarker.SOURCE,
        PathMarker.BUILD_DESCRIPTOR,
        PathMarker.CONTAINER_DESCRIPTOR,
    )

    def __post_init__(self) -> None:
        if self.commit_id_length <= 0:
            raise ValueError("Commit id length must be positive")


@dataclass(slots=True)
class RevisionLog:
    """Result of one parser run."""

    revisions: RevisionIndex = field(default_factory=dict[str, list[str]])
    commit_ids: ChangeToCommitMap = field(default_factory=dict[str, str])
    deleted: set[str] = field(default_factory=set[str])

    def latest_revision(self, service_name: str) -> str | None:
        change_ids = self.revisions.get(service_name)
        return change_ids[0] if change_ids else None

    def commit_id_for(self, change_id: str) -> str:
        return self.commit_ids.get(change_id, "")


@dataclass(slots=True)
class _ParserState:
    in_header: bool = False
    commit_id: str = ""
    change_id: str | None = None


def classify_path(
    path: str,
    markers: Iterable[PathMarker] = tuple(PathMarker),
) -> tuple[str, PathMarker] | None:
    """Return ``(service_name, marker)`` for the first marker found in ``path``."""

    for marker in markers:
        index = path.find(marker)
        if index != -1:
            return path[:index], marker
    return None


def service_name_from_descriptor(path: str) -> str | None:
    """Derive a service name from a ``<service>/pom.xml`` style path."""

    index = path.find(PathMarker.BUILD_DESCRIPTOR)
    if index <= 0:
        return None
    return path[:index]


def parse_revision_log(
    lines: Iterable[str],
    *,
    config: ParserConfig | None = None,
    deleted: set[str] | None = None,
) -> RevisionLog:
    """Build the revision index for ``lines``.

    ``deleted`` is updated in place with services whose build descriptor was
    removed; once a service is in it, later lines naming that service are
    ignored.
    """

    cfg = config or ParserConfig()
    result = RevisionLog(deleted=deleted if deleted is not None else set[str]())
    state = _ParserState()

    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if line.startswith(cfg.header_marker):
            _start_entry(line, state, cfg)
        elif line.startswith(cfg.footer_marker):
            state.in_header = False
        elif state.in_header:
            _read_header_line(line, state, result, cfg)
        else:
            _read_body_line(line, state, result, cfg)

    return result


def read_revision_log(path: str | Path, *, config: ParserConfig | None = None) -> RevisionLog:
    """Parse the revision log stored at ``path``."""

    try:
        with open(path, encoding="utf-8", errors="replace") as handle:  # noqa: PTH123
            result = parse_revision_log(handle, config=config)
    except OSError as exc:
        raise RevisionLogReadError(f"Can't read revision list file: {path}") from exc

    log.info(
        "Parsed revision log %s: services=%s, changes=%s, deleted=%s",
        path,
        len(result.revisions),
        len(result.commit_ids),
        len(result.deleted),
    )
    return result


def describe_revision_log(result: RevisionLog) -> str:
    """Render the parsed index, one block per service."""

    blocks: list[str] = []
    for service_name, change_ids in sorted(result.revisions.items()):
        lines = [f"--- {service_name} ---"]
        lines.extend(f"{change_id} {result.commit_id_for(change_id)}" for change_id in change_ids)
        blocks.append("\n".join(lines))
    if result.deleted:
        blocks.append("--- deleted ---\n" + "\n".join(sorted(result.deleted)))
    return "\n\n".join(blocks)


def _start_entry(line: str, state: _ParserState, cfg: ParserConfig) -> None:
    state.in_header = True
    state.change_id = None
    start = len(cfg.header_marker)
    end = start + cfg.commit_id_length
    if len(line) < end:
        log.debug("Header line too short for a commit id: %r", line)
        state.commit_id = ""
        return
    state.commit_id = line[start:end]


def _read_header_line(
    line: str,
    state: _ParserState,
    result: RevisionLog,
    cfg: ParserConfig,
) -> None:
    index = line.find(cfg.change_id_label)
    if index == -1:
        return
    start = index + len(cfg.change_id_label)
    end = start + cfg.change_id_length
    if len(line) < end:
        log.debug("Change-Id too short, skipping: %r", line)
        return
    change_id = line[start:end]
    result.commit_ids[change_id] = state.commit_id
    state.change_id = change_id


def _read_body_line(
    line: str,
    state: _ParserState,
    result: RevisionLog,
    cfg: ParserConfig,
) -> None:
    fields = line.split("\t")
    classified = classify_path(fields[-1], cfg.markers)
    if classified is None:
        return
    service_name, marker = classified
    if not service_name:
        return

    if fields[0] in cfg.delete_change_types and marker is PathMarker.BUILD_DESCRIPTOR:
        # the whole module is gone
        result.deleted.add(service_name)
        return
    if service_name in result.deleted:
        return
    if state.change_id is None:
        return

    change_ids = result.revisions.setdefault(service_name, [])
    if change_ids and change_ids[-1] == state.change_id:
        return
    change_ids.append(state.change_id)
