from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from healthprobe.probes.templating import placeholders, placeholders_in


class ProbeKind(str, Enum):
    JSON = "json"
    PAGE = "page"
    UPLOAD = "upload"
    COMMAND = "command"


# ------------------------------------------------------------
# Building blocks
# ------------------------------------------------------------


@dataclass(frozen=True)
class Target:
    method: str
    path: str


@dataclass(frozen=True)
class FieldMatch:
    """Body field `field` must equal the Run Context value under `context_key`."""

    field: str
    context_key: str


@dataclass(frozen=True)
class Expectation:
    """
    Expected-success predicate. Every configured check must hold.

    Status bounds are inclusive. `success_flag`, `fields` and `matches` need a
    JSON body; `keywords` are searched in the raw text.
    """

    status_min: int = 200
    status_max: int = 200
    success_flag: bool = False
    keywords: tuple[str, ...] = ()
    fields: tuple[str, ...] = ()
    matches: tuple[FieldMatch, ...] = ()

    def __post_init__(self) -> None:
        if not 100 <= self.status_min <= self.status_max <= 599:
            raise ValueError(
                f"Invalid status range {self.status_min}..{self.status_max}"
            )

    @property
    def needs_json(self) -> bool:
        return bool(self.success_flag or self.fields or self.matches)

    @property
    def context_keys(self) -> set[str]:
        return {m.context_key for m in self.matches}


ANY_STATUS = Expectation(status_min=100, status_max=599)
SUCCESS = Expectation(success_flag=True)


@dataclass(frozen=True)
class Extract:
    """
    Store a value in the Run Context when the probe passes: either the body
    field at dotted path `field`, or the literal `value`.
    """

    key: str
    field: Optional[str] = None
    value: Any = None

    def __post_init__(self) -> None:
        if (self.field is None) == (self.value is None):
            raise ValueError(f"Extract {self.key!r} needs exactly one of field/value")


@dataclass(frozen=True)
class Upload:
    """Multipart form: text fields plus one generated document file."""

    fields: Mapping[str, str]
    file_field: str
    filename: str
    content: str
    content_type: str = "text/plain"


# ------------------------------------------------------------
# Descriptor
# ------------------------------------------------------------


@dataclass(frozen=True)
class ProbeDescriptor:
    name: str
    kind: ProbeKind
    target: Target
    expect: Expectation = field(default_factory=Expectation)
    requires: frozenset[str] = frozenset()
    body: Optional[Mapping[str, Any]] = None
    bearer: Optional[str] = None
    upload: Optional[Upload] = None
    command: tuple[str, ...] = ()
    extract: tuple[Extract, ...] = ()
    settle_seconds: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "requires", frozenset(self.requires))

        if not self.name.strip():
            raise ValueError("Probe name must not be empty")
        if self.kind is ProbeKind.UPLOAD and self.upload is None:
            raise ValueError(f"Upload probe {self.name!r} has no upload form")
        if self.kind is ProbeKind.COMMAND and not self.command:
            raise ValueError(f"Command probe {self.name!r} has no command")

        undeclared = self.template_keys - self.requires
        if undeclared:
            raise ValueError(
                f"Probe {self.name!r} uses undeclared context keys: "
                f"{', '.join(sorted(undeclared))}"
            )

    @property
    def template_keys(self) -> set[str]:
        keys = placeholders(self.target.path) | placeholders_in(self.body)
        keys |= self.expect.context_keys
        if self.upload is not None:
            keys |= placeholders_in(dict(self.upload.fields))
            keys |= placeholders(self.upload.content)
            keys |= placeholders(self.upload.filename)
        return keys

    @property
    def provides(self) -> set[str]:
        return {e.key for e in self.extract}


# ------------------------------------------------------------
# Constructors used by suite definitions
# ------------------------------------------------------------


def json_probe(
    name: str,
    method: str,
    path: str,
    *,
    expect: Expectation = SUCCESS,
    requires: Iterable[str] = (),
    body: Optional[Mapping[str, Any]] = None,
    bearer: Optional[str] = None,
    extract: Iterable[Extract] = (),
    settle_seconds: float = 0.0,
) -> ProbeDescriptor:
    return ProbeDescriptor(
        name=name,
        kind=ProbeKind.JSON,
        target=Target(method.upper(), path),
        expect=expect,
        requires=frozenset(requires),
        body=body,
        bearer=bearer,
        extract=tuple(extract),
        settle_seconds=settle_seconds,
    )


def page_probe(
    name: str,
    path: str,
    *keywords: str,
    requires: Iterable[str] = (),
) -> ProbeDescriptor:
    return ProbeDescriptor(
        name=name,
        kind=ProbeKind.PAGE,
        target=Target("GET", path),
        expect=Expectation(keywords=tuple(keywords)),
        requires=frozenset(requires),
    )


def upload_probe(
    name: str,
    path: str,
    upload: Upload,
    *,
    expect: Expectation = SUCCESS,
    requires: Iterable[str] = (),
    extract: Iterable[Extract] = (),
) -> ProbeDescriptor:
    return ProbeDescriptor(
        name=name,
        kind=ProbeKind.UPLOAD,
        target=Target("POST", path),
        expect=expect,
        requires=frozenset(requires),
        upload=upload,
        extract=tuple(extract),
    )


def command_probe(name: str, argv: Iterable[str], *keywords: str) -> ProbeDescriptor:
    command = tuple(argv)
    return ProbeDescriptor(
        name=name,
        kind=ProbeKind.COMMAND,
        target=Target("RUN", " ".join(command)),
        expect=Expectation(keywords=tuple(keywords)),
        command=command,
    )
