from __future__ import annotations

from resdepot.adapters.manifest import JsonManifestCodec
from resdepot.domain.checking.contracts import Fatal, Parsed, ParseStatus, Tolerated
from resdepot.domain.checking.parsing import parse_local_result, parse_target_result
from resdepot.domain.errors import DecodeError, TransportError
from resdepot.domain.model import ManifestSource
from resdepot.domain.ports import LoadResult
from tests.helpers.manifests import local_manifest_bytes, local_resource

CODEC = JsonManifestCodec()


def test_target_transport_failure_is_fatal() -> None:
    outcome = parse_target_result(
        LoadResult(uri="remote/ResourceVersion.dat", error="timed out"),
        codec=CODEC,
        current_variant=None,
    )

    assert isinstance(outcome, Fatal)
    assert outcome.status is ParseStatus.FATAL
    assert isinstance(outcome.error, TransportError)
    assert outcome.error.uri == "remote/ResourceVersion.dat"
    assert "timed out" in str(outcome.error)


def test_target_decode_failure_wraps_cause() -> None:
    outcome = parse_target_result(
        LoadResult(uri="remote/ResourceVersion.dat", payload=b"[1, 2"),
        codec=CODEC,
        current_variant=None,
    )

    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.error, DecodeError)
    assert outcome.error.source is ManifestSource.TARGET
    assert isinstance(outcome.error.__cause__, DecodeError)


def test_missing_local_manifest_is_tolerated() -> None:
    outcome = parse_local_result(
        LoadResult(uri="rw/ResourceList.dat", error="File not found: rw/ResourceList.dat"),
        codec=CODEC,
        source=ManifestSource.READ_WRITE,
    )

    assert isinstance(outcome, Tolerated)
    assert outcome.reason.startswith("File not found")


def test_local_manifest_with_duplicates_is_fatal() -> None:
    payload = local_manifest_bytes([local_resource("a"), local_resource("a")])

    outcome = parse_local_result(
        LoadResult(uri="ro/ResourceList.dat", payload=payload),
        codec=CODEC,
        source=ManifestSource.READ_ONLY,
    )

    assert isinstance(outcome, Fatal)
    assert isinstance(outcome.error, DecodeError)
    assert outcome.error.source is ManifestSource.READ_ONLY


def test_local_manifest_is_parsed() -> None:
    payload = local_manifest_bytes([local_resource("a", variant="hd", hash_code=3)])

    outcome = parse_local_result(
        LoadResult(uri="ro/ResourceList.dat", payload=payload),
        codec=CODEC,
        source=ManifestSource.READ_ONLY,
    )

    assert isinstance(outcome, Parsed)
    ((name, observation),) = outcome.contribution.observations
    assert name.full_name == "a.hd"
    assert observation.hash == 3
