"""Parse sites for the three manifest loads.

Each function turns one ``LoadResult`` into an explicit outcome. The target
manifest has no sensible default, so any missing payload is fatal. A missing
local manifest only means that nothing has been stored in that area yet.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from resdepot.domain.errors import DecodeError, TransportError
from resdepot.domain.model import ManifestSource

from .contracts import Fatal, Parsed, Tolerated
from .projection import project_local_manifest, project_target_manifest

if TYPE_CHECKING:
    from resdepot.domain.ports import LoadResult, ManifestCodec

    from .contracts import LocalContribution, ParseOutcome, TargetContribution

log = getLogger(__name__)


def _decode_failure(source: ManifestSource, uri: str, exc: Exception) -> Fatal:
    error = DecodeError(f"Parse {source} manifest '{uri}' failed: {exc}", source=source)
    error.__cause__ = exc
    return Fatal(error=error)


def parse_target_result(
    result: LoadResult,
    *,
    codec: ManifestCodec,
    current_variant: str | None,
) -> ParseOutcome[TargetContribution]:
    source = ManifestSource.TARGET
    if result.is_empty:
        message = result.error or "<Empty>"
        return Fatal(
            error=TransportError(
                f"Target manifest '{result.uri}' is invalid, error message is '{message}'",
                source=source,
                uri=result.uri,
            )
        )

    try:
        manifest = codec.decode_target(result.payload or b"")
    except (DecodeError, ValueError) as exc:
        return _decode_failure(source, result.uri, exc)
    if not manifest.is_valid:
        return Fatal(error=DecodeError("Deserialize target manifest failure", source=source))

    contribution = project_target_manifest(manifest, current_variant=current_variant)
    log.debug(
        f"Target manifest {result.uri}: version={manifest.applicable_version}, "
        f"internal={manifest.internal_version}, resources={len(contribution.observations)}"
    )
    return Parsed(contribution=contribution)


def parse_local_result(
    result: LoadResult,
    *,
    codec: ManifestCodec,
    source: ManifestSource,
) -> ParseOutcome[LocalContribution]:
    if result.is_empty:
        reason = result.error or "empty payload"
        log.debug("No %s manifest at %s (%s)", source, result.uri, reason)
        return Tolerated(reason=reason)

    try:
        manifest = codec.decode_local(result.payload or b"")
    except (DecodeError, ValueError) as exc:
        return _decode_failure(source, result.uri, exc)
    if not manifest.is_valid:
        return Fatal(error=DecodeError(f"Deserialize {source} manifest failure", source=source))

    return Parsed(contribution=project_local_manifest(manifest))
