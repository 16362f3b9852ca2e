"""Data version reconciliation.

Combines two independent signals, whether the object digests changed and how
the manifest's data version compares to the version in the previous digest
record, into a single BuildDecision:

    digests equal | version vs old | decision
    --------------+----------------+---------------------------------------
    yes           | equal          | WRITE_UNCHANGED (current)
    no            | equal          | WRITE_INCREMENTED (old, patch + 1)
    yes           | greater        | WRITE_AS_IS (current)
    no            | greater        | FATAL (strict) / WRITE_AS_IS (lenient)
    yes           | less           | WRITE_AS_IS (old)
    no            | less           | WRITE_INCREMENTED (old, patch + 1)

With no previous record the decision is always WRITE_AS_IS (current).
reconcile() is pure; the pipeline applies the resulting version to the
manifest and digest record in one place.
"""

from datapackager.fingerprint import records_equal
from datapackager.models import BuildDecision, DataVersion, FingerprintRecord


def compare_versions(current: DataVersion, old: DataVersion) -> int:
    """Return -1, 0 or 1 as current is less than, equal to or greater than old."""
    return (current > old) - (current < old)


def reconcile(
    old_record: FingerprintRecord | None,
    new_record: FingerprintRecord,
    current_version: DataVersion,
    strict: bool = True,
) -> BuildDecision:
    """Decide what a build does with its output.

    Args:
        old_record: Record from the previous build (None on a first build)
        new_record: Record computed for this build
        current_version: Data version currently set in the manifest
        strict: Treat "data changed and version bumped by hand" as fatal

    Returns:
        BuildDecision carrying the version to persist
    """
    if old_record is None:
        return BuildDecision.as_is(
            current_version,
            f"First build, recording data version {current_version}",
        )

    old_version = old_record.version
    unchanged = records_equal(old_record, new_record)
    cmp = compare_versions(current_version, old_version)

    if cmp == 0:
        if unchanged:
            return BuildDecision.unchanged(
                current_version,
                f"Processed data sets match existing data sets at version {current_version}",
            )
        bumped = old_version.bump_patch()
        return BuildDecision.incremented(
            bumped,
            f"Data has been updated and DataVersion string incremented automatically to {bumped}",
        )

    if cmp > 0:
        if unchanged:
            return BuildDecision.as_is(
                current_version,
                f"Data hasn't changed but the DataVersion has been bumped "
                f"from {old_version} to {current_version}",
            )
        reason = (
            f"Data has changed and the DataVersion was also changed by hand "
            f"from {old_version} to {current_version}"
        )
        if strict:
            return BuildDecision.fatal(reason)
        return BuildDecision.as_is(
            current_version,
            f"{reason}; keeping {current_version} (lenient version mode)",
        )

    if unchanged:
        return BuildDecision.as_is(
            old_version,
            f"New DataVersion {current_version} is less than old {old_version} "
            f"but data are unchanged; restoring {old_version}",
        )
    bumped = old_version.bump_patch()
    return BuildDecision.incremented(
        bumped,
        f"New DataVersion {current_version} is less than old {old_version} "
        f"and data changed; incrementing from {old_version} to {bumped}",
    )
