"""Resolution of name or identifier lists used by bulk assignments."""

from enum import Enum

from protean.exceptions import ObjectNotFoundError


class MatchBy(Enum):
    NAME = "name"
    ID = "id"


def resolve_references(repo, references, match_by=MatchBy.NAME.value):
    """Resolve ``references`` to records held by ``repo``.

    Returns ``(records, unresolved)``. Order of first appearance is kept and
    duplicates collapse; references that match nothing land in
    ``unresolved`` instead of failing the whole assignment.
    """
    records, unresolved, seen = [], [], set()

    for reference in dict.fromkeys(references or []):
        if match_by == MatchBy.ID.value:
            try:
                record = repo.get(reference)
            except ObjectNotFoundError:
                record = None
        else:
            record = repo.find_by_name(reference)

        if record is None:
            unresolved.append(reference)
        elif record.id not in seen:
            seen.add(record.id)
            records.append(record)

    return records, unresolved
