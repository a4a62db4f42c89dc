"""Input validation helpers shared by the CLI and web surfaces.

Functions:
- resolve_id(prefix, candidates, kind) -> str: Resolve an id prefix to a unique id
- validate_title(title) -> str: Enforce the minimum title length
- validate_color(color) -> str: Enforce the subject color palette
"""

MIN_TITLE_CHARS = 2

# Subject display colors offered by the UI
SUBJECT_COLORS = [
    "#ef4444", "#f97316", "#f59e0b", "#eab308", "#84cc16", "#22c55e",
    "#10b981", "#14b8a6", "#06b6d4", "#0ea5e9", "#3b82f6", "#6366f1",
    "#8b5cf6", "#a855f7", "#d946ef", "#ec4899", "#f43f5e",
]
DEFAULT_SUBJECT_COLOR = SUBJECT_COLORS[0]


class AmbiguousIdError(Exception):
    """Raised when an id prefix matches several entities."""

    def __init__(self, kind: str, prefix: str, candidates: list[str]):
        self.kind = kind
        self.prefix = prefix
        self.candidates = candidates
        super().__init__(
            f"{kind.capitalize()} id prefix '{prefix}' is ambiguous. Candidates:\n"
            + "\n".join(f"  - {c}" for c in candidates)
        )


class IdNotFoundError(Exception):
    """Raised when no entity matches the given id prefix."""

    def __init__(self, kind: str, prefix: str):
        self.kind = kind
        self.prefix = prefix
        super().__init__(f"No {kind} found with id '{prefix}'")


def resolve_id(prefix: str, candidates: list[str], kind: str = "entity") -> str:
    """Resolve an id prefix to a unique full id.

    Args:
        prefix: Partial or full id (e.g., "3f2a" or the full uuid)
        candidates: All ids available at this level
        kind: Entity name used in error messages

    Returns:
        The unique matching id

    Raises:
        IdNotFoundError: If no candidates match the prefix
        AmbiguousIdError: If multiple candidates match the prefix
    """
    if prefix in candidates:
        return prefix

    matches = [c for c in candidates if prefix and c.startswith(prefix)]

    if len(matches) == 0:
        raise IdNotFoundError(kind, prefix)
    elif len(matches) == 1:
        return matches[0]
    else:
        raise AmbiguousIdError(kind, prefix, matches)


def validate_title(title: str) -> str:
    """Strip and check a title.

    Raises:
        ValueError: If shorter than MIN_TITLE_CHARS
    """
    stripped = title.strip()
    if len(stripped) < MIN_TITLE_CHARS:
        raise ValueError(f"Title must be at least {MIN_TITLE_CHARS} characters.")
    return stripped


def validate_color(color: str) -> str:
    """Normalize and check a subject color.

    Raises:
        ValueError: If the color is not in SUBJECT_COLORS
    """
    normalized = color.strip().lower()
    if normalized not in SUBJECT_COLORS:
        raise ValueError(
            f"Unknown color '{color}'. Choose one of: {', '.join(SUBJECT_COLORS)}"
        )
    return normalized
