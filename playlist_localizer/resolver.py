"""
Resolves playlist references to files in the local index.

Only files sharing the reference's exact stem are ever considered. Among them
the candidate whose directory chain agrees with the reference's for the most
trailing components wins; a matching extension only breaks ties.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional, Union

from .library import LocalIndex, split_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchCandidate:
    """Score of one same-stem candidate against one reference."""

    position: int
    path: Path
    matching_components: int = 0
    extension_matches: bool = False

    def beats(self, best: Optional["MatchCandidate"]) -> bool:
        if best is None:
            return True
        if self.matching_components > best.matching_components:
            return True
        return (
            self.matching_components == best.matching_components
            and self.extension_matches
            and not best.extension_matches
        )


def count_matching_components(
    candidate: PurePath, reference: PurePath, full_overlap: bool = False
) -> int:
    """
    Position of the first differing parent directory, walking outward.

    Position 0 is the immediate parent. When one chain is a suffix of the
    other the count stays 0, unless ``full_overlap`` is set, in which case
    the overlap length is returned.
    """
    cand_dirs = candidate.parent.parts[::-1]
    ref_dirs = reference.parent.parts[::-1]
    for i, (c, r) in enumerate(zip(cand_dirs, ref_dirs)):
        if c != r:
            return i
    if full_overlap:
        return min(len(cand_dirs), len(ref_dirs))
    return 0


def score_candidate(
    index: LocalIndex,
    position: int,
    reference: PurePath,
    reference_extension: str,
    full_overlap: bool = False,
) -> Optional[MatchCandidate]:
    """Score one candidate; None when the candidate has no extension."""
    path = index[position]
    _, extension = split_name(path.name)
    if extension is None:
        return None
    return MatchCandidate(
        position=position,
        path=path,
        matching_components=count_matching_components(path, reference, full_overlap),
        extension_matches=extension == reference_extension,
    )


def resolve_position(
    index: LocalIndex, reference: Union[str, PurePath], full_overlap: bool = False
) -> Optional[int]:
    """Arena position of the best local file for ``reference``, or None."""
    ref_path = PurePath(reference)
    stem, extension = split_name(ref_path.name)
    if not stem or extension is None:
        return None

    best: Optional[MatchCandidate] = None
    for position in index.candidates(stem):
        candidate = score_candidate(index, position, ref_path, extension, full_overlap)
        if candidate is not None and candidate.beats(best):
            best = candidate

    if best is None:
        return None
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "%s -> %s (components=%d, extension=%s)",
            reference,
            best.path,
            best.matching_components,
            best.extension_matches,
        )
    return best.position


def resolve(
    index: LocalIndex, reference: Union[str, PurePath], full_overlap: bool = False
) -> Optional[Path]:
    """Best local file for ``reference``; the path object owned by the index."""
    position = resolve_position(index, reference, full_overlap)
    return None if position is None else index[position]
