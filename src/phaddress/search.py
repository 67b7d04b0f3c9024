"""Live-query filtering and ranking of candidate lists."""

from __future__ import annotations

from typing import Iterable
from typing import Optional
from typing import Sequence
from typing import Tuple
from typing import TypeVar

from phaddress.config import get_result_limit
from phaddress.exceptions import ValidationError
from phaddress.models import AnyLocation
from phaddress.models import ChildLookup
from phaddress.models import LocationNode
from phaddress.utils.text import normalize_query
from phaddress.utils.text import sort_key

N = TypeVar("N", bound=LocationNode)


def validate_limit(limit: int) -> int:
    """Return ``limit`` if it is a positive integer.

    Raises:
        ValidationError: For zero, negative or non-integer limits.
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError("Result limit must be a positive integer", field="limit")
    return limit


def search_locations(nodes: Sequence[N], query: Optional[str]) -> Sequence[N]:
    """Keep nodes whose name contains the query, case-insensitively.

    Args:
        nodes: Candidate nodes.
        query: Raw query text.

    Returns:
        ``nodes`` itself for an empty or whitespace-only query, otherwise
        the matching nodes in their original order.
    """
    normalized = normalize_query(query)
    if not normalized:
        return nodes
    return tuple(node for node in nodes if normalized in node.name.lower())


def filter_and_rank(
    nodes: Iterable[N],
    query: Optional[str],
    limit: Optional[int] = None,
) -> Tuple[N, ...]:
    """Filter by query, sort by name, and cap the result size.

    Args:
        nodes: Candidate nodes, in any order.
        query: Raw query text; empty or whitespace keeps every node.
        limit: Maximum number of results. Defaults to the configured
            result limit (100).

    Returns:
        At most ``limit`` matching nodes, alphabetically by name.

    Raises:
        ValidationError: If ``limit`` is not a positive integer.
    """
    cap = validate_limit(limit) if limit is not None else get_result_limit()
    matches = search_locations(tuple(nodes), query)
    ranked = sorted(matches, key=lambda node: sort_key(node.name))
    return tuple(ranked[:cap])


def rank_children(
    children: Iterable[AnyLocation],
    query: Optional[str],
    parent_resolved: bool = True,
    limit: Optional[int] = None,
) -> ChildLookup:
    """Rank a level's candidates, reporting why the list may be empty.

    Args:
        children: Children of the resolved parent.
        query: Raw query text.
        parent_resolved: False when the level above has no selection.
        limit: Maximum number of results.

    Returns:
        NOT_APPLICABLE without a parent, EMPTY when nothing matches,
        RESULTS otherwise.
    """
    if not parent_resolved:
        return ChildLookup.not_applicable()
    return ChildLookup.from_items(filter_and_rank(children, query, limit=limit))
