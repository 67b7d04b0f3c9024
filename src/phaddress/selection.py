"""Cascading selection state for one address form.

The pure functions (``select``, ``type_text``, ``clear_all``) each return a
new ``SelectionState``; resetting the deeper levels happens inside the same
returned object, so no caller can observe a parent that changed while its
old children are still resolved. ``SelectionMachine`` holds the current
state for a mounted form and reports every change to the host.
"""

from __future__ import annotations

import uuid
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Union

from phaddress.config import invalidate_on_type as default_invalidate_on_type
from phaddress.exceptions import NotFoundError
from phaddress.exceptions import ValidationError
from phaddress.lookup import LocationResolver
from phaddress.models import EMPTY_SLOT
from phaddress.models import LEVELS
from phaddress.models import AnyLocation
from phaddress.models import ChildLookup
from phaddress.models import LocationLevel
from phaddress.models import LocationNode
from phaddress.models import PartialSelection
from phaddress.models import SelectionState
from phaddress.models import SlotState
from phaddress.search import rank_children
from phaddress.search import validate_limit
from phaddress.utils.logging import form_context
from phaddress.utils.logging import get_logger
from phaddress.utils.logging import set_form_context

logger = get_logger(__name__)

Level = Union[LocationLevel, str]
ChangeCallback = Callable[[dict[str, str]], Any]


def initial_state(
    initial: Optional[Union[PartialSelection, Mapping[str, Any]]] = None,
) -> SelectionState:
    """Build the state of a freshly mounted form.

    Args:
        initial: Optional plain-string values. They seed the slot text
            only; no slot is resolved until the user selects a node.

    Returns:
        Four unresolved slots.
    """
    if initial is None:
        return SelectionState()
    if not isinstance(initial, PartialSelection):
        initial = PartialSelection.model_validate(dict(initial))
    return SelectionState(
        region=SlotState(text_value=initial.region),
        province=SlotState(text_value=initial.province),
        city=SlotState(text_value=initial.city),
        barangay=SlotState(text_value=initial.barangay),
    )


def _require_parent(state: SelectionState, level: LocationLevel) -> Optional[LocationNode]:
    """Return the resolved parent node, raising if the parent is unresolved."""
    parent_level = level.parent
    if parent_level is None:
        return None
    parent = state.slot(parent_level).resolved_node
    if parent is None:
        raise ValidationError(
            f"Select a {parent_level.value} before the {level.value}",
            field=level.value,
        )
    return parent


def _reset_deeper(level: LocationLevel) -> dict[LocationLevel, SlotState]:
    return {deeper: EMPTY_SLOT for deeper in level.deeper()}


def select(state: SelectionState, level: Level, node: AnyLocation) -> SelectionState:
    """Resolve ``level`` to ``node`` and reset every deeper level.

    Raises:
        ValidationError: If the node belongs to another level, the parent
            level is unresolved, or the node is not a child of the
            resolved parent.
    """
    level = LocationLevel.parse(level)
    if not isinstance(node, LocationNode) or node.level is not level:
        raise ValidationError(f"Expected a {level.value} node", field=level.value)

    parent = _require_parent(state, level)
    if parent is not None and node.parent_code != parent.code:
        raise ValidationError(
            f"{node.name} is not in {parent.name}",
            field=level.value,
        )

    slots = _reset_deeper(level)
    slots[level] = SlotState(text_value=node.name, resolved_node=node)
    return state.with_slots(slots)


def type_text(
    state: SelectionState,
    level: Level,
    text: Optional[str],
    invalidate_on_type: bool = False,
) -> SelectionState:
    """Update the text (and live query) of one level.

    With ``invalidate_on_type`` False the slot keeps its resolved node, so
    the next level stays scoped to the previous selection even though the
    displayed text changed. With True the slot is unresolved and every
    deeper level is reset.

    Raises:
        ValidationError: If the level above has no selection; hosts render
            such a field disabled.
    """
    level = LocationLevel.parse(level)
    _require_parent(state, level)
    text = text or ""

    if invalidate_on_type:
        slots = _reset_deeper(level)
        slots[level] = SlotState(text_value=text, query=text)
        return state.with_slots(slots)

    current = state.slot(level)
    return state.with_slots(
        {level: current.model_copy(update={"text_value": text, "query": text})}
    )


def clear_all() -> SelectionState:
    """Return the empty initial state."""
    return SelectionState()


def consolidate(state: SelectionState) -> dict[str, str]:
    """Return the display text of every level."""
    return {level.value: state.slot(level).text_value for level in LEVELS}


def check_cascade(state: SelectionState) -> bool:
    """Return True if no level below an unresolved level holds a value."""
    for depth, level in enumerate(LEVELS):
        if state.slot(level).is_resolved:
            continue
        for deeper in LEVELS[depth + 1 :]:
            slot = state.slot(deeper)
            if slot.is_resolved or slot.text_value:
                return False
    return True


class SelectionMachine:
    """Selection state of one mounted address form.

    Every transition replaces the state atomically and then calls
    ``on_change`` with the consolidated ``{region, province, city,
    barangay}`` display strings. The callback also fires once on mount so
    the host receives any initial values.

    Log lines emitted during a transition carry the machine's ``form_id``.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        on_change: Optional[ChangeCallback] = None,
        initial: Optional[Union[PartialSelection, Mapping[str, Any]]] = None,
        invalidate_on_type: Optional[bool] = None,
        limit: Optional[int] = None,
        form_id: Optional[str] = None,
    ) -> None:
        """Initialize the machine.

        Args:
            resolver: Lookup source for candidate lists.
            on_change: Called with the consolidated values after each change.
            initial: Plain-string initial values.
            invalidate_on_type: Typing policy. Defaults to
                PHADDRESS_INVALIDATE_ON_TYPE.
            limit: Maximum candidates per level. Defaults to the
                configured result limit.
            form_id: Correlation id for log lines. Generated when omitted.

        Raises:
            ValidationError: If ``limit`` is not a positive integer.
        """
        self._resolver = resolver
        self._on_change = on_change
        self._invalidate_on_type = (
            default_invalidate_on_type()
            if invalidate_on_type is None
            else invalidate_on_type
        )
        self._limit = validate_limit(limit) if limit is not None else None
        self._form_id = form_id or uuid.uuid4().hex
        set_form_context(self._form_id)
        self._state = initial_state(initial)
        self._notify()

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def form_id(self) -> str:
        return self._form_id

    @property
    def invalidate_on_type(self) -> bool:
        return self._invalidate_on_type

    def value(self) -> dict[str, str]:
        return consolidate(self._state)

    def is_enabled(self, level: Level) -> bool:
        """Return True if the level's field accepts input."""
        parent_level = LocationLevel.parse(level).parent
        return parent_level is None or self._state.slot(parent_level).is_resolved

    def lookup(self, level: Level) -> ChildLookup:
        """Candidates of one level for the current selection and query."""
        level = LocationLevel.parse(level)
        slot = self._state.slot(level)
        parent_level = level.parent
        if parent_level is None:
            return rank_children(
                self._resolver.list_regions(), slot.query, limit=self._limit
            )

        parent = self._state.slot(parent_level).resolved_node
        if parent is None:
            return rank_children((), slot.query, parent_resolved=False)
        return rank_children(
            self._resolver.children_of(level, parent.code),
            slot.query,
            limit=self._limit,
        )

    def candidates(self, level: Level) -> Tuple[AnyLocation, ...]:
        """Ranked candidates of one level, empty when nothing applies."""
        return self.lookup(level).items

    def select(self, level: Level, node: AnyLocation) -> SelectionState:
        level = LocationLevel.parse(level)
        with form_context(self._form_id):
            self._transition(select(self._state, level, node))
            logger.debug(
                "Location selected",
                extra={"context": {"level": level.value, "code": node.code}},
            )
        return self._state

    def select_by_code(self, level: Level, code: str) -> SelectionState:
        """Select the child of the current parent that has ``code``.

        Raises:
            ValidationError: If the level above has no selection.
            NotFoundError: If no such child exists under the current parent.
        """
        level = LocationLevel.parse(level)
        parent_level = level.parent
        parent_code = None
        if parent_level is not None:
            parent = _require_parent(self._state, level)
            parent_code = parent.code if parent is not None else None
        for node in self._resolver.children_of(level, parent_code):
            if node.code == str(code):
                return self.select(level, node)
        raise NotFoundError(level.value, str(code))

    def type_text(self, level: Level, text: Optional[str]) -> SelectionState:
        with form_context(self._form_id):
            self._transition(
                type_text(
                    self._state,
                    level,
                    text,
                    invalidate_on_type=self._invalidate_on_type,
                )
            )
        return self._state

    def clear_all(self) -> SelectionState:
        with form_context(self._form_id):
            self._transition(clear_all())
            logger.debug("Selections cleared")
        return self._state

    def _transition(self, new_state: SelectionState) -> None:
        self._state = new_state
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(consolidate(self._state))
