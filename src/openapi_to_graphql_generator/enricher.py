"""Propagate dotted attribute selections across reference and array boundaries."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .gen_logging import get_logger
from .json_types import SelectionMap
from .resolver import component_schema, get_ref_name, has_ref, ref_of, resolve_schema_node
from .schema_utils import array_items, expand_all_of, is_array_schema, object_properties
from .selection import copy_selection

logger = get_logger(__name__)

_ARRAY_ITEM = "0"


def enrich_selected_attributes(
    selection: Mapping[str, Mapping[str, bool]],
    document: Any,
) -> SelectionMap:
    """Derive type-scoped selections for every type reachable from the selected paths.

    Each dotted path marked ``True`` under a type that exists in
    ``components.schemas`` is walked against that schema. Whenever the walk
    crosses a ``$ref`` (directly or through array items) the remaining segments
    are recorded under the referenced type's own name. A path that ends at a
    referenced type, or at an inline object, selects every direct property of
    it. Existing entries are never overwritten, so explicit ``False`` values
    survive.

    Args:
        selection (Mapping[str, Mapping[str, bool]]): Type-keyed selection map.
        document (Any): Parsed OpenAPI document.

    Returns:
        SelectionMap: New, enriched selection map.
    """
    walker = _SelectionWalker(document=document, enriched=copy_selection(selection))
    for type_name, attrs in selection.items():
        schema = component_schema(document, type_name)
        if schema is None:
            logger.debug("No component schema for selected type %s", type_name)
            continue
        for attr_path, selected in attrs.items():
            if selected is True and "." in attr_path:
                walker.walk(
                    schema,
                    attr_path.split("."),
                    context=type_name,
                    relative=(),
                    via_ref=False,
                )
    return walker.enriched


@dataclass
class _SelectionWalker:
    document: Any
    enriched: SelectionMap
    expanded: set[str] = field(default_factory=set)

    def walk(
        self,
        schema: Any,
        segments: Sequence[str],
        *,
        context: str,
        relative: tuple[str, ...],
        via_ref: bool,
    ) -> None:
        """Consume ``segments`` against ``schema`` inside the ``context`` type.

        ``relative`` is the path walked since ``context`` was entered and
        ``via_ref`` tells whether that happened through a reference boundary.
        """
        if not segments or not isinstance(schema, dict):
            return
        schema = expand_all_of(schema, self.document)
        segment, rest = segments[0], segments[1:]

        if segment == _ARRAY_ITEM:
            self._walk_array_item(schema, rest, context=context, relative=relative, via_ref=via_ref)
            return

        properties = object_properties(schema)
        if segment not in properties:
            return
        prop_schema = properties[segment]
        prop_path = (*relative, segment)
        if not rest:
            self._record(context, prop_path)
            self._select_leaf_children(prop_schema, context=context, prop_path=prop_path)
            return
        if via_ref:
            self._record(context, prop_path)

        if has_ref(prop_schema):
            self._enter_reference(prop_schema, rest)
            return

        items = array_items(prop_schema)
        if is_array_schema(prop_schema) and has_ref(items):
            if rest[0] == _ARRAY_ITEM:
                rest = rest[1:]
            self._enter_reference(items, rest)
            return

        self.walk(prop_schema, rest, context=context, relative=prop_path, via_ref=via_ref)

    def _walk_array_item(
        self,
        schema: dict[str, Any],
        rest: Sequence[str],
        *,
        context: str,
        relative: tuple[str, ...],
        via_ref: bool,
    ) -> None:
        items = array_items(schema)
        if items is None:
            return
        if has_ref(items):
            self._enter_reference(items, rest)
            return
        item_path = (*relative, _ARRAY_ITEM)
        if not rest:
            self._record(context, item_path)
            self._select_leaf_children(items, context=context, prop_path=item_path)
            return
        self.walk(items, rest, context=context, relative=item_path, via_ref=via_ref)

    def _enter_reference(self, node: dict[str, Any], rest: Sequence[str]) -> None:
        if not rest:
            self._select_all_properties(node)
            return
        target = get_ref_name(ref_of(node))
        resolved = resolve_schema_node(node, self.document)
        if not target or resolved is None:
            return
        self.walk(resolved, rest, context=target, relative=(), via_ref=True)

    def _record(self, context: str, path: Sequence[str]) -> None:
        self.enriched.setdefault(context, {}).setdefault(".".join(path), True)

    def _select_leaf_children(
        self,
        prop_schema: Any,
        *,
        context: str,
        prop_path: tuple[str, ...],
        direct: bool = False,
    ) -> None:
        """Select the fields a selected leaf needs so that its type is never printed empty.

        Referenced types get all of their properties; inline objects and array
        items get theirs under ``prop_path``. ``direct`` marks a property of a
        type that is itself being selected in full: its referenced types keep
        any selection they already carry.
        """
        if has_ref(prop_schema):
            self._select_all_properties(prop_schema, only_if_unselected=direct)
            return
        if is_array_schema(prop_schema):
            items = array_items(prop_schema)
            if items is None:
                return
            if has_ref(items):
                self._select_all_properties(items, only_if_unselected=direct)
                return
            item_path = (*prop_path, _ARRAY_ITEM)
            self._record(context, item_path)
            self._select_leaf_children(items, context=context, prop_path=item_path)
            return
        if not isinstance(prop_schema, dict):
            return
        for child, child_schema in object_properties(expand_all_of(prop_schema, self.document)).items():
            child_path = (*prop_path, child)
            self._record(context, child_path)
            self._select_leaf_children(child_schema, context=context, prop_path=child_path)

    def _select_all_properties(self, node: dict[str, Any], *, only_if_unselected: bool = False) -> None:
        target = get_ref_name(ref_of(node))
        resolved = resolve_schema_node(node, self.document)
        if not target or resolved is None or target in self.expanded:
            return
        if only_if_unselected and self.enriched.get(target):
            return
        self.expanded.add(target)
        for child, child_schema in object_properties(expand_all_of(resolved, self.document)).items():
            self._record(target, (child,))
            self._select_leaf_children(child_schema, context=target, prop_path=(child,), direct=True)
