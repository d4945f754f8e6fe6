"""
Batch planning: split an ordered item list into fixed-capacity pages.
"""

# Standard Library
import collections.abc
import dataclasses

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.errors
import catalogue_paginator.items
import catalogue_paginator.layouts


Item = cpag.items.Item
LayoutId = cpag.layouts.LayoutId
AssignmentLengthMismatchError = cpag.errors.AssignmentLengthMismatchError


@dataclasses.dataclass(frozen=True)
class PagePlan:
	"""
	One page worth of items. slots always has exactly capacity entries;
	None marks an empty slot at the end of a short page.
	"""
	layout_id: LayoutId
	slots: tuple[Item | None, ...]

	@property
	def capacity(self) -> int:
		return len(self.slots)

	@property
	def items(self) -> list[Item]:
		return [item for item in self.slots if item is not None]

	@property
	def empty_slots(self) -> int:
		return sum(1 for item in self.slots if item is None)


#============================================
def is_mixed_assignment(assignment: object) -> bool:
	"""
	True for a per-item assignment sequence, False for a single layout.
	"""
	if isinstance(assignment, (LayoutId, str, int)):
		return False
	return isinstance(assignment, collections.abc.Sequence)


#============================================
def resolve_assignment(assignment: object, item_count: int) -> list[LayoutId]:
	"""
	Expand a layout assignment into one LayoutId per item.

	Every value is validated before any page is built.

	Args:
		assignment: Single layout or a sequence with one layout per item.
		item_count: Number of items to place.

	Returns:
		List of LayoutId, one per item.
	"""
	if not is_mixed_assignment(assignment):
		layout_id = cpag.layouts.parse_layout_id(assignment)
		return [layout_id] * item_count
	values = list(assignment)
	if len(values) != item_count:
		raise AssignmentLengthMismatchError(len(values), item_count)
	return [cpag.layouts.parse_layout_id(value) for value in values]


#============================================
def _close_page(layout_id: LayoutId, page_items: list[Item]) -> PagePlan:
	capacity = cpag.layouts.capacity_of(layout_id)
	padding = [None] * (capacity - len(page_items))
	return PagePlan(layout_id=layout_id, slots=tuple(page_items + padding))


#============================================
def plan(items: collections.abc.Sequence, assignment: object) -> list[PagePlan]:
	"""
	Partition items into pages honoring each layout's capacity.

	A single layout chunks items into groups of its capacity. A per-item
	sequence starts each page with the layout of the first unplaced item
	and keeps filling while the following items share that layout; a
	layout change closes the page even when it has room left. Short pages
	are padded with empty slots. Items are never reordered or dropped.

	Args:
		items: Items in catalogue order.
		assignment: LayoutId (or parseable value) or one per item.

	Returns:
		List of PagePlan in order.
	"""
	item_list = list(items)
	layouts = resolve_assignment(assignment, len(item_list))

	pages: list[PagePlan] = []
	page_items: list[Item] = []
	page_layout: LayoutId | None = None
	for item, layout_id in zip(item_list, layouts):
		if page_layout is not None:
			full = len(page_items) >= cpag.layouts.capacity_of(page_layout)
			if full or layout_id is not page_layout:
				pages.append(_close_page(page_layout, page_items))
				page_items = []
				page_layout = None
		if page_layout is None:
			page_layout = layout_id
		page_items.append(item)
	if page_layout is not None:
		pages.append(_close_page(page_layout, page_items))
	return pages


#============================================
def count_pages(item_count: int, layout_id: object) -> int:
	"""
	Pages needed for item_count items at a single density.
	"""
	capacity = cpag.layouts.capacity_of(layout_id)
	return (item_count + capacity - 1) // capacity
