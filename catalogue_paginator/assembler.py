"""
Catalogue assembly: planned pages plus per-item barcode and truncation data.
"""

# Standard Library
import collections.abc
import dataclasses
import types

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.barcode
import catalogue_paginator.items
import catalogue_paginator.layouts
import catalogue_paginator.planner
import catalogue_paginator.truncation


Item = cpag.items.Item
LayoutId = cpag.layouts.LayoutId
EncodedBarcode = cpag.barcode.EncodedBarcode
TruncationVerdict = cpag.truncation.TruncationVerdict
TruncationField = cpag.truncation.TruncationField
Severity = cpag.truncation.Severity

is_mixed_assignment = cpag.planner.is_mixed_assignment


@dataclasses.dataclass(frozen=True)
class AnnotatedItem:
	item: Item
	barcode: EncodedBarcode
	truncation: types.MappingProxyType

	@property
	def barcode_symbol(self) -> str | None:
		return self.barcode.symbol

	@property
	def worst_severity(self) -> Severity:
		worst = Severity.NONE
		for verdict in self.truncation.values():
			if verdict.severity.rank > worst.rank:
				worst = verdict.severity
		return worst


@dataclasses.dataclass(frozen=True)
class PageDescriptor:
	page_number: int
	layout_id: LayoutId
	slots: tuple[AnnotatedItem | None, ...]
	header: str | None = None

	@property
	def capacity(self) -> int:
		return len(self.slots)

	@property
	def items(self) -> list[AnnotatedItem]:
		return [slot for slot in self.slots if slot is not None]


@dataclasses.dataclass(frozen=True)
class TruncationWarning:
	page_number: int
	slot_index: int
	identifier: str
	title: str
	field: str
	verdict: TruncationVerdict

	def describe(self) -> str:
		return (
			f"Page {self.page_number} slot {self.slot_index + 1}: {self.field} of "
			f"'{self.title}' ({self.identifier}) is {self.verdict.original_length} chars, "
			f"limit {self.verdict.limit} ({self.verdict.percent_over:.1f}% over, "
			f"{self.verdict.severity.value})"
		)


@dataclasses.dataclass
class AssemblySummary:
	pages: int
	placed_items: int
	empty_slots: int
	items_without_symbol: int
	pages_by_layout: dict[str, int]
	warnings_by_severity: dict[str, int]


#============================================
def annotate_item(item: Item, layout_id: LayoutId, is_mixed_context: bool) -> AnnotatedItem:
	"""
	Attach barcode data and truncation verdicts to one item.

	Both the description and the author biography are always analyzed, so
	absent fields show up as "none" verdicts rather than missing keys.

	Args:
		item: Item to annotate.
		layout_id: Layout of the page holding the item.
		is_mixed_context: Whether the catalogue mixes densities.

	Returns:
		AnnotatedItem.
	"""
	verdicts = {
		TruncationField.DESCRIPTION.value: cpag.truncation.analyze(
			item.description, TruncationField.DESCRIPTION, layout_id, is_mixed_context,
		),
		TruncationField.AUTHOR_BIO.value: cpag.truncation.analyze(
			item.author_bio, TruncationField.AUTHOR_BIO, layout_id, is_mixed_context,
		),
	}
	return AnnotatedItem(
		item=item,
		barcode=cpag.barcode.encode(item.identifier),
		truncation=types.MappingProxyType(verdicts),
	)


#============================================
def _page_header(
	page_index: int,
	page_headers: collections.abc.Sequence | None,
	default_header: str | None,
) -> str | None:
	if page_headers is not None and page_index < len(page_headers):
		header = page_headers[page_index]
		if header:
			return str(header)
	return default_header


#============================================
def assemble(
	items: collections.abc.Sequence,
	assignment: object,
	is_mixed_context: bool = False,
	page_headers: collections.abc.Sequence | None = None,
	default_header: str | None = None,
) -> list[PageDescriptor]:
	"""
	Plan pages and annotate every placed item.

	Configuration errors from planning propagate before any page is
	annotated, so callers never get a partial catalogue.

	Args:
		items: Items in catalogue order.
		assignment: Single layout or one layout per item.
		is_mixed_context: Whether the catalogue mixes densities.
		page_headers: Optional banner text per page index.
		default_header: Banner text for pages without their own header.

	Returns:
		List of PageDescriptor in order.
	"""
	plans = cpag.planner.plan(items, assignment)
	pages: list[PageDescriptor] = []
	for page_index, page_plan in enumerate(plans):
		slots: list[AnnotatedItem | None] = []
		for item in page_plan.slots:
			if item is None:
				slots.append(None)
				continue
			slots.append(annotate_item(item, page_plan.layout_id, is_mixed_context))
		pages.append(
			PageDescriptor(
				page_number=page_index + 1,
				layout_id=page_plan.layout_id,
				slots=tuple(slots),
				header=_page_header(page_index, page_headers, default_header),
			)
		)
	return pages


#============================================
def collect_truncation_warnings(
	pages: list[PageDescriptor],
	min_severity: Severity = Severity.MILD,
) -> list[TruncationWarning]:
	"""
	Gather verdicts at or above a severity for operator review.

	Args:
		pages: Assembled pages.
		min_severity: Lowest severity to report.

	Returns:
		Warnings in page and slot order.
	"""
	warnings: list[TruncationWarning] = []
	for page in pages:
		for slot_index, annotated in enumerate(page.slots):
			if annotated is None:
				continue
			for field, verdict in annotated.truncation.items():
				if not verdict.is_truncated or verdict.severity.rank < min_severity.rank:
					continue
				warnings.append(
					TruncationWarning(
						page_number=page.page_number,
						slot_index=slot_index,
						identifier=annotated.item.identifier,
						title=annotated.item.title,
						field=field,
						verdict=verdict,
					)
				)
	return warnings


#============================================
def summarize_pages(pages: list[PageDescriptor]) -> AssemblySummary:
	pages_by_layout: dict[str, int] = {}
	warnings_by_severity: dict[str, int] = {}
	placed_items = 0
	empty_slots = 0
	without_symbol = 0
	for page in pages:
		key = page.layout_id.value
		pages_by_layout[key] = pages_by_layout.get(key, 0) + 1
		for annotated in page.slots:
			if annotated is None:
				empty_slots += 1
				continue
			placed_items += 1
			if not annotated.barcode.has_symbol:
				without_symbol += 1
	for warning in collect_truncation_warnings(pages):
		key = warning.verdict.severity.value
		warnings_by_severity[key] = warnings_by_severity.get(key, 0) + 1
	return AssemblySummary(
		pages=len(pages),
		placed_items=placed_items,
		empty_slots=empty_slots,
		items_without_symbol=without_symbol,
		pages_by_layout=pages_by_layout,
		warnings_by_severity=warnings_by_severity,
	)
