"""
Character budget checks for free-text fields.

Each layout allots a fixed number of characters to an item description
(and, on single-item pages, to the author biography). The analyzer
classifies how far a field runs past that budget so a renderer can warn an
operator before export. It never shortens text itself; truncate_at_word is
the helper renderers use when they do cut.
"""

# Standard Library
import dataclasses
import enum

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.config
import catalogue_paginator.layouts


LayoutId = cpag.layouts.LayoutId

TRUNCATION_LIMITS = cpag.config.TRUNCATION_LIMITS
SEVERITY_MILD_MAX = cpag.config.SEVERITY_MILD_MAX
SEVERITY_MODERATE_MAX = cpag.config.SEVERITY_MODERATE_MAX
WORD_BREAK_MIN_INDEX = cpag.config.WORD_BREAK_MIN_INDEX
ELLIPSIS = cpag.config.ELLIPSIS


class TruncationField(enum.Enum):
	DESCRIPTION = "description"
	AUTHOR_BIO = "authorBio"


class Severity(enum.Enum):
	NONE = "none"
	MILD = "mild"
	MODERATE = "moderate"
	SEVERE = "severe"

	@property
	def rank(self) -> int:
		return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = (Severity.NONE, Severity.MILD, Severity.MODERATE, Severity.SEVERE)

# Item attribute holding each field
_ITEM_ATTRIBUTES = {
	TruncationField.DESCRIPTION: "description",
	TruncationField.AUTHOR_BIO: "author_bio",
}


@dataclasses.dataclass(frozen=True)
class TruncationVerdict:
	is_truncated: bool
	original_length: int
	limit: int
	truncated_length: int
	percent_over: float
	severity: Severity


NO_TEXT_VERDICT = TruncationVerdict(
	is_truncated=False,
	original_length=0,
	limit=0,
	truncated_length=0,
	percent_over=0.0,
	severity=Severity.NONE,
)


#============================================
def parse_field(field: object) -> TruncationField:
	if isinstance(field, TruncationField):
		return field
	for member in TruncationField:
		if member.value == field:
			return member
	raise ValueError(f"Unknown truncation field: {field!r}")


#============================================
def resolve_layout_key(layout_id: object, is_mixed_context: bool) -> str:
	"""
	Resolve the limit table key for a layout.

	Density-3 pages get a larger description budget inside a mixed
	catalogue than in a uniform density-3 catalogue. No other density
	depends on the mixed flag.

	Args:
		layout_id: Layout identifier.
		is_mixed_context: Whether the page belongs to a mixed catalogue.

	Returns:
		Key into TRUNCATION_LIMITS.
	"""
	layout = cpag.layouts.parse_layout_id(layout_id)
	if layout is LayoutId.DENSITY_3:
		if is_mixed_context:
			return "3-mixed"
		return "3-standalone"
	return layout.value


#============================================
def limit_for(layout_id: object, field: object, is_mixed_context: bool) -> int | None:
	"""
	Character limit for a field on a layout, or None when unconstrained.
	"""
	key = resolve_layout_key(layout_id, is_mixed_context)
	return TRUNCATION_LIMITS.get(key, {}).get(parse_field(field).value)


#============================================
def severity_for(percent_over: float) -> Severity:
	"""
	Band an overflow percentage into a severity.

	Upper bounds are inclusive: exactly 25% is mild, exactly 50% moderate.

	Args:
		percent_over: Percentage past the limit.

	Returns:
		Severity.
	"""
	if percent_over <= 0.0:
		return Severity.NONE
	if percent_over <= SEVERITY_MILD_MAX:
		return Severity.MILD
	if percent_over <= SEVERITY_MODERATE_MAX:
		return Severity.MODERATE
	return Severity.SEVERE


#============================================
def analyze(
	text: str | None,
	field: object,
	layout_id: object,
	is_mixed_context: bool = False,
) -> TruncationVerdict:
	"""
	Classify a text field against the layout's character budget.

	Args:
		text: Field text, possibly None or empty.
		field: TruncationField or its string value.
		layout_id: Layout identifier of the page.
		is_mixed_context: Whether the catalogue mixes densities.

	Returns:
		TruncationVerdict.
	"""
	limit = limit_for(layout_id, field, is_mixed_context)
	if not text or not text.strip():
		return NO_TEXT_VERDICT

	original_length = len(text)
	if not limit:
		return TruncationVerdict(
			is_truncated=False,
			original_length=original_length,
			limit=0,
			truncated_length=original_length,
			percent_over=0.0,
			severity=Severity.NONE,
		)

	is_truncated = original_length > limit
	percent_over = 0.0
	if is_truncated:
		percent_over = (original_length - limit) / limit * 100.0
	severity = Severity.NONE
	if is_truncated:
		severity = severity_for(percent_over)
	return TruncationVerdict(
		is_truncated=is_truncated,
		original_length=original_length,
		limit=limit,
		truncated_length=limit if is_truncated else original_length,
		percent_over=percent_over,
		severity=severity,
	)


#============================================
def item_truncations(
	item: object,
	layout_id: object,
	is_mixed_context: bool = False,
) -> dict[str, TruncationVerdict]:
	"""
	Analyze every constrained text field an item carries.

	Fields the item does not carry (None) get no entry.

	Args:
		item: Item with description and author_bio attributes.
		layout_id: Layout identifier of the page.
		is_mixed_context: Whether the catalogue mixes densities.

	Returns:
		Verdicts keyed by field value ("description", "authorBio").
	"""
	verdicts: dict[str, TruncationVerdict] = {}
	for field, attribute in _ITEM_ATTRIBUTES.items():
		text = getattr(item, attribute, None)
		if text is None:
			continue
		verdicts[field.value] = analyze(text, field, layout_id, is_mixed_context)
	return verdicts


#============================================
def has_truncation_issues(item: object, layout_id: object, is_mixed_context: bool = False) -> bool:
	verdicts = item_truncations(item, layout_id, is_mixed_context)
	return any(verdict.is_truncated for verdict in verdicts.values())


#============================================
def truncate_at_word(text: str | None, max_chars: int) -> str:
	"""
	Shorten text to a budget, preferring a word boundary.

	The cut moves back to the last space when that space lies past
	WORD_BREAK_MIN_INDEX; an ellipsis marks the cut.

	Args:
		text: Text to shorten.
		max_chars: Character budget.

	Returns:
		Original text when it fits, otherwise the shortened text.
	"""
	if not text or len(text) <= max_chars:
		return text or ""
	sliced = text[:max_chars]
	last_space = sliced.rfind(" ")
	if last_space > WORD_BREAK_MIN_INDEX:
		sliced = sliced[:last_space]
	return sliced.strip() + ELLIPSIS
