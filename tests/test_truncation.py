import pytest

import catalogue_paginator.errors
import catalogue_paginator.items
import catalogue_paginator.layouts
import catalogue_paginator.truncation


LayoutId = catalogue_paginator.layouts.LayoutId
Severity = catalogue_paginator.truncation.Severity
analyze = catalogue_paginator.truncation.analyze


#============================================
def test_exact_quarter_over_is_mild() -> None:
	"""
	1250 characters against a 1000 limit is 25% over, still mild.
	"""
	verdict = analyze("x" * 1250, "description", LayoutId.DENSITY_1, False)
	assert verdict.is_truncated
	assert verdict.original_length == 1250
	assert verdict.limit == 1000
	assert verdict.truncated_length == 1000
	assert verdict.percent_over == 25.0
	assert verdict.severity is Severity.MILD


#============================================
def test_severity_band_edges() -> None:
	"""
	Upper bounds of each band are inclusive.
	"""
	cases = [
		(1000, Severity.NONE),
		(1001, Severity.MILD),
		(1251, Severity.MODERATE),
		(1500, Severity.MODERATE),
		(1501, Severity.SEVERE),
		(5000, Severity.SEVERE),
	]
	for length, expected in cases:
		verdict = analyze("x" * length, "description", LayoutId.DENSITY_1)
		assert verdict.severity is expected, length


#============================================
def test_truncated_iff_longer_than_limit_and_monotone() -> None:
	"""
	Across a length sweep, truncation tracks the limit and severity never drops.
	"""
	for layout_id in catalogue_paginator.layouts.all_layout_ids():
		limit = catalogue_paginator.truncation.limit_for(layout_id, "description", False)
		previous_rank = 0
		for length in range(1, limit * 2 + 50, 7):
			verdict = analyze("y" * length, "description", layout_id, False)
			assert verdict.is_truncated == (length > limit)
			assert verdict.severity.rank >= previous_rank
			previous_rank = verdict.severity.rank


#============================================
def test_density_three_limit_depends_on_mixed_context() -> None:
	"""
	Mixed catalogues allow 1397 description characters on density-3 pages.
	"""
	text = "z" * 1200
	mixed = analyze(text, "description", LayoutId.DENSITY_3, True)
	standalone = analyze(text, "description", LayoutId.DENSITY_3, False)
	assert mixed.limit == 1397
	assert not mixed.is_truncated
	assert standalone.limit == 997
	assert standalone.is_truncated
	assert standalone.severity is Severity.MILD


#============================================
def test_other_densities_ignore_mixed_context() -> None:
	"""
	Only density-3 looks at the mixed flag.
	"""
	text = "q" * 1100
	for layout_id in (LayoutId.DENSITY_1, LayoutId.DENSITY_2, LayoutId.DENSITY_2_INTERNAL, LayoutId.DENSITY_4, LayoutId.DENSITY_8):
		assert analyze(text, "description", layout_id, True) == analyze(text, "description", layout_id, False)


#============================================
def test_limit_table() -> None:
	"""
	Check every configured budget.
	"""
	limit_for = catalogue_paginator.truncation.limit_for
	assert limit_for("1", "description", False) == 1000
	assert limit_for("1", "authorBio", False) == 752
	assert limit_for("2", "description", False) == 997
	assert limit_for("2-int", "description", False) == 997
	assert limit_for("4", "description", False) == 947
	assert limit_for("8", "description", False) == 997
	for layout in ("2", "2-int", "3", "4", "8"):
		assert limit_for(layout, "authorBio", True) is None


#============================================
def test_unconstrained_field_is_none() -> None:
	"""
	An author bio on a multi-item page has no budget.
	"""
	verdict = analyze("b" * 5000, "authorBio", LayoutId.DENSITY_2)
	assert not verdict.is_truncated
	assert verdict.limit == 0
	assert verdict.original_length == 5000
	assert verdict.severity is Severity.NONE


#============================================
def test_empty_text_is_none() -> None:
	"""
	Absent, empty and whitespace-only text fold into a zero verdict.
	"""
	for text in (None, "", "   \n"):
		verdict = analyze(text, "authorBio", LayoutId.DENSITY_1)
		assert verdict == catalogue_paginator.truncation.NO_TEXT_VERDICT


#============================================
def test_bad_field_and_layout_raise() -> None:
	"""
	Unknown fields and layouts are configuration errors.
	"""
	with pytest.raises(ValueError):
		analyze("text", "summary", LayoutId.DENSITY_1)
	with pytest.raises(catalogue_paginator.errors.UnknownLayoutError):
		analyze("text", "description", "6-up")


#============================================
def test_item_truncations_skip_absent_fields() -> None:
	"""
	Only fields the item carries are reported.
	"""
	item = catalogue_paginator.items.Item(title="T", identifier="1", description="d" * 1300)
	verdicts = catalogue_paginator.truncation.item_truncations(item, LayoutId.DENSITY_1)
	assert list(verdicts) == ["description"]
	assert verdicts["description"].severity is Severity.MODERATE
	assert catalogue_paginator.truncation.has_truncation_issues(item, LayoutId.DENSITY_1)

	short = catalogue_paginator.items.Item(title="T", identifier="1", description="ok", author_bio="")
	verdicts = catalogue_paginator.truncation.item_truncations(short, LayoutId.DENSITY_1)
	assert set(verdicts) == {"description", "authorBio"}
	assert not catalogue_paginator.truncation.has_truncation_issues(short, LayoutId.DENSITY_1)


#============================================
def test_truncate_at_word() -> None:
	"""
	Cuts prefer the last space past character 40.
	"""
	truncate_at_word = catalogue_paginator.truncation.truncate_at_word
	assert truncate_at_word("short", 50) == "short"
	assert truncate_at_word(None, 50) == ""
	assert truncate_at_word("word " * 30, 50) == " ".join(["word"] * 10) + "…"
	assert truncate_at_word("a" * 100, 50) == "a" * 50 + "…"
	# space before index 40 is not used as the break
	assert truncate_at_word("ab " + "c" * 100, 50) == ("ab " + "c" * 100)[:50] + "…"
