import json

import pytest

import catalogue_paginator.errors
import catalogue_paginator.items


ItemFormatError = catalogue_paginator.errors.ItemFormatError


#============================================
def test_item_from_dict_aliases() -> None:
	"""
	camelCase and snake_case keys map onto the same fields.
	"""
	item = catalogue_paginator.items.item_from_dict(
		{
			"title": "Harbour Atlas",
			"isbn13": "9780306406157",
			"authorBio": "Bio text",
			"pages": 320,
			"release_date": "2024-03-01",
			"imageUrl": "https://example.com/cover.jpg",
			"additionalImages": ["a.jpg", "b.jpg"],
			"tags": ["maps", "travel"],
		}
	)
	assert item.identifier == "9780306406157"
	assert item.author_bio == "Bio text"
	assert item.page_count == "320"
	assert item.release_date == "2024-03-01"
	assert item.image_url == "https://example.com/cover.jpg"
	assert item.additional_images == ("a.jpg", "b.jpg")
	assert item.tags == frozenset({"maps", "travel"})
	assert item.description is None


#============================================
def test_identifier_fallback_order() -> None:
	"""
	identifier wins over isbn13, sku and handle; blanks are skipped.
	"""
	item = catalogue_paginator.items.item_from_dict(
		{"title": "Card", "identifier": "  ", "sku": "SKU-1", "handle": "card"}
	)
	assert item.identifier == "SKU-1"
	item = catalogue_paginator.items.item_from_dict({"title": "Card", "handle": " gift-card "})
	assert item.identifier == "gift-card"


#============================================
@pytest.mark.parametrize(
	"record",
	[
		"not a record",
		{"identifier": "1"},
		{"title": "   ", "identifier": "1"},
		{"title": "No code"},
		{"title": "Bad list", "identifier": "1", "tags": "travel"},
		{"title": "Bad text", "identifier": "1", "description": ["a"]},
	],
)
def test_item_from_dict_rejects(record: object) -> None:
	"""
	Malformed records raise ItemFormatError.
	"""
	with pytest.raises(ItemFormatError):
		catalogue_paginator.items.item_from_dict(record, 3)


#============================================
def test_parse_request_object_and_list() -> None:
	"""
	Objects carry layout settings; bare lists are just items.
	"""
	request = catalogue_paginator.items.parse_request(
		{
			"items": [{"title": "A", "sku": "1"}, {"title": "B", "sku": "2"}],
			"layoutAssignments": ["2", "2"],
			"pageHeaders": ["Front"],
			"websiteName": "www.example.com",
			"title": "Spring",
		}
	)
	assert [item.title for item in request.items] == ["A", "B"]
	assert request.layout_assignments == ["2", "2"]
	assert request.page_headers == ["Front"]
	assert request.website_name == "www.example.com"
	assert request.title == "Spring"
	assert request.layout is None

	bare = catalogue_paginator.items.parse_request([{"title": "A", "sku": "1"}])
	assert len(bare.items) == 1
	assert bare.layout_assignments is None


#============================================
@pytest.mark.parametrize(
	"payload",
	[
		"items",
		{"layout": "1"},
		{"items": [], "layoutAssignments": "2"},
		{"items": [], "pageHeaders": "Front"},
	],
)
def test_parse_request_rejects(payload: object) -> None:
	"""
	Malformed documents raise ItemFormatError.
	"""
	with pytest.raises(ItemFormatError):
		catalogue_paginator.items.parse_request(payload)


#============================================
def test_load_request(tmp_path) -> None:
	"""
	Files load through parse_request; invalid JSON becomes ItemFormatError.
	"""
	path = tmp_path / "catalogue.json"
	path.write_text(json.dumps({"layout": "4", "items": [{"title": "A", "sku": "1"}]}), encoding="utf-8")
	request = catalogue_paginator.items.load_request(path)
	assert request.layout == "4"

	broken = tmp_path / "broken.json"
	broken.write_text("{", encoding="utf-8")
	with pytest.raises(ItemFormatError):
		catalogue_paginator.items.load_request(broken)


#============================================
def test_dedupe_keeps_first_occurrence() -> None:
	"""
	Repeated identifiers are dropped after their first appearance.
	"""
	items = [
		catalogue_paginator.items.Item(title=title, identifier=identifier)
		for title, identifier in [("A", "1"), ("B", "2"), ("A again", "1"), ("C", "3"), ("B again", "2")]
	]
	assert catalogue_paginator.items.first_occurrence_indices(items) == [0, 1, 3]
	assert [item.title for item in catalogue_paginator.items.dedupe_items(items)] == ["A", "B", "C"]
