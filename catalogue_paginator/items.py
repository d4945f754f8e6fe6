"""
Product item records and JSON input loading.
"""

# Standard Library
import dataclasses
import json
import pathlib

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.errors


ItemFormatError = cpag.errors.ItemFormatError

IDENTIFIER_KEYS = ("identifier", "isbn13", "sku", "handle")

# input key -> Item field
FIELD_ALIASES = {
	"subtitle": "subtitle",
	"description": "description",
	"author": "author",
	"authorBio": "author_bio",
	"author_bio": "author_bio",
	"price": "price",
	"binding": "binding",
	"pages": "page_count",
	"pageCount": "page_count",
	"page_count": "page_count",
	"imprint": "imprint",
	"dimensions": "dimensions",
	"releaseDate": "release_date",
	"release_date": "release_date",
	"weight": "weight",
	"illustrations": "illustrations",
	"edition": "edition",
	"imageUrl": "image_url",
	"image_url": "image_url",
	"vendor": "vendor",
}


@dataclasses.dataclass(frozen=True)
class Item:
	title: str
	identifier: str
	subtitle: str | None = None
	description: str | None = None
	author: str | None = None
	author_bio: str | None = None
	price: str | None = None
	binding: str | None = None
	page_count: str | None = None
	imprint: str | None = None
	dimensions: str | None = None
	release_date: str | None = None
	weight: str | None = None
	illustrations: str | None = None
	edition: str | None = None
	image_url: str | None = None
	additional_images: tuple[str, ...] = ()
	vendor: str | None = None
	tags: frozenset[str] = frozenset()


#============================================
def _optional_text(value: object) -> str | None:
	if value is None:
		return None
	if isinstance(value, (int, float)) and not isinstance(value, bool):
		return str(value)
	if isinstance(value, str):
		return value
	raise ItemFormatError(f"Expected text value, got {type(value).__name__}")


#============================================
def item_from_dict(data: dict, position: int = 0) -> Item:
	"""
	Build an Item from a product record dictionary.

	Args:
		data: Record using camelCase or snake_case keys.
		position: Index of the record in its input, for error messages.

	Returns:
		Item.
	"""
	if not isinstance(data, dict):
		raise ItemFormatError(f"Item {position}: expected an object")
	title = _optional_text(data.get("title"))
	if not title or not title.strip():
		raise ItemFormatError(f"Item {position}: missing title")

	identifier = None
	for key in IDENTIFIER_KEYS:
		candidate = _optional_text(data.get(key))
		if candidate and candidate.strip():
			identifier = candidate.strip()
			break
	if identifier is None:
		raise ItemFormatError(f"Item {position}: missing identifier ({', '.join(IDENTIFIER_KEYS)})")

	fields: dict[str, object] = {}
	for key, field_name in FIELD_ALIASES.items():
		if key in data and field_name not in fields:
			fields[field_name] = _optional_text(data[key])

	additional = data.get("additionalImages", data.get("additional_images")) or []
	tags = data.get("tags") or []
	if not isinstance(additional, list) or not isinstance(tags, list):
		raise ItemFormatError(f"Item {position}: additionalImages and tags must be lists")

	return Item(
		title=title,
		identifier=identifier,
		additional_images=tuple(str(url) for url in additional),
		tags=frozenset(str(tag) for tag in tags),
		**fields,
	)


@dataclasses.dataclass
class CatalogueRequest:
	items: list[Item]
	layout: str | int | None
	layout_assignments: list | None
	page_headers: list | None
	website_name: str | None
	title: str | None


#============================================
def parse_request(payload: object) -> CatalogueRequest:
	"""
	Parse a decoded JSON document into a catalogue request.

	A bare list is treated as the item list with no layout settings.

	Args:
		payload: Decoded JSON value.

	Returns:
		CatalogueRequest.
	"""
	if isinstance(payload, list):
		payload = {"items": payload}
	if not isinstance(payload, dict):
		raise ItemFormatError("Input must be a list of items or an object with an items list")
	raw_items = payload.get("items")
	if not isinstance(raw_items, list):
		raise ItemFormatError("Input object has no items list")
	items = [item_from_dict(entry, position) for position, entry in enumerate(raw_items)]

	assignments = payload.get("layoutAssignments")
	if assignments is not None and not isinstance(assignments, list):
		raise ItemFormatError("layoutAssignments must be a list")
	headers = payload.get("pageHeaders")
	if headers is not None and not isinstance(headers, list):
		raise ItemFormatError("pageHeaders must be a list")

	return CatalogueRequest(
		items=items,
		layout=payload.get("layout"),
		layout_assignments=assignments,
		page_headers=headers,
		website_name=payload.get("websiteName"),
		title=payload.get("title"),
	)


#============================================
def load_request(path: pathlib.Path) -> CatalogueRequest:
	"""
	Load a catalogue request from a JSON file.

	Args:
		path: Input JSON path.

	Returns:
		CatalogueRequest.
	"""
	text = path.read_text(encoding="utf-8")
	try:
		payload = json.loads(text)
	except json.JSONDecodeError as error:
		raise ItemFormatError(f"{path}: invalid JSON ({error})") from error
	return parse_request(payload)


#============================================
def first_occurrence_indices(items: list[Item]) -> list[int]:
	"""
	Indices of the first item for each identifier, in order.

	Args:
		items: Items in catalogue order.

	Returns:
		Sorted list of kept indices.
	"""
	seen: set[str] = set()
	kept: list[int] = []
	for index, item in enumerate(items):
		if item.identifier in seen:
			continue
		seen.add(item.identifier)
		kept.append(index)
	return kept


#============================================
def dedupe_items(items: list[Item]) -> list[Item]:
	"""
	Drop repeated identifiers, keeping the first occurrence in order.

	Args:
		items: Items in catalogue order.

	Returns:
		Deduplicated items.
	"""
	return [items[index] for index in first_occurrence_indices(items)]
