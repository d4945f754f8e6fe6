"""
Layout catalog: densities, page capacities and renderer size hints.
"""

# Standard Library
import dataclasses
import enum
import types

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.config
import catalogue_paginator.errors


UnknownLayoutError = cpag.errors.UnknownLayoutError

LAYOUT_CAPACITIES = cpag.config.LAYOUT_CAPACITIES
LAYOUT_GRIDS = cpag.config.LAYOUT_GRIDS
FONT_SIZES = cpag.config.FONT_SIZES
IMAGE_SIZES = cpag.config.IMAGE_SIZES


class LayoutId(enum.Enum):
	DENSITY_1 = "1"
	DENSITY_2 = "2"
	DENSITY_2_INTERNAL = "2-int"
	DENSITY_3 = "3"
	DENSITY_4 = "4"
	DENSITY_8 = "8"


@dataclasses.dataclass(frozen=True)
class LayoutSpec:
	layout_id: LayoutId
	capacity: int
	columns: int
	rows: int
	show_internals: bool
	font_sizes: types.MappingProxyType
	image_sizes: types.MappingProxyType


#============================================
def _size_tier(layout_id: LayoutId) -> int:
	"""
	Map a layout to the tier key used by the font and image tables.

	2-int shares the density-2 sizes.
	"""
	if layout_id is LayoutId.DENSITY_2_INTERNAL:
		return 2
	return int(layout_id.value)


#============================================
def _build_spec(layout_id: LayoutId) -> LayoutSpec:
	tier = _size_tier(layout_id)
	columns, rows = LAYOUT_GRIDS[layout_id.value]
	font_sizes = {role: sizes[tier] for role, sizes in FONT_SIZES.items()}
	image_sizes = {role: sizes[tier] for role, sizes in IMAGE_SIZES.items()}
	return LayoutSpec(
		layout_id=layout_id,
		capacity=LAYOUT_CAPACITIES[layout_id.value],
		columns=columns,
		rows=rows,
		show_internals=layout_id is LayoutId.DENSITY_2_INTERNAL,
		font_sizes=types.MappingProxyType(font_sizes),
		image_sizes=types.MappingProxyType(image_sizes),
	)


_CATALOG = types.MappingProxyType({layout_id: _build_spec(layout_id) for layout_id in LayoutId})


#============================================
def parse_layout_id(value: object) -> LayoutId:
	"""
	Resolve a layout identifier from its enum, string or integer form.

	Accepts "4", "4-up", 4, "2-int" and LayoutId members.

	Args:
		value: Raw layout value.

	Returns:
		LayoutId member.
	"""
	if isinstance(value, LayoutId):
		return value
	if isinstance(value, bool):
		raise UnknownLayoutError(value)
	if isinstance(value, int):
		text = str(value)
	elif isinstance(value, str):
		text = value.strip().lower()
		if text.endswith("-up"):
			text = text[:-3]
	else:
		raise UnknownLayoutError(value)
	for layout_id in LayoutId:
		if layout_id.value == text:
			return layout_id
	raise UnknownLayoutError(value)


#============================================
def get_layout_spec(layout_id: object) -> LayoutSpec:
	"""
	Look up the catalog entry for a layout.

	Args:
		layout_id: LayoutId or a value accepted by parse_layout_id.

	Returns:
		LayoutSpec.
	"""
	return _CATALOG[parse_layout_id(layout_id)]


#============================================
def capacity_of(layout_id: object) -> int:
	"""
	Number of item slots on one page of the given layout.

	Args:
		layout_id: LayoutId or a value accepted by parse_layout_id.

	Returns:
		Capacity, always at least 1.
	"""
	return get_layout_spec(layout_id).capacity


#============================================
def all_layout_ids() -> list[LayoutId]:
	return list(LayoutId)
