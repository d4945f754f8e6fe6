"""
Exception types raised by the pagination engine.
"""


class CatalogueError(ValueError):
	"""
	Base class for catalogue configuration and input errors.
	"""


class UnknownLayoutError(CatalogueError):
	"""
	Raised when a layout identifier is not one of the known densities.
	"""

	def __init__(self, value: object) -> None:
		self.value = value
		super().__init__(f"Unknown layout: {value!r}")


class AssignmentLengthMismatchError(CatalogueError):
	"""
	Raised when a mixed-mode assignment does not have one layout per item.
	"""

	def __init__(self, assignment_count: int, item_count: int) -> None:
		self.assignment_count = assignment_count
		self.item_count = item_count
		super().__init__(
			f"Layout assignments ({assignment_count}) must match item count ({item_count})"
		)


class ItemFormatError(CatalogueError):
	"""
	Raised when an input item record cannot be parsed.
	"""
