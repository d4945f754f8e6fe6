"""
EAN-13 symbol derivation from product identifiers.
"""

# Standard Library
import dataclasses

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.config


EAN13_PAYLOAD_DIGITS = cpag.config.EAN13_PAYLOAD_DIGITS
EAN13_DIGITS = cpag.config.EAN13_DIGITS


@dataclasses.dataclass(frozen=True)
class EncodedBarcode:
	"""
	Result of encoding one identifier.

	symbol is None when the identifier holds no digits at all; renderers
	treat that as "no barcode", not as a failure.
	"""
	raw: str
	source_digits: str
	symbol: str | None
	check_digit_added: bool

	@property
	def has_symbol(self) -> bool:
		return self.symbol is not None

	@property
	def checksum_verified(self) -> bool:
		if self.symbol is None:
			return False
		return is_valid_ean13(self.symbol)


#============================================
def normalize_digits(value: str | None) -> str:
	"""
	Strip every non-digit character.

	Args:
		value: Raw identifier.

	Returns:
		Digit-only string, possibly empty.
	"""
	if not value:
		return ""
	return "".join(char for char in value if "0" <= char <= "9")


#============================================
def compute_check_digit(payload: str) -> str:
	"""
	Compute the EAN-13 check digit for a 12 digit payload.

	Args:
		payload: Exactly 12 ASCII digits.

	Returns:
		Single check digit character.
	"""
	if len(payload) != EAN13_PAYLOAD_DIGITS or normalize_digits(payload) != payload:
		raise ValueError(f"EAN-13 payload must be 12 digits, got {payload!r}")
	total = 0
	for index, char in enumerate(payload):
		weight = 1 if index % 2 == 0 else 3
		total += int(char) * weight
	return str((10 - (total % 10)) % 10)


#============================================
def is_valid_ean13(symbol: str) -> bool:
	"""
	Check a 13 digit symbol against its own check digit.

	Args:
		symbol: Candidate symbol.

	Returns:
		True when the symbol is 13 digits with a matching check digit.
	"""
	if len(symbol) != EAN13_DIGITS or normalize_digits(symbol) != symbol:
		return False
	return compute_check_digit(symbol[:EAN13_PAYLOAD_DIGITS]) == symbol[-1]


#============================================
def encode(raw_identifier: str | None) -> EncodedBarcode:
	"""
	Derive an EAN-13 symbol from a product identifier.

	Twelve digits get a check digit appended. Shorter inputs are zero
	padded on the left to twelve digits first. Thirteen digits are kept
	as-is, and longer inputs are cut to their first thirteen digits without
	recomputing the check digit.

	Args:
		raw_identifier: Identifier such as an ISBN, SKU or handle.

	Returns:
		EncodedBarcode.
	"""
	raw = raw_identifier or ""
	digits = normalize_digits(raw)
	if not digits:
		return EncodedBarcode(raw=raw, source_digits="", symbol=None, check_digit_added=False)

	if len(digits) >= EAN13_DIGITS:
		symbol = digits[:EAN13_DIGITS]
		return EncodedBarcode(raw=raw, source_digits=digits, symbol=symbol, check_digit_added=False)

	payload = digits.rjust(EAN13_PAYLOAD_DIGITS, "0")
	symbol = payload + compute_check_digit(payload)
	return EncodedBarcode(raw=raw, source_digits=digits, symbol=symbol, check_digit_added=True)
