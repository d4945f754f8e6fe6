"""
Proof rendering of assembled pages and manifest output.

One renderer serves every density: cell grids, font sizes and image boxes
all come from the layout catalog.
"""

# Standard Library
import io
import json
import pathlib

# PIP3 modules
import PIL.Image
import pypdf
import reportlab.graphics.barcode
import reportlab.graphics.renderPDF
import reportlab.lib.pagesizes
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.assembler
import catalogue_paginator.config
import catalogue_paginator.layouts
import catalogue_paginator.truncation


AnnotatedItem = cpag.assembler.AnnotatedItem
PageDescriptor = cpag.assembler.PageDescriptor
AssemblySummary = cpag.assembler.AssemblySummary
LayoutSpec = cpag.layouts.LayoutSpec
Severity = cpag.truncation.Severity
ProofConfig = cpag.config.ProofConfig
ProofResult = cpag.config.ProofResult

DEFAULT_WEBSITE_NAME = cpag.config.DEFAULT_WEBSITE_NAME
DEFAULT_FONT_REGULAR = cpag.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = cpag.config.DEFAULT_FONT_BOLD
DEFAULT_FONT_ITALIC = cpag.config.DEFAULT_FONT_ITALIC
BANNER_HEIGHT = cpag.config.BANNER_HEIGHT
BANNER_TEXT_SIZE = cpag.config.BANNER_TEXT_SIZE
FALLBACK_TEXT_SIZE = cpag.config.FALLBACK_TEXT_SIZE
WARNING_MARK_SIZE = cpag.config.WARNING_MARK_SIZE
PROGRESS_BAR_WIDTH = cpag.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = cpag.config.PROGRESS_UPDATE_EVERY
COVER_IMAGE_SUFFIXES = cpag.config.COVER_IMAGE_SUFFIXES

MIN_TEXT_COLUMN = 40.0


#============================================
def compute_align_offset(available: float, scaled: float, align: str) -> float:
	"""
	Compute an alignment offset.

	Args:
		available: Available dimension.
		scaled: Scaled dimension.
		align: Alignment string.

	Returns:
		Offset in points.
	"""
	normalized = align.strip().upper()
	if normalized in ("LEFT", "BOTTOM"):
		return 0.0
	if normalized in ("RIGHT", "TOP"):
		return max(0.0, available - scaled)
	return max(0.0, (available - scaled) / 2.0)


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	red = int(value[1:3], 16) / 255.0
	green = int(value[3:5], 16) / 255.0
	blue = int(value[5:7], 16) / 255.0
	return (red, green, blue)


#============================================
def compute_cell_box(
	spec: LayoutSpec,
	config: ProofConfig,
	slot: int,
) -> tuple[float, float, float, float]:
	"""
	Compute the box for one slot of a page.

	Slots fill rows left to right, top row first.

	Args:
		spec: Layout catalog entry.
		config: Proof configuration.
		slot: Slot index on the page.

	Returns:
		Tuple of (x, y, width, height) with y at the bottom edge.
	"""
	page_width, page_height = reportlab.lib.pagesizes.letter
	content_left = config.left_margin
	content_width = page_width - 2.0 * config.left_margin
	content_top = page_height - config.top_margin - BANNER_HEIGHT - config.gutter
	content_bottom = config.top_margin + BANNER_HEIGHT + config.gutter
	content_height = content_top - content_bottom

	cell_width = (content_width - config.gutter * (spec.columns - 1)) / spec.columns
	cell_height = (content_height - config.gutter * (spec.rows - 1)) / spec.rows
	row = slot // spec.columns
	col = slot % spec.columns
	cell_x = content_left + col * (cell_width + config.gutter)
	cell_y = content_top - cell_height - row * (cell_height + config.gutter)
	return (cell_x, cell_y, cell_width, cell_height)


#============================================
def build_cover_cache(
	image_dir: pathlib.Path | None,
	identifiers: list[str],
) -> tuple[dict[str, reportlab.lib.utils.ImageReader], list[str]]:
	"""
	Load local cover images named after item identifiers.

	Args:
		image_dir: Directory holding <identifier>.jpg/.png files, or None.
		identifiers: Identifiers to look up.

	Returns:
		Tuple of (ImageReader by identifier, messages for unreadable files).
	"""
	cache: dict[str, reportlab.lib.utils.ImageReader] = {}
	messages: list[str] = []
	if image_dir is None:
		return cache, messages
	for identifier in identifiers:
		if identifier in cache:
			continue
		for suffix in COVER_IMAGE_SUFFIXES:
			path = image_dir / f"{identifier}{suffix}"
			if not path.is_file():
				continue
			try:
				image = PIL.Image.open(path)
				image.load()
			except (OSError, PIL.UnidentifiedImageError) as error:
				messages.append(f"Unreadable cover image {path.name}: {error}")
				break
			if image.mode not in ("RGB", "L"):
				image = image.convert("RGB")
			cache[identifier] = reportlab.lib.utils.ImageReader(image)
			break
	return cache, messages


#============================================
def draw_banner(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: str,
	y: float,
	config: ProofConfig,
) -> None:
	"""
	Draw a full-width colored banner with centered text.

	Args:
		pdf: ReportLab canvas.
		text: Banner text.
		y: Bottom edge of the banner.
		config: Proof configuration.
	"""
	page_width, _page_height = reportlab.lib.pagesizes.letter
	color = parse_hex_color(config.banner_color)
	pdf.setFillColorRGB(color[0], color[1], color[2])
	pdf.rect(0.0, y, page_width, BANNER_HEIGHT, stroke=0, fill=1)
	pdf.setFillColorRGB(1.0, 1.0, 1.0)
	pdf.setFont(DEFAULT_FONT_BOLD, BANNER_TEXT_SIZE)
	text_y = y + (BANNER_HEIGHT - BANNER_TEXT_SIZE) / 2.0 + 2.0
	pdf.drawCentredString(page_width / 2.0, text_y, text)


#============================================
def draw_empty_slot(
	pdf: reportlab.pdfgen.canvas.Canvas,
	box: tuple[float, float, float, float],
) -> None:
	"""
	Draw the blank placeholder for an unused slot.
	"""
	pdf.setLineWidth(0.3)
	pdf.setStrokeColorRGB(0.8, 0.8, 0.8)
	pdf.setDash(3, 3)
	pdf.rect(box[0], box[1], box[2], box[3], stroke=1, fill=0)
	pdf.setDash()


#============================================
def draw_text_lines(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: str,
	x: float,
	top: float,
	width: float,
	bottom: float,
	font_name: str,
	font_size: float,
) -> float:
	"""
	Draw wrapped text downward from top, stopping at bottom.

	Args:
		pdf: ReportLab canvas.
		text: Text to draw.
		x: Left edge.
		top: Top edge.
		width: Wrap width.
		bottom: Lowest allowed baseline.
		font_name: ReportLab font name.
		font_size: Font size in points.

	Returns:
		Top edge for the next block.
	"""
	leading = font_size * 1.2
	pdf.setFont(font_name, font_size)
	y = top
	for paragraph in text.splitlines() or [text]:
		for line in reportlab.lib.utils.simpleSplit(paragraph, font_name, font_size, width):
			if y - font_size < bottom:
				return y
			pdf.drawString(x, y - font_size, line)
			y -= leading
	return y


#============================================
def draw_barcode(
	pdf: reportlab.pdfgen.canvas.Canvas,
	annotated: AnnotatedItem,
	x: float,
	y: float,
	width: float,
	height: float,
) -> bool:
	"""
	Draw the EAN-13 symbol, or its digits as text when it cannot be drawn.

	The barcode widget recomputes the check digit from the first twelve
	digits, so symbols with a foreign check digit are shown as text.

	Args:
		pdf: ReportLab canvas.
		annotated: Annotated item.
		x: Left edge.
		y: Bottom edge.
		width: Barcode box width.
		height: Barcode box height.

	Returns:
		True when a scannable symbol was drawn.
	"""
	barcode = annotated.barcode
	if barcode.symbol is not None and barcode.checksum_verified:
		drawing = reportlab.graphics.barcode.createBarcodeDrawing(
			"EAN13",
			value=barcode.symbol[:12],
			width=width,
			height=height,
			humanReadable=True,
		)
		reportlab.graphics.renderPDF.draw(drawing, pdf, x, y)
		return True

	fallback = barcode.symbol or f"SKU: {annotated.item.identifier}"
	pdf.setFillColorRGB(0.6, 0.6, 0.6)
	pdf.setFont(DEFAULT_FONT_REGULAR, FALLBACK_TEXT_SIZE)
	pdf.drawString(x, y + height / 2.0, fallback)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	return False


#============================================
def draw_image_box(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image_reader: reportlab.lib.utils.ImageReader | None,
	x: float,
	y: float,
	width: float,
	height: float,
	label: str,
) -> bool:
	"""
	Draw an image fitted into a box, or a gray placeholder.

	Returns:
		True when an image was drawn.
	"""
	if image_reader is None:
		pdf.setFillColorRGB(0.94, 0.96, 0.97)
		pdf.rect(x, y, width, height, stroke=0, fill=1)
		pdf.setFillColorRGB(0.6, 0.6, 0.6)
		pdf.setFont(DEFAULT_FONT_ITALIC, FALLBACK_TEXT_SIZE)
		pdf.drawCentredString(x + width / 2.0, y + height / 2.0, label)
		pdf.setFillColorRGB(0.0, 0.0, 0.0)
		return False

	image_width, image_height = image_reader.getSize()
	scale = min(width / image_width, height / image_height)
	draw_width = image_width * scale
	draw_height = image_height * scale
	offset_x = compute_align_offset(width, draw_width, "CENTER")
	offset_y = compute_align_offset(height, draw_height, "TOP")
	pdf.drawImage(
		image_reader,
		x + offset_x,
		y + offset_y,
		width=draw_width,
		height=draw_height,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)
	return True


#============================================
def build_details_line(annotated: AnnotatedItem) -> str:
	item = annotated.item
	parts: list[str] = []
	if item.binding:
		parts.append(item.binding)
	if item.page_count:
		parts.append(f"{item.page_count} pages")
	if item.dimensions:
		parts.append(item.dimensions)
	if item.edition:
		parts.append(f"Edition: {item.edition}")
	return " • ".join(parts)


#============================================
def draw_item_cell(
	pdf: reportlab.pdfgen.canvas.Canvas,
	annotated: AnnotatedItem,
	box: tuple[float, float, float, float],
	spec: LayoutSpec,
	config: ProofConfig,
	cover_cache: dict[str, reportlab.lib.utils.ImageReader],
) -> dict[str, bool]:
	"""
	Draw one product card inside its slot.

	Args:
		pdf: ReportLab canvas.
		annotated: Annotated item for the slot.
		box: Slot box (x, y, width, height).
		spec: Layout catalog entry for the page.
		config: Proof configuration.
		cover_cache: Cover images by identifier.

	Returns:
		Flags for what was drawn: barcode, image, flagged.
	"""
	item = annotated.item
	cell_x, cell_y, cell_width, cell_height = box
	pad = config.cell_padding
	inner_x = cell_x + pad
	inner_top = cell_y + cell_height - pad
	inner_width = cell_width - 2.0 * pad
	inner_height = cell_height - 2.0 * pad

	# barcode box anchored bottom-left
	barcode_width, barcode_height = spec.image_sizes["barcode"]
	barcode_scale = min(1.0, inner_width / barcode_width)
	barcode_width *= barcode_scale
	barcode_height *= barcode_scale
	barcode_y = cell_y + pad
	text_bottom = barcode_y + barcode_height + pad

	# product image box anchored top-left
	image_width, image_height = spec.image_sizes["product"]
	image_scale = min(1.0, inner_width * 0.4 / image_width, inner_height * 0.6 / image_height)
	image_width *= image_scale
	image_height *= image_scale
	image_y = inner_top - image_height
	image_drawn = draw_image_box(
		pdf,
		cover_cache.get(item.identifier),
		inner_x,
		image_y,
		image_width,
		image_height,
		"No image",
	)

	if spec.show_internals and item.additional_images:
		internal_width, internal_height = spec.image_sizes["internals"]
		internal_y = image_y - pad - internal_height
		if internal_y >= text_bottom:
			draw_image_box(pdf, None, inner_x, internal_y, internal_width, internal_height, "Internal")

	text_x = inner_x + image_width + pad
	text_width = inner_x + inner_width - text_x
	text_top = inner_top
	if text_width < MIN_TEXT_COLUMN:
		text_x = inner_x
		text_width = inner_width
		text_top = image_y - pad

	fonts = spec.font_sizes
	pdf.setFillColorRGB(0.1, 0.17, 0.42)
	y = draw_text_lines(pdf, item.title, text_x, text_top, text_width, text_bottom, DEFAULT_FONT_BOLD, fonts["title"])
	pdf.setFillColorRGB(0.4, 0.44, 0.57)
	if item.subtitle:
		y = draw_text_lines(pdf, item.subtitle, text_x, y, text_width, text_bottom, DEFAULT_FONT_REGULAR, fonts["subtitle"])
	if item.author:
		y = draw_text_lines(pdf, f"By {item.author}", text_x, y, text_width, text_bottom, DEFAULT_FONT_REGULAR, fonts["author"])
	details = build_details_line(annotated)
	if details:
		y = draw_text_lines(pdf, details, text_x, y, text_width, text_bottom, DEFAULT_FONT_REGULAR, fonts["details"])
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	if item.price:
		y = draw_text_lines(pdf, f"AUD$ {item.price}", text_x, y, text_width, text_bottom, DEFAULT_FONT_BOLD, fonts["price"])
	description_verdict = annotated.truncation.get("description")
	if item.description and description_verdict is not None:
		description = item.description
		if description_verdict.is_truncated:
			description = cpag.truncation.truncate_at_word(description, description_verdict.limit)
		y = draw_text_lines(pdf, description, text_x, y, text_width, text_bottom, DEFAULT_FONT_REGULAR, fonts["description"])

	barcode_drawn = draw_barcode(pdf, annotated, inner_x, barcode_y, barcode_width, barcode_height)

	flagged = False
	worst = annotated.worst_severity
	if config.show_warnings and worst is not Severity.NONE:
		flagged = True
		pdf.setFillColorRGB(0.85, 0.1, 0.1)
		pdf.setFont(DEFAULT_FONT_BOLD, WARNING_MARK_SIZE)
		pdf.drawRightString(
			cell_x + cell_width - 2.0,
			cell_y + cell_height - WARNING_MARK_SIZE - 1.0,
			f"! {worst.value}",
		)
		pdf.setFillColorRGB(0.0, 0.0, 0.0)

	if config.draw_outlines:
		pdf.setLineWidth(0.3)
		pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
		pdf.rect(cell_x, cell_y, cell_width, cell_height, stroke=1, fill=0)

	return {"barcode": barcode_drawn, "image": image_drawn, "flagged": flagged}


#============================================
def render_proof_pdf(
	pages: list[PageDescriptor],
	output_path: pathlib.Path,
	config: ProofConfig,
) -> ProofResult:
	"""
	Render assembled pages to a proof PDF.

	Every page gets exactly capacity cells; empty slots are drawn as blank
	placeholders.

	Args:
		pages: Assembled page descriptors.
		output_path: Output PDF path.
		config: Proof configuration.

	Returns:
		ProofResult.
	"""
	identifiers = [slot.item.identifier for page in pages for slot in page.items]
	image_dir = pathlib.Path(config.image_dir) if config.image_dir else None
	cover_cache, image_messages = build_cover_cache(image_dir, identifiers)
	for message in image_messages:
		print(message)

	page_width, page_height = reportlab.lib.pagesizes.letter
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))

	placed_items = 0
	empty_slots = 0
	barcodes_drawn = 0
	barcode_fallbacks = 0
	images_drawn = 0
	flagged_cells = 0
	total = len(pages)
	if total > 0:
		print_progress("Pages", 0, total)
	for index, page in enumerate(pages, start=1):
		spec = cpag.layouts.get_layout_spec(page.layout_id)
		header = page.header or DEFAULT_WEBSITE_NAME
		draw_banner(pdf, header, page_height - config.top_margin - BANNER_HEIGHT, config)
		draw_banner(pdf, header, config.top_margin, config)
		for slot, annotated in enumerate(page.slots):
			box = compute_cell_box(spec, config, slot)
			if annotated is None:
				empty_slots += 1
				draw_empty_slot(pdf, box)
				continue
			placed_items += 1
			flags = draw_item_cell(pdf, annotated, box, spec, config, cover_cache)
			if flags["barcode"]:
				barcodes_drawn += 1
			else:
				barcode_fallbacks += 1
			if flags["image"]:
				images_drawn += 1
			if flags["flagged"]:
				flagged_cells += 1
		pdf.showPage()
		if index % PROGRESS_UPDATE_EVERY == 0 or index == total:
			print_progress("Pages", index, total)
	if total > 0:
		print()
	pdf.save()

	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	writer = pypdf.PdfWriter()
	for pdf_page in reader.pages:
		writer.add_page(pdf_page)
	writer.add_metadata(
		{
			"/Title": config.title,
			"/Subject": f"Catalogue proof, {total} pages",
		}
	)
	with output_path.open("wb") as handle:
		writer.write(handle)

	return ProofResult(
		pages=total,
		placed_items=placed_items,
		empty_slots=empty_slots,
		barcodes_drawn=barcodes_drawn,
		barcode_fallbacks=barcode_fallbacks,
		images_drawn=images_drawn,
		flagged_cells=flagged_cells,
	)


#============================================
def build_manifest(
	pages: list[PageDescriptor],
	summary: AssemblySummary,
	is_mixed_context: bool,
) -> dict:
	"""
	Build the JSON-ready manifest for a catalogue plan.

	Args:
		pages: Assembled pages.
		summary: Assembly summary.
		is_mixed_context: Mixed flag used for truncation limits.

	Returns:
		Manifest dictionary.
	"""
	page_entries = []
	for page in pages:
		slots = []
		for annotated in page.slots:
			if annotated is None:
				slots.append(None)
				continue
			slots.append(
				{
					"identifier": annotated.item.identifier,
					"title": annotated.item.title,
					"barcode": annotated.barcode.symbol,
					"truncation": {
						field: {
							"is_truncated": verdict.is_truncated,
							"original_length": verdict.original_length,
							"limit": verdict.limit,
							"percent_over": round(verdict.percent_over, 2),
							"severity": verdict.severity.value,
						}
						for field, verdict in annotated.truncation.items()
					},
				}
			)
		page_entries.append(
			{
				"page": page.page_number,
				"layout": page.layout_id.value,
				"capacity": page.capacity,
				"header": page.header,
				"slots": slots,
			}
		)
	warnings = cpag.assembler.collect_truncation_warnings(pages)
	return {
		"mixed_context": is_mixed_context,
		"pages": summary.pages,
		"placed_items": summary.placed_items,
		"empty_slots": summary.empty_slots,
		"items_without_symbol": summary.items_without_symbol,
		"pages_by_layout": summary.pages_by_layout,
		"warnings_by_severity": summary.warnings_by_severity,
		"warnings": [warning.describe() for warning in warnings],
		"layout": page_entries,
	}


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	pages: list[PageDescriptor],
	summary: AssemblySummary,
	is_mixed_context: bool,
	result: ProofResult | None = None,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		pages: Assembled pages.
		summary: Assembly summary.
		is_mixed_context: Mixed flag used for truncation limits.
		result: Proof render result, when a PDF was written.
	"""
	data = build_manifest(pages, summary, is_mixed_context)
	if result is not None:
		data["proof"] = {
			"pages": result.pages,
			"barcodes_drawn": result.barcodes_drawn,
			"barcode_fallbacks": result.barcode_fallbacks,
			"images_drawn": result.images_drawn,
			"flagged_cells": result.flagged_cells,
		}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
