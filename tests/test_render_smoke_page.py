import pathlib

import fitz
import PIL.Image
import pypdf

import catalogue_paginator.assembler
import catalogue_paginator.config
import catalogue_paginator.items
import catalogue_paginator.layouts
import catalogue_paginator.render


DPI = 100
INK_THRESHOLD = 200
COLOR_TOLERANCE = 12
FIXTURE_PATH = pathlib.Path(__file__).resolve().parent / "fixtures" / "sample_catalogue.json"


#============================================
def _build_config(image_dir: pathlib.Path | None = None) -> catalogue_paginator.config.ProofConfig:
	return catalogue_paginator.config.ProofConfig(
		left_margin=catalogue_paginator.config.DEFAULT_LEFT_MARGIN,
		top_margin=catalogue_paginator.config.DEFAULT_TOP_MARGIN,
		gutter=catalogue_paginator.config.DEFAULT_GUTTER,
		cell_padding=catalogue_paginator.config.DEFAULT_CELL_PADDING,
		banner_color=catalogue_paginator.config.DEFAULT_BANNER_COLOR,
		draw_outlines=True,
		show_warnings=True,
		image_dir=str(image_dir) if image_dir else None,
		title="Smoke proof",
	)


#============================================
def _sample_pages(assignment: object = None, is_mixed_context: bool = True) -> list:
	request = catalogue_paginator.items.load_request(FIXTURE_PATH)
	if assignment is None:
		assignment = request.layout_assignments
	return catalogue_paginator.assembler.assemble(
		request.items,
		assignment,
		is_mixed_context,
		page_headers=request.page_headers,
		default_header=request.website_name,
	)


#============================================
def _render_pdf_first_page(path: pathlib.Path) -> PIL.Image.Image:
	"""
	Render the first page of a PDF to an image.

	Args:
		path: PDF path.

	Returns:
		PIL image.
	"""
	document = fitz.open(path)
	page = document[0]
	scale = DPI / 72.0
	matrix = fitz.Matrix(scale, scale)
	pixmap = page.get_pixmap(matrix=matrix, alpha=False)
	image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()
	return image


#============================================
def _count_ink_ratio(gray: PIL.Image.Image, threshold: int) -> float:
	"""
	Compute the ink ratio for a grayscale region.

	Args:
		gray: Grayscale image region.
		threshold: Pixel intensity threshold.

	Returns:
		Ink ratio.
	"""
	pixels = list(gray.getdata())
	if not pixels:
		return 0.0
	ink = sum(1 for value in pixels if value < threshold)
	return ink / len(pixels)


#============================================
def test_mixed_proof_counts(tmp_path: pathlib.Path) -> None:
	"""
	Render the sample catalogue and check page and slot counts.
	"""
	pages = _sample_pages()
	output_pdf = tmp_path / "proof.pdf"
	result = catalogue_paginator.render.render_proof_pdf(pages, output_pdf, _build_config())

	assert result.pages == 4
	assert result.placed_items == 7
	assert result.empty_slots == 3
	# gift card has no digits and field notes carries a foreign check digit
	assert result.barcode_fallbacks == 2
	assert result.barcodes_drawn == 5
	assert result.images_drawn == 0
	assert result.flagged_cells == 0

	reader = pypdf.PdfReader(str(output_pdf))
	assert len(reader.pages) == 4
	assert reader.metadata.title == "Smoke proof"


#============================================
def test_uniform_proof_flags_overflow(tmp_path: pathlib.Path) -> None:
	"""
	Standalone density-1 pages mark the two overflowing items.
	"""
	pages = _sample_pages("1", False)
	result = catalogue_paginator.render.render_proof_pdf(pages, tmp_path / "proof.pdf", _build_config())
	assert result.pages == 7
	assert result.empty_slots == 0
	assert result.flagged_cells == 2


#============================================
def test_cover_images_loaded(tmp_path: pathlib.Path) -> None:
	"""
	Covers named after identifiers are drawn into their cells.
	"""
	image_dir = tmp_path / "covers"
	image_dir.mkdir()
	cover = PIL.Image.new("RGB", (60, 90), (20, 40, 160))
	cover.save(image_dir / "9781234567897.png")
	(image_dir / "12345.jpg").write_bytes(b"not an image")

	pages = _sample_pages()
	result = catalogue_paginator.render.render_proof_pdf(pages, tmp_path / "proof.pdf", _build_config(image_dir))
	assert result.images_drawn == 1


#============================================
def test_rendered_page_banner_and_ink(tmp_path: pathlib.Path) -> None:
	"""
	Smoke test the first page for the banner color and cell ink.
	"""
	pages = _sample_pages()
	config = _build_config()
	output_pdf = tmp_path / "proof.pdf"
	catalogue_paginator.render.render_proof_pdf(pages, output_pdf, config)

	image = _render_pdf_first_page(output_pdf)
	scale = DPI / 72.0
	banner_x = int(round(6.0 * scale))
	banner_y = int(round((config.top_margin + 4.0) * scale))
	pixel = image.getpixel((banner_x, banner_y))
	expected = (247, 152, 29)
	for channel, target in zip(pixel, expected):
		assert abs(channel - target) <= COLOR_TOLERANCE

	spec = catalogue_paginator.layouts.get_layout_spec(pages[0].layout_id)
	page_height = image.height / scale
	gray = image.convert("L")
	for slot in range(spec.capacity):
		x, y, width, height = catalogue_paginator.render.compute_cell_box(spec, config, slot)
		x0 = int(round(x * scale))
		x1 = int(round((x + width) * scale))
		y0 = int(round((page_height - (y + height)) * scale))
		y1 = int(round((page_height - y) * scale))
		ratio = _count_ink_ratio(gray.crop((x0, y0, x1, y1)), INK_THRESHOLD)
		assert ratio > 0.001, f"slot {slot} is blank"
