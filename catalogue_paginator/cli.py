"""
CLI entry points for catalogue planning and proof rendering.
"""

# Standard Library
import argparse
import pathlib
import string
import time

# local repo modules
import catalogue_paginator as cpag
import catalogue_paginator.assembler
import catalogue_paginator.config
import catalogue_paginator.errors
import catalogue_paginator.items
import catalogue_paginator.render


ProofConfig = cpag.config.ProofConfig
CatalogueError = cpag.errors.CatalogueError
AssignmentLengthMismatchError = cpag.errors.AssignmentLengthMismatchError

DEFAULT_LEFT_MARGIN = cpag.config.DEFAULT_LEFT_MARGIN
DEFAULT_TOP_MARGIN = cpag.config.DEFAULT_TOP_MARGIN
DEFAULT_GUTTER = cpag.config.DEFAULT_GUTTER
DEFAULT_CELL_PADDING = cpag.config.DEFAULT_CELL_PADDING
DEFAULT_BANNER_COLOR = cpag.config.DEFAULT_BANNER_COLOR
DEFAULT_WEBSITE_NAME = cpag.config.DEFAULT_WEBSITE_NAME


#============================================
def build_config(args: argparse.Namespace, title: str | None = None) -> ProofConfig:
	"""
	Build proof config from CLI args.

	Args:
		args: Parsed argparse namespace.
		title: Catalogue title from the input file.

	Returns:
		ProofConfig.
	"""
	margin = DEFAULT_LEFT_MARGIN
	if args.margin_inches is not None:
		margin = cpag.config.inches_to_points(args.margin_inches)
	return ProofConfig(
		left_margin=margin,
		top_margin=margin if args.margin_inches is not None else DEFAULT_TOP_MARGIN,
		gutter=DEFAULT_GUTTER,
		cell_padding=DEFAULT_CELL_PADDING,
		banner_color=args.banner_color,
		draw_outlines=args.draw_outlines,
		show_warnings=args.show_warnings,
		image_dir=args.image_dir,
		title=title or "Catalogue proof",
	)


#============================================
def banner_color_arg(value: str) -> str:
	"""
	Validate a #RRGGBB banner color for argparse.
	"""
	text = value.strip()
	digits = text[1:]
	if len(text) != 7 or not text.startswith("#") or any(char not in string.hexdigits for char in digits):
		raise argparse.ArgumentTypeError(f"expected #RRGGBB, got {value!r}")
	return text


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Paginate product items into a catalogue proof PDF.")
	parser.add_argument("input", help="Catalogue JSON file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-l", "--layout", dest="layout", default=None,
		help="Single layout for every item (1, 2, 2-int, 3, 4, 8); overrides the input file.",
	)
	layout_group.add_argument(
		"-x", "--mixed-context", dest="mixed_context", action="store_true", default=None,
		help="Use mixed-catalogue text limits.",
	)
	layout_group.add_argument(
		"-X", "--no-mixed-context", dest="mixed_context", action="store_false",
		help="Use standalone text limits.",
	)
	layout_group.add_argument("--margin-inches", dest="margin_inches", type=float, default=None, help="Page margin in inches.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-u", "--dedupe", dest="dedupe", action="store_true", help="Drop repeated identifiers.")
	behavior_group.add_argument("-U", "--no-dedupe", dest="dedupe", action="store_false", help="Keep repeated identifiers.")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw cell outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable cell outlines.")
	behavior_group.add_argument("-w", "--show-warnings", dest="show_warnings", action="store_true", help="Mark cells with text overflow.")
	behavior_group.add_argument("-W", "--no-show-warnings", dest="show_warnings", action="store_false", help="Do not mark overflow cells.")
	behavior_group.add_argument("-i", "--image-dir", dest="image_dir", default=None, help="Directory of <identifier>.jpg/.png covers.")
	behavior_group.add_argument("-b", "--banner-color", dest="banner_color", type=banner_color_arg, default=DEFAULT_BANNER_COLOR, help="Banner color as #RRGGBB.")
	behavior_group.add_argument(
		"--plan-only",
		dest="plan_only",
		action="store_true",
		help="Stop after planning (skip PDF rendering).",
	)

	parser.set_defaults(
		dedupe=False,
		draw_outlines=False,
		show_warnings=True,
		plan_only=False,
	)

	args = parser.parse_args(argv)
	if args.output_path is None and not args.plan_only:
		parser.error("--output is required unless --plan-only is given")
	return args


#============================================
def choose_assignment(
	args: argparse.Namespace,
	request: cpag.items.CatalogueRequest,
) -> object:
	"""
	Pick the layout assignment from CLI args and the input file.

	Args:
		args: Parsed argparse namespace.
		request: Loaded catalogue request.

	Returns:
		Single layout value or per-item list.
	"""
	if args.layout is not None:
		return args.layout
	if request.layout_assignments is not None:
		return request.layout_assignments
	if request.layout is not None:
		return request.layout
	return "1"


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run planning, assembly and proof rendering.

	Args:
		args: Parsed argparse namespace.
	"""
	start_time = time.perf_counter()
	input_path = pathlib.Path(args.input)
	print("Catalogue proof pipeline")
	print(f"Input: {input_path}")

	request = cpag.items.load_request(input_path)
	items = request.items
	assignment = choose_assignment(args, request)
	mixed = cpag.assembler.is_mixed_assignment(assignment)
	if args.dedupe:
		if mixed and len(assignment) != len(items):
			raise AssignmentLengthMismatchError(len(assignment), len(items))
		kept = cpag.items.first_occurrence_indices(items)
		if mixed:
			assignment = [assignment[index] for index in kept]
		items = [items[index] for index in kept]
		print(f"Items after dedupe: {len(items)}")
	is_mixed_context = mixed if args.mixed_context is None else args.mixed_context
	print(f"Items: {len(items)}")
	print(f"Layout: {'per-item' if mixed else assignment}")
	print(f"Mixed context: {is_mixed_context}")

	plan_start = time.perf_counter()
	pages = cpag.assembler.assemble(
		items,
		assignment,
		is_mixed_context,
		page_headers=request.page_headers,
		default_header=request.website_name or DEFAULT_WEBSITE_NAME,
	)
	plan_end = time.perf_counter()
	summary = cpag.assembler.summarize_pages(pages)
	print(f"Pages planned: {summary.pages}")
	print(f"Items placed: {summary.placed_items}")
	print(f"Empty slots: {summary.empty_slots}")
	if summary.items_without_symbol > 0:
		print(f"Items without barcode symbol: {summary.items_without_symbol}")

	warnings = cpag.assembler.collect_truncation_warnings(pages)
	for warning in warnings:
		print(warning.describe())
	if warnings:
		counts = ", ".join(f"{key}={value}" for key, value in sorted(summary.warnings_by_severity.items()))
		print(f"Truncation summary: {len(warnings)} fields ({counts})")

	result = None
	render_start = render_end = time.perf_counter()
	if args.plan_only:
		print("Stopping before rendering.")
	else:
		output_path = pathlib.Path(args.output_path)
		print(f"Output PDF: {output_path}")
		config = build_config(args, request.title)
		render_start = time.perf_counter()
		result = cpag.render.render_proof_pdf(pages, output_path, config)
		render_end = time.perf_counter()
		print(f"Pages written: {result.pages}")
		print(f"Barcodes drawn: {result.barcodes_drawn}")
		if result.barcode_fallbacks > 0:
			print(f"Barcode text fallbacks: {result.barcode_fallbacks}")

	manifest_path = args.manifest_path
	if manifest_path is None and args.output_path is not None:
		manifest_path = f"{args.output_path}.json"
	if manifest_path is not None:
		cpag.render.write_manifest(pathlib.Path(manifest_path), pages, summary, is_mixed_context, result)
		print(f"Manifest written: {manifest_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: plan={:.2f}s render={:.2f}s total={:.2f}s".format(
			plan_end - plan_start,
			render_end - render_start,
			total_time,
		)
	)


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except CatalogueError as error:
		raise SystemExit(f"Error: {error}") from error
