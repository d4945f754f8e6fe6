#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Refresh the sample catalogue pagination baseline for tests.
"""

import json
import pathlib

import catalogue_paginator.assembler
import catalogue_paginator.items
import catalogue_paginator.layouts


#============================================
def write_json(path: pathlib.Path, payload: dict) -> None:
	"""
	Write a JSON payload to disk.

	Args:
		path: Output path.
		payload: JSON payload.
	"""
	text = json.dumps(payload, indent=2, sort_keys=True)
	path.write_text(text + "\n", encoding="utf-8")


#============================================
def describe_pages(pages: list) -> dict:
	"""
	Reduce assembled pages to the fields tracked by the baseline.

	Args:
		pages: PageDescriptor list.

	Returns:
		Baseline entry.
	"""
	summary = catalogue_paginator.assembler.summarize_pages(pages)
	warnings = catalogue_paginator.assembler.collect_truncation_warnings(pages)
	return {
		"pages": summary.pages,
		"layouts": [page.layout_id.value for page in pages],
		"filled": [len(page.items) for page in pages],
		"empty_slots": summary.empty_slots,
		"warnings": len(warnings),
	}


#============================================
def build_baseline(fixture_path: pathlib.Path) -> dict:
	"""
	Plan the sample catalogue at every density and as a mixed catalogue.

	Args:
		fixture_path: Sample catalogue JSON path.

	Returns:
		Baseline dict keyed by configuration name.
	"""
	request = catalogue_paginator.items.load_request(fixture_path)
	baseline = {}
	for layout_id in catalogue_paginator.layouts.all_layout_ids():
		pages = catalogue_paginator.assembler.assemble(request.items, layout_id, False)
		baseline[f"uniform-{layout_id.value}"] = describe_pages(pages)
	pages = catalogue_paginator.assembler.assemble(request.items, request.layout_assignments, True)
	baseline["mixed"] = describe_pages(pages)
	return baseline


#============================================
def main() -> None:
	"""
	Run the sample baseline refresh.
	"""
	fixtures_dir = pathlib.Path(__file__).resolve().parent / "tests" / "fixtures"
	baseline = build_baseline(fixtures_dir / "sample_catalogue.json")
	write_json(fixtures_dir / "sample_baseline.json", baseline)
	print("Updated sample baseline in tests/fixtures.")


if __name__ == "__main__":
	main()
