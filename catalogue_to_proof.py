#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Paginate a catalogue JSON file into a proof PDF and plan manifest.
"""

# local repo modules
import catalogue_paginator.cli


if __name__ == "__main__":
	catalogue_paginator.cli.main()
