#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Place up to four images onto a 2x2 letter-size label sheet.
"""

import label_grid_printer.cli


if __name__ == "__main__":
	label_grid_printer.cli.main()
