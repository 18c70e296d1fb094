# -*- coding: utf-8 -*-
"""SparkyViz: read-only nutrition dashboard backend for SparkyFitness."""

__version__ = "0.1.0"
