# -*- coding: utf-8 -*-
"""SparkyFitness upstream API client."""
