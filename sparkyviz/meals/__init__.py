# -*- coding: utf-8 -*-
"""Single-day meal breakdowns loaded on demand."""
