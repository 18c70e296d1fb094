# -*- coding: utf-8 -*-
"""Dashboard profile: identity, goals and adherence metrics."""
