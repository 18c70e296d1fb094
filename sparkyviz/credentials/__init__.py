# -*- coding: utf-8 -*-
"""Credential directory: identity -> upstream API key (+ optional access secret)."""
