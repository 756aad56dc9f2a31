"""
Test suite for the divination engine.

Contains:
- tests/unit/          : Unit tests for calendar, pillars, elements, bazi, qimen and the CLI
"""
