"""
Juku site test suites package.

Kept importable to support:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - imports of the framework and page objects from other suites

Layout:
  - ui_testing: Playwright framework, page objects and browser tests
  - unit: browser-free tests of the framework against an in-memory DOM
"""
