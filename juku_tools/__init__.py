"""
================================================================================
Juku Tools
================================================================================

Infrastructure shared by the juku UI suites.

Modules:
    - common: YAML configuration loading and loguru setup
    - report_tools: Allure attachment helpers

Example:
    from juku_tools.common import ConfigLoader, init_logger
    from juku_tools.report_tools import attach_records

    init_logger()
    timeout = ConfigLoader().get("ui.waits.tab_activation.timeout", 5.0)

================================================================================
"""

__version__ = "0.1.0"

__all__ = [
    "common",
    "report_tools",
]
