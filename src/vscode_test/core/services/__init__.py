"""
Service layer for vscode-test.

Services combine configuration loading with the core launch package.
"""

from vscode_test.core.services.test_run import TestRunService

__all__ = ["TestRunService"]
