"""
Utility modules for the motion graph compiler.

This package provides shared utilities used across all stages:
- logging: Structured logging with entry/exit decorators
- diagnostics: Fatal compiler errors and non-fatal diagnostic records
- config / config_loader: Compiler configuration from code, env or YAML jobs
- retry: Exponential backoff for remote sinks
- metrics / visualizations: Run instrumentation and review charts
"""

from src.utils.logging import get_logger, log_function_call

__all__ = ["get_logger", "log_function_call"]
