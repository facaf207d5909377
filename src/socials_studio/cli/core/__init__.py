"""Core utilities for CLI - console output and service wiring."""

from .console import console, fail, handle_errors, print_error, print_success, print_warning
from .services import Services, get_services, init_services

__all__ = [
    # Console
    "console",
    "fail",
    "handle_errors",
    "print_error",
    "print_success",
    "print_warning",
    # Services
    "Services",
    "get_services",
    "init_services",
]
