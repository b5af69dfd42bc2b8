"""Utility modules for DB Demo service."""

from db_demo.utils.vcap import get_vcap_services, is_cf_environment, parse_catalog

__all__ = [
    "get_vcap_services",
    "is_cf_environment",
    "parse_catalog",
]
