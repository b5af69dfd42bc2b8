"""
Pytest fixtures for DB Demo service tests.

Provides sample service catalogs, environment fixtures and test clients.
"""

import json
from typing import Dict, Any

import pytest


# ============================================
# SAMPLE CATALOG FIXTURES
# ============================================

@pytest.fixture
def mysql_uri_catalog() -> Dict[str, Any]:
    """MySQL binding that only exposes a CredHub-style URI."""
    return {
        "p.mysql": [{
            "name": "demo-mysql",
            "label": "p.mysql",
            "credentials": {
                "uri": "mysql2://u:p@h:3307/db?reconnect=true"
            }
        }]
    }


@pytest.fixture
def postgres_field_catalog() -> Dict[str, Any]:
    """PostgreSQL binding with individual credential fields."""
    return {
        "postgres": [{
            "name": "demo-postgres",
            "label": "postgres",
            "credentials": {
                "hostname": "pg.example.com",
                "port": 5433,
                "name": "demo",
                "username": "demo_user",
                "password": "s3cret"
            }
        }]
    }


@pytest.fixture
def redis_only_catalog() -> Dict[str, Any]:
    """Catalog with no database service bound."""
    return {
        "redis": [{
            "name": "cache",
            "credentials": {"host": "redis.example.com", "port": 6379, "password": "x"}
        }]
    }


# ============================================
# HTTP CLIENT FIXTURES
# ============================================

@pytest.fixture
def client(clean_environment, monkeypatch, mysql_uri_catalog):
    """
    Synchronous HTTP client for API tests.

    The app starts with a MySQL binding in VCAP_SERVICES so the lifespan
    hook has something to resolve.
    """
    from fastapi.testclient import TestClient
    from db_demo.main import app

    monkeypatch.setenv("VCAP_SERVICES", json.dumps(mysql_uri_catalog))
    with TestClient(app) as test_client:
        yield test_client


# ============================================
# ENVIRONMENT FIXTURES
# ============================================

@pytest.fixture
def mock_vcap_services(monkeypatch, postgres_field_catalog):
    """Mock VCAP_SERVICES environment variable."""
    monkeypatch.setenv("VCAP_SERVICES", json.dumps(postgres_field_catalog))
    return postgres_field_catalog


@pytest.fixture
def clean_environment(monkeypatch):
    """Clear every environment variable the resolver reads."""
    monkeypatch.delenv("VCAP_SERVICES", raising=False)
    monkeypatch.delenv("VCAP_APPLICATION", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ConnectionStrings__DefaultConnection", raising=False)
