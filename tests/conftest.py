"""Shared fixtures."""
import pytest

from schema_bridge.storage.repository import MappingRepository
from schema_bridge.storage.stores import InMemoryStore


@pytest.fixture
def crm_schema():
    """Source system customer schema"""
    return {
        "type": "object",
        "properties": {
            "FirstName": {"type": "string"},
            "LastName": {"type": "string"},
            "EmailAddress": {"type": "string", "format": "email"},
            "Phone": {"type": "string"},
        },
    }


@pytest.fixture
def erp_schema():
    """Target system customer schema"""
    return {
        "type": "object",
        "properties": {
            "first_name": {"type": "string"},
            "last_name": {"type": "string"},
            "email": {"type": "string"},
            "phone_number": {"type": "string"},
        },
    }


@pytest.fixture
def customer_mapping():
    """Stored mapping configuration document (camelCase)"""
    return {
        "id": "crm-to-erp",
        "name": "CRM customer → ERP customer",
        "description": "Customer sync",
        "sourceEndpoint": {"system": "A", "path": "/customers", "method": "POST"},
        "targetEndpoint": {"system": "B", "path": "/v1/clients", "method": "POST"},
        "fieldMappings": [
            {
                "sourceField": "FirstName",
                "targetField": "first_name",
                "sourceType": "string",
                "targetType": "string",
                "transformation": {"type": "direct"},
                "required": True,
            },
            {
                "sourceField": "amount",
                "targetField": "billing.total",
                "sourceType": "string",
                "targetType": "number",
                "transformation": {"type": "format", "params": {"from": "string", "to": "number"}},
                "required": True,
            },
        ],
    }


@pytest.fixture
def memory_repository():
    """Repository backed by an in-memory store"""
    return MappingRepository(InMemoryStore())
