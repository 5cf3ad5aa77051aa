import os

import pytest
from fastapi.testclient import TestClient

from conformance.api.main import app
from conformance.core.engine import ValidationEngine, default_model_registry, default_rule_registry
from conformance.core.model import ModelNode, ModelRegistry, ModelSpec
from conformance.core.observability.metrics import reset_metrics
from conformance.core.options import ValidationOptions


@pytest.fixture(scope="session", autouse=True)
def _force_test_env():
    # Packaged data only, whatever the developer shell has exported
    for key in ("CONFORMANCE_MODELS_DIR", "CONFORMANCE_RULES_DIR", "CONFORMANCE_PROFILES_DIR"):
        os.environ.pop(key, None)
    os.environ.setdefault("CONFORMANCE_VALIDATION_MODE", "OpenData")


@pytest.fixture(autouse=True)
def _clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


def make_models(*specs):
    """In-memory registry built from plain dicts."""
    return ModelRegistry(load_files=False, models=[ModelSpec.from_dict(s) for s in specs])


def make_node(doc, model, models=None, **opts):
    options = ValidationOptions(models=models, **opts)
    return ModelNode("$", doc, None, model, options)


def engine_for(rule_names, models=None, **opts):
    """Engine running only the named catalogue rules, in catalogue order."""
    reg = default_rule_registry()
    rules = [reg.compiled(r.name) for r in reg.get_active_rules() if r.name in rule_names]
    options = ValidationOptions(models=models or default_model_registry(), **opts)
    return ValidationEngine(rules, options=options)


@pytest.fixture(scope="session")
def rule_registry():
    return default_rule_registry()


@pytest.fixture(scope="session")
def packaged_models():
    return default_model_registry()


@pytest.fixture()
def event_model():
    return ModelSpec.from_dict({
        "type": "Event",
        "requiredFields": ["@context", "activity", "location"],
        "fields": {
            "activity": {"model": "ArrayOf#Concept"},
            "location": {"model": "#Place"},
            "name": {"requiredType": "https://schema.org/Text", "sameAs": "https://schema.org/name"},
        },
    })


@pytest.fixture()
def client():
    return TestClient(app)
