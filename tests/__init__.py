"""habitcore Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - analytics/: Forecasting, risk, scoring, interventions, mood adjustment,
    recovery plans, data providers, engine service and integration layer

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/analytics/test_ensemble.py

    # With coverage
    pytest --cov=habitcore --cov-report=term-missing
"""
