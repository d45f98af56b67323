# activities/tests/__init__.py
"""
Activities App Test Suite
=========================

Modules:
--------
- test_rules: rule scorers (activity and task variants), thresholds, clamping
- test_external_scorer: JSON extraction, generative classifier, OpenAI client
- test_orchestration: dispatch policy, task classification, composition root
- test_efficiency: efficiency points, rankings, opportunity cost
- test_models: persistence shell (signals, soft delete, services, Celery job)

Running Tests:
--------------
    python manage.py test activities
    python manage.py test activities.tests.test_rules

The generative model is never called for real; tests inject
``FakeTextClient`` or patch ``openai.OpenAI``.
"""
