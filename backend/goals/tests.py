# goals/tests.py
"""
Goals App Test Suite
====================

Test Categories:
----------------
1. Goal Model Tests - validation and ordering
2. Goal Context Tests - plain values handed to the classifier
"""

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from activities.classifier.constants import GoalContext

from .models import Goal

User = get_user_model()


# ===========================================================================
# MODEL TESTS
# ===========================================================================

class GoalModelTest(TestCase):
    """Tests for the Goal model fields and validation."""

    def setUp(self):
        self.user = User.objects.create_user(
            username='testuser',
            email='test@example.com',
            password='testpass123'
        )

    def test_defaults(self):
        goal = Goal.objects.create(user=self.user, title='Run a marathon')

        self.assertEqual(goal.goal_type, Goal.GoalType.SHORT)
        self.assertEqual(goal.progress_percentage, 0)
        self.assertFalse(goal.is_completed)
        self.assertFalse(goal.is_archived)

    def test_progress_above_hundred_raises_validation_error(self):
        goal = Goal(user=self.user, title='Overachiever', progress_percentage=150)

        with self.assertRaises(ValidationError):
            goal.full_clean()

    def test_str(self):
        goal = Goal.objects.create(user=self.user, title='Learn Django')

        self.assertEqual(str(goal), "testuser's Goal: Learn Django")


# ===========================================================================
# GOAL CONTEXT TESTS
# ===========================================================================

class GoalContextTest(TestCase):
    """The classifier receives goal details as a plain value object."""

    def setUp(self):
        self.user = User.objects.create_user(username='ctxuser', password='testpass123')

    def test_context_uses_type_label(self):
        goal = Goal.objects.create(
            user=self.user, title='Launch product', goal_type=Goal.GoalType.MEDIUM
        )

        context = goal.as_goal_context()

        self.assertIsInstance(context, GoalContext)
        self.assertEqual(context.id, goal.pk)
        self.assertEqual(context.title, 'Launch product')
        self.assertEqual(context.type_name, 'Medium term')

    def test_each_goal_type_has_a_label(self):
        for goal_type in Goal.GoalType:
            goal = Goal(user=self.user, title='Any', goal_type=goal_type)
            self.assertTrue(goal.as_goal_context().type_name.endswith('term'))
