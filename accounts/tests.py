from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase

from core.permissions import HasAllowedRole, user_is_parent, user_is_student

User = get_user_model()


class RoleTestCase(TestCase):
    def setUp(self):
        self.teacher = User.objects.create_user(
            username='teacher', password='testpass123', role='TEACHER', first_name='Abebe', last_name='Kebede',
        )
        self.parent = User.objects.create_user(username='parent', password='testpass123', role='PARENT')

    def test_default_role_is_student(self):
        user = User.objects.create_user(username='pupil', password='testpass123')
        self.assertTrue(user.is_student())

    def test_role_helpers(self):
        self.assertTrue(self.parent.is_parent())
        self.assertFalse(self.teacher.is_student())
        self.assertTrue(user_is_parent(self.parent))
        self.assertFalse(user_is_parent(self.teacher))
        self.assertFalse(user_is_student(self.parent))

    def test_anonymous_user_has_no_role(self):
        self.assertFalse(user_is_parent(AnonymousUser()))
        self.assertFalse(user_is_student(AnonymousUser()))

    def test_display_name(self):
        self.assertEqual(self.teacher.display_name, 'Abebe Kebede')
        self.assertEqual(self.parent.display_name, 'parent')


class HasAllowedRoleTestCase(TestCase):
    """Test the allowed_roles permission used by every API view"""

    class View:
        def __init__(self, roles):
            self.allowed_roles = roles

    def setUp(self):
        self.factory = RequestFactory()
        self.permission = HasAllowedRole()
        self.teacher = User.objects.create_user(username='teacher', password='testpass123', role='TEACHER')
        self.superuser = User.objects.create_superuser(username='root', password='testpass123')

    def check(self, user, roles):
        request = self.factory.get('/')
        request.user = user
        return self.permission.has_permission(request, self.View(roles))

    def test_role_in_list(self):
        self.assertTrue(self.check(self.teacher, ['ADMIN', 'TEACHER']))

    def test_role_not_in_list(self):
        self.assertFalse(self.check(self.teacher, ['ADMIN']))

    def test_superuser_always_passes(self):
        self.assertTrue(self.check(self.superuser, ['PARENT']))

    def test_empty_list_allows_any_authenticated_user(self):
        self.assertTrue(self.check(self.teacher, []))
