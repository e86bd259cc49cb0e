import pytest

from backend.exceptions import UserFriendlyDataError
from backend.models import Role, User
from backend.services import user_service
from backend.services.user_service import DELETING_SELF_NOT_PERMITTED, MODIFY_LOCKED_USER_NOT_PERMITTED


class TestMatching:
    def test_filter_matches_email_names_and_role(self, admin_user, baker, barista):
        assert list(user_service.matching("bea")) == [baker]
        assert list(user_service.matching("BARISTA")) == [barista]
        assert list(user_service.matching("admin@")) == [admin_user]

    def test_without_filter(self, admin_user, baker):
        assert user_service.count_any_matching(None) == 2


class TestGuards:
    def test_locked_user_cannot_be_saved(self, admin_user, locked_admin):
        locked_admin.first_name = "Pete"
        with pytest.raises(UserFriendlyDataError) as excinfo:
            user_service.save(admin_user, locked_admin)
        assert excinfo.value.message == MODIFY_LOCKED_USER_NOT_PERMITTED
        locked_admin.refresh_from_db()
        assert locked_admin.first_name == "Peter"

    def test_locked_user_cannot_be_deleted(self, admin_user, locked_admin):
        with pytest.raises(UserFriendlyDataError) as excinfo:
            user_service.delete(admin_user, locked_admin)
        assert excinfo.value.message == MODIFY_LOCKED_USER_NOT_PERMITTED
        assert User.objects.filter(pk=locked_admin.pk).exists()

    def test_cannot_delete_yourself(self, admin_user):
        with pytest.raises(UserFriendlyDataError) as excinfo:
            user_service.delete(admin_user, admin_user)
        assert excinfo.value.message == DELETING_SELF_NOT_PERMITTED

    def test_deleting_another_user(self, admin_user, baker):
        user_service.delete(admin_user, baker)
        assert not User.objects.filter(pk=baker.pk).exists()


def test_new_users_are_baristas(admin_user):
    user = user_service.create_new(admin_user)
    assert user.pk is None
    assert user.role == Role.BARISTA
