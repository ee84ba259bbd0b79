import pytest

from booking_client.booking.contact import ContactInfoCache
from booking_client.schemas import ContactSource
from booking_client.schemas.booking_schema import ContactInfo
from booking_client.utils.errors import ApiError
from booking_client.utils.storage import USER_INFO, LocalStorage

from conftest import FakeApiClient


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "storage.json"))


def _contact():
    return ContactInfo(full_name="Trần Thị B", email="b@example.com", phone="0987654321")


class TestLoad:
    def test_logged_out_uses_cache(self, storage):
        storage.set_item(USER_INFO, {"fullName": "Cached", "email": "c@x.vn", "phone": "0912345678", "source": "manual"})
        info = ContactInfoCache(storage, FakeApiClient()).load()
        assert info.full_name == "Cached"
        assert info.source is ContactSource.MANUAL

    def test_nothing_cached(self, storage):
        assert ContactInfoCache(storage).load() is None

    def test_profile_wins_and_blanks_come_from_cache(self, storage):
        # Given: a cached phone and a profile without one
        storage.set_item(USER_INFO, {"fullName": "Old", "email": "old@x.vn", "phone": "0912345678"})
        client = FakeApiClient(
            {("GET", "/user/profile"): {"success": True, "data": {"name": "Profile Name", "email": "p@x.vn"}}},
            token="tok",
        )
        # When
        info = ContactInfoCache(storage, client).load()
        # Then
        assert info.full_name == "Profile Name"
        assert info.email == "p@x.vn"
        assert info.phone == "0912345678"
        assert info.source is ContactSource.API
        assert storage.get_item(USER_INFO)["source"] == "api"

    def test_profile_failure_falls_back_to_cache(self, storage):
        storage.set_item(USER_INFO, {"fullName": "Cached", "email": "c@x.vn", "phone": "0912345678"})
        client = FakeApiClient({("GET", "/user/profile"): ApiError("offline")}, token="tok")
        assert ContactInfoCache(storage, client).load().full_name == "Cached"

    def test_corrupt_cache_is_ignored(self, storage):
        storage.path.write_text("{not json", encoding="utf-8")
        assert ContactInfoCache(storage).load() is None


class TestSave:
    def test_logged_out_saves_manual(self, storage):
        info = ContactInfoCache(storage, FakeApiClient()).save(_contact())
        assert info.source is ContactSource.MANUAL
        saved = storage.get_item(USER_INFO)
        assert saved["fullName"] == "Trần Thị B"
        assert saved["source"] == "manual"
        assert saved["savedAt"]

    def test_logged_in_updates_profile(self, storage):
        client = FakeApiClient({("PUT", "/user/update"): {"success": True}}, token="tok")
        info = ContactInfoCache(storage, client).save(_contact())
        assert info.source is ContactSource.API_UPDATED
        assert storage.get_item(USER_INFO)["source"] == "api_updated"
        assert client.calls_to("PUT", "/user/update")[0]["number_phone"] == "0987654321"

    def test_profile_update_failure_is_not_raised(self, storage):
        client = FakeApiClient({("PUT", "/user/update"): ApiError("offline")}, token="tok")
        info = ContactInfoCache(storage, client).save(_contact())
        assert info.source is ContactSource.MANUAL
        assert storage.get_item(USER_INFO)["source"] == "manual"

    def test_remember_false_skips_local_copy(self, storage):
        ContactInfoCache(storage).save(_contact(), remember=False)
        assert storage.get_item(USER_INFO) is None
