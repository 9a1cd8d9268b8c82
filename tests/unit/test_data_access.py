"""Tests for the table-level data access modules against moto DynamoDB."""

from typing import Any, Dict

import pytest
from botocore.exceptions import ClientError

from mokoji.utils import activity_logs, members, messages, organizations, photos, schedules, users
from tests.unit.fixtures import make_member, make_message, make_organization, make_schedule


@pytest.fixture
def organization(dynamodb_tables: Dict[str, Any]) -> Dict[str, Any]:
    org = make_organization("owner-1", memberCount=2)
    organizations.tables.organizations.put_item(Item=org)
    return org


class TestUsers:
    def test_create_get_and_lookup_by_email(self, dynamodb_tables: Dict[str, Any]) -> None:
        created = users.create_user({"userId": "u1", "email": "a@example.com", "name": "A"})

        assert created["createdAt"] == created["updatedAt"]
        assert users.get_user("u1")["name"] == "A"
        assert users.get_user_by_email("a@example.com")["userId"] == "u1"
        assert users.get_user_by_email("none@example.com") is None

    def test_update_bumps_updated_at(self, dynamodb_tables: Dict[str, Any]) -> None:
        users.create_user({"userId": "u1", "email": "a@example.com", "updatedAt": 1})

        updated = users.update_user("u1", {"mbti": "ENFP"})

        assert updated["mbti"] == "ENFP"
        assert updated["updatedAt"] > 1

    def test_update_missing_user(self, dynamodb_tables: Dict[str, Any]) -> None:
        with pytest.raises(ClientError) as exc_info:
            users.update_user("ghost", {"mbti": "ENFP"})

        assert exc_info.value.response["Error"]["Code"] == "ConditionalCheckFailedException"

    def test_default_profile_is_fresh(self) -> None:
        first = users.default_profile()
        first["interestCategories"].append("x")

        assert users.default_profile()["interestCategories"] == []


class TestOrganizations:
    """Tests for organization records and member counts."""

    def test_create_with_owner_membership(self, dynamodb_tables: Dict[str, Any]) -> None:
        org = make_organization("owner-1")
        membership = make_member(org["organizationId"], "owner-1", role="owner")

        organizations.create_organization(org, membership)

        assert organizations.get_organization(org["organizationId"])["name"] == org["name"]
        assert members.get_member(membership["memberId"])["role"] == "owner"

    def test_list_by_owner(self, organization: Dict[str, Any]) -> None:
        organizations.create_organization(make_organization("someone-else"))

        owned = organizations.list_organizations_by_owner("owner-1")

        assert [o["organizationId"] for o in owned] == [organization["organizationId"]]
        assert len(organizations.list_organizations(10)) == 2

    def test_adjust_member_count(self, organization: Dict[str, Any]) -> None:
        organizations.adjust_member_count(organization["organizationId"], 1)
        organizations.adjust_member_count(organization["organizationId"], -2)

        assert organizations.get_organization(organization["organizationId"])["memberCount"] == 1

    def test_member_count_never_negative(self, organization: Dict[str, Any], capsys: Any) -> None:
        organizations.adjust_member_count(organization["organizationId"], -5)

        assert organizations.get_organization(organization["organizationId"])["memberCount"] == 2
        assert "Member count not adjusted" in capsys.readouterr().out

    def test_adjust_missing_organization_is_ignored(self, dynamodb_tables: Dict[str, Any]) -> None:
        organizations.adjust_member_count("ghost", 1)

        assert organizations.get_organization("ghost") is None

    def test_set_member_count_and_delete(self, organization: Dict[str, Any]) -> None:
        organizations.set_member_count(organization["organizationId"], 7)
        assert organizations.get_organization(organization["organizationId"])["memberCount"] == 7

        organizations.delete_organization(organization["organizationId"])
        assert organizations.get_organization(organization["organizationId"]) is None


class TestMembers:
    def test_find_membership(self, organization: Dict[str, Any]) -> None:
        org_id = organization["organizationId"]
        members.create_member(make_member("other-org", "u1"))
        mine = members.create_member(make_member(org_id, "u1"))

        assert members.find_membership("u1", org_id)["memberId"] == mine["memberId"]
        assert members.find_membership("u2", org_id) is None
        assert len(members.list_memberships_by_user("u1")) == 2
        assert len(members.list_members_by_organization(org_id)) == 1

    def test_create_defaults_joined_at(self, organization: Dict[str, Any]) -> None:
        member = members.create_member({"memberId": "m1", "organizationId": "o", "userId": "u"})

        assert member["joinedAt"] > 0

    def test_create_refuses_existing_member_id(self, organization: Dict[str, Any]) -> None:
        members.create_member({"memberId": "m1", "organizationId": "o", "userId": "u"})

        with pytest.raises(ClientError) as exc_info:
            members.create_member({"memberId": "m1", "organizationId": "o", "userId": "u", "role": "admin"})

        assert exc_info.value.response["Error"]["Code"] == "ConditionalCheckFailedException"
        assert members.get_member("m1").get("role") is None

    def test_update_never_changes_joined_at(self, organization: Dict[str, Any]) -> None:
        member = members.create_member(make_member(organization["organizationId"], "u1"))

        updated = members.update_member(member["memberId"], {"role": "admin", "joinedAt": 5})

        assert updated["role"] == "admin"
        assert updated["joinedAt"] == member["joinedAt"]
        assert "updatedAt" not in updated

    def test_update_with_nothing_to_set(self, organization: Dict[str, Any]) -> None:
        member = members.create_member(make_member(organization["organizationId"], "u1"))

        assert members.update_member(member["memberId"], {"joinedAt": 5}) == member


class TestSchedules:
    def test_list_with_and_without_range(self, dynamodb_tables: Dict[str, Any]) -> None:
        for day in ("2025-03-01", "2025-03-15", "2025-04-01"):
            schedules.create_schedule(make_schedule("org-1", "u1", date=day))

        all_dates = [s["date"] for s in schedules.list_schedules_by_organization("org-1")]
        march = schedules.list_schedules_by_organization("org-1", "2025-03-01", "2025-03-31")
        only_start = schedules.list_schedules_by_organization("org-1", start_date="2025-03-10")

        assert all_dates == ["2025-03-01", "2025-03-15", "2025-04-01"]
        assert [s["date"] for s in march] == ["2025-03-01", "2025-03-15"]
        assert len(only_start) == 3

    def test_chat_preview_requires_existing_schedule(self, dynamodb_tables: Dict[str, Any]) -> None:
        with pytest.raises(ClientError):
            schedules.set_chat_preview("ghost", 1, "hi")

    def test_set_last_message(self, dynamodb_tables: Dict[str, Any]) -> None:
        schedule = schedules.create_schedule(make_schedule("org-1", "u1"))

        schedules.set_last_message(schedule["scheduleId"], {"content": "hi", "sentAt": 5})

        assert schedules.get_schedule(schedule["scheduleId"])["lastMessage"]["content"] == "hi"


class TestMessages:
    """Tests for chat message records."""

    def test_list_is_oldest_first(self, dynamodb_tables: Dict[str, Any]) -> None:
        messages.put_messages(
            [
                make_message("s1", "u1", createdAt=1_700_000_000_300),
                make_message("s1", "u1", createdAt=1_700_000_000_100),
                make_message("s2", "u1", createdAt=1_700_000_000_200),
            ]
        )

        listed = messages.list_messages_by_schedule("s1")

        assert [m["createdAt"] for m in listed] == [1_700_000_000_100, 1_700_000_000_300]

    def test_soft_delete(self, dynamodb_tables: Dict[str, Any]) -> None:
        message = messages.create_message(make_message("s1", "u1"))

        messages.soft_delete_message(message["messageId"])

        stored = messages.get_message(message["messageId"])
        assert stored["isDeleted"] is True
        assert stored["deletedAt"] == stored["updatedAt"]

    def test_mark_read_counts_actual_updates(self, dynamodb_tables: Dict[str, Any]) -> None:
        mine = messages.create_message(make_message("s1", "reader"))
        unread = messages.create_message(make_message("s1", "sender"))
        elsewhere = messages.create_message(make_message("s2", "sender"))

        marked = messages.mark_messages_read(
            "s1", [mine["messageId"], unread["messageId"], elsewhere["messageId"], "missing"], "reader"
        )

        assert marked == 1
        assert messages.get_message(unread["messageId"])["readBy"] == ["sender", "reader"]
        assert messages.get_message(elsewhere["messageId"])["readBy"] == ["sender"]


class TestPhotosAndActivityLogs:
    def test_photos_newest_first_with_limit(self, dynamodb_tables: Dict[str, Any]) -> None:
        for i in range(3):
            photos.create_photo({"photoId": f"p{i}", "organizationId": "o1", "createdAt": 1_700_000_000_000 + i})

        listed = photos.list_photos_by_organization("o1", limit=2)

        assert [p["photoId"] for p in listed] == ["p2", "p1"]

        photos.delete_photo("p2")
        assert photos.get_photo("p2") is None

    def test_activity_logs_default_timestamp(self, dynamodb_tables: Dict[str, Any]) -> None:
        activity_logs.create_activity_log({"logId": "l1", "organizationId": "o1", "timestamp": 1_700_000_000_000})
        latest = activity_logs.create_activity_log({"logId": "l2", "organizationId": "o1"})

        listed = activity_logs.list_activity_logs_by_organization("o1")

        assert latest["timestamp"] > 1_700_000_000_000
        assert [log["logId"] for log in listed] == ["l2", "l1"]
