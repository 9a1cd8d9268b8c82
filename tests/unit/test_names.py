"""Tests for duplicate member name handling."""

from mokoji.utils.names import UNKNOWN_NAME, add_duplicate_name_suffixes


class TestAddDuplicateNameSuffixes:
    """Tests for add_duplicate_name_suffixes."""

    def test_unique_names_unchanged(self) -> None:
        result = add_duplicate_name_suffixes([{"name": "김철수"}, {"name": "이영희"}])

        assert [m["displayName"] for m in result] == ["김철수", "이영희"]

    def test_duplicates_suffixed_by_join_order(self) -> None:
        members = [
            {"memberId": "late", "name": "홍길동", "joinedAt": 1_700_000_002_000},
            {"memberId": "solo", "name": "김철수", "joinedAt": 1_600_000_000_000},
            {"memberId": "early", "name": "홍길동", "joinedAt": 1_700_000_000_000},
            {"memberId": "middle", "name": "홍길동", "joinedAt": "2023-11-14T22:13:21Z"},
        ]

        result = add_duplicate_name_suffixes(members)

        by_id = {m["memberId"]: m["displayName"] for m in result}
        assert by_id == {
            "early": "홍길동 A",
            "middle": "홍길동 B",
            "late": "홍길동 C",
            "solo": "김철수",
        }
        # Input order preserved
        assert [m["memberId"] for m in result] == ["late", "solo", "early", "middle"]

    def test_input_not_modified(self) -> None:
        members = [{"name": "홍길동"}, {"name": "홍길동"}]

        add_duplicate_name_suffixes(members)

        assert all("displayName" not in m for m in members)

    def test_missing_names_grouped_as_unknown(self) -> None:
        result = add_duplicate_name_suffixes([{"joinedAt": 1}, {"name": "", "joinedAt": 2}])

        assert [m["displayName"] for m in result] == [f"{UNKNOWN_NAME} A", f"{UNKNOWN_NAME} B"]

    def test_more_than_26_duplicates(self) -> None:
        members = [{"name": "같은이름", "joinedAt": i} for i in range(28)]

        result = add_duplicate_name_suffixes(members)

        assert result[25]["displayName"] == "같은이름 Z"
        assert result[26]["displayName"] == "같은이름 AA"
        assert result[27]["displayName"] == "같은이름 AB"
