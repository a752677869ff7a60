"""Unit tests for the per-field validation rules."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from schemas.order import OrderLine
from validators import orders, users


class FakeStore:
    """Minimal stand-in for DataStore exposing only the lookups the rules use."""

    def __init__(self, users_by_username=None, users_by_email=None, dish_ids=()):
        by_username = users_by_username or {}
        by_email = users_by_email or {}
        known_dishes = set(dish_ids)
        self.lookups = []

        def get_dish(dish_id):
            self.lookups.append(dish_id)
            return SimpleNamespace(id=dish_id) if dish_id in known_dishes else None

        self.users = SimpleNamespace(
            get_by_username=by_username.get,
            get_by_email=by_email.get,
        )
        self.dishes = SimpleNamespace(get=get_dish)


VALID_USER = {
    "full_name": "Alice Doe",
    "username": "alice",
    "email": "alice@example.com",
    "phone": "555-0100",
    "address": "Main street 1",
    "password": "secret",
}


class TestUserRules:

    @pytest.mark.parametrize(
        "value, reason",
        [
            (None, "Empty full_name."),
            ("", "Empty full_name."),
            ("A", "Full name is too short..."),
            (42, "full_name must be a string."),
            ("Al", None),
        ],
    )
    def test_full_name(self, value, reason):
        assert users.full_name(value) == reason

    def test_username_must_be_free(self):
        store = FakeStore(users_by_username={"alice": SimpleNamespace(id=1)})

        assert users.username("", store) == "Empty username."
        assert users.username("alice", store) == "Username already exists."
        assert users.username("bob", store) is None

    def test_username_taken_by_the_same_user_is_accepted(self):
        store = FakeStore(users_by_username={"alice": SimpleNamespace(id=1)})

        assert users.username("alice", store, current_id=1) is None
        assert users.username("alice", store, current_id=2) == "Username already exists."

    def test_email_must_be_free(self):
        store = FakeStore(users_by_email={"a@example.com": SimpleNamespace(id=1)})

        assert users.email(None, store) == "Empty email."
        assert users.email("a@example.com", store) == "Email already exists."
        assert users.email("b@example.com", store) is None

    def test_length_rules(self):
        assert users.phone("123") == "Phone is too short..."
        assert users.phone("1234") is None
        assert users.address("abc") == "Address is too short..."
        assert users.address("abcd") is None
        assert users.password("") == "Empty password."
        assert users.password("abc") == "Password is too short..."

    @pytest.mark.parametrize("value", [0, -1, "abc", "", 1.5, True, 2 ** 63, str(2 ** 63)])
    def test_id_security_type_rejects_non_positive_integers(self, value):
        assert users.id_security_type(value) == "id_security_type invalid number."

    @pytest.mark.parametrize("value", [1, "2", 3.0])
    def test_id_security_type_accepts_positive_integers(self, value):
        assert users.id_security_type(value) is None

    def test_new_user_reports_rejections_in_field_order(self):
        store = FakeStore(users_by_username={"alice": SimpleNamespace(id=1)})
        body = dict(VALID_USER, full_name="", phone="1")

        rejections = users.validate_new_user(body, store)

        assert [r.field for r in rejections] == ["full_name", "username", "phone"]
        assert rejections[0].reason == "Empty full_name."

    def test_new_user_requires_every_field(self):
        rejections = users.validate_new_user({}, FakeStore())

        assert [r.field for r in rejections] == list(users.USER_FIELDS)

    def test_changes_only_check_supplied_fields(self):
        assert users.validate_user_changes({}, FakeStore(), user_id=1, caller_is_admin=False) == []
        assert users.validate_user_changes({"phone": None}, FakeStore(), user_id=1, caller_is_admin=False) == []

        rejections = users.validate_user_changes({"full_name": ""}, FakeStore(), user_id=1, caller_is_admin=False)
        assert rejections == [users.FieldRejection("full_name", "Empty full_name.")]

    def test_changes_check_security_type_for_admins_only(self):
        body = {"id_security_type": "nope"}

        assert users.validate_user_changes(body, FakeStore(), user_id=1, caller_is_admin=False) == []
        rejections = users.validate_user_changes(body, FakeStore(), user_id=1, caller_is_admin=True)
        assert rejections[0].field == "id_security_type"


class TestOrderRules:

    def test_dishes_must_be_a_non_empty_list(self):
        store = FakeStore(dish_ids={1})

        assert orders.dishes(None, store) == "dishes should be an array!"
        assert orders.dishes({"id": 1}, store) == "dishes should be an array!"
        assert orders.dishes([], store) == "No dishes were ordered!"

    @pytest.mark.parametrize(
        "line",
        [
            {"id": 1},
            {"quantity": 1},
            {"id": "one", "quantity": 1},
            {"id": 1, "quantity": 0},
            {"id": 1, "quantity": -2},
            {"id": 1, "quantity": 1.5},
            {"id": 1, "quantity": 2 ** 63},
            "1x2",
        ],
    )
    def test_every_line_needs_integer_id_and_positive_quantity(self, line):
        reason = orders.dishes([{"id": 1, "quantity": 1}, line], FakeStore(dish_ids={1}))

        assert reason.startswith("Every ordered dish must contain two properties")

    def test_unknown_dish_is_reported_by_id(self):
        store = FakeStore(dish_ids={1, 2})

        reason = orders.dishes([{"id": 1, "quantity": 1}, {"id": 9, "quantity": 1}, {"id": 2, "quantity": 1}], store)

        assert reason == "The ordered dish id 9 is not available."
        # Lookups stop at the first missing dish
        assert store.lookups == [1, 9]

    def test_known_dishes_pass(self):
        assert orders.dishes([{"id": "1", "quantity": "2"}], FakeStore(dish_ids={1})) is None

    def test_payment_type(self):
        assert orders.payment_type("card") == "payment_type should be numeric!"
        assert orders.payment_type(None) == "payment_type should be numeric!"
        assert orders.payment_type(2) is None
        assert orders.payment_type("1") is None
        assert orders.payment_type(2 ** 63) == "payment_type should be numeric!"

    @pytest.mark.parametrize(
        "value, reason",
        [
            ("", "Empty address."),
            (None, "Empty address."),
            ("12345", "Address must be a string!"),
            ("1.5", "Address must be a string!"),
            (" -2e3 ", "Address must be a string!"),
            ("nan", "Address is too short..."),
            ("infinity", None),
            ("1_000", None),
            ("0x1F road", None),
            (1234, "Address must be a string!"),
            ("Elm", "Address is too short..."),
            ("Elm street 5", None),
        ],
    )
    def test_address(self, value, reason):
        assert orders.address(value) == reason

    def test_merge_sums_duplicates_keeping_first_seen_order(self):
        lines = [
            OrderLine(id=1, quantity=2),
            OrderLine(id=2, quantity=1),
            OrderLine(id=1, quantity=3),
        ]

        merged = orders.merge_order_lines(lines)

        assert [(line.id, line.quantity) for line in merged] == [(1, 5), (2, 1)]
        # Input lines are left untouched
        assert lines[0].quantity == 2

    def test_merge_without_duplicates_is_identity(self):
        lines = [OrderLine(id=3, quantity=1), OrderLine(id=1, quantity=4)]

        assert orders.merge_order_lines(lines) == lines

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-01-01", "2024-01-01"),
            (" 2024-02-29 ", "2024-02-29"),
            ("2024-03-05T10:30:00", "2024-03-05"),
        ],
    )
    def test_normalize_date(self, raw, expected):
        assert orders.normalize_date(raw) == expected

    @pytest.mark.parametrize(
        "raw, instant",
        [
            ("2024-03-05T23:30:00-03:00", datetime(2024, 3, 6, 2, 30, tzinfo=timezone.utc)),
            ("2024-03-05T10:30:00Z", datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)),
        ],
    )
    def test_normalize_date_reads_offsets_on_the_server_clock(self, raw, instant):
        # Orders are stamped with naive local time, filters must use the same clock
        assert orders.normalize_date(raw) == instant.astimezone().date().isoformat()

    @pytest.mark.parametrize("raw", ["2024-13-40", "2023-02-29", "yesterday", ""])
    def test_normalize_date_rejects_invalid_dates(self, raw):
        with pytest.raises(ValueError):
            orders.normalize_date(raw)
