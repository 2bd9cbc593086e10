from extractors.categories import CATEGORY_RULES, DEFAULT_CATEGORIES, known_categories, suggest_category


def test_each_group_has_a_label() -> None:
    assert suggest_category("WHOLE FOODS SUPERMARKET") == "Groceries"
    assert suggest_category("Blue Bottle Cafe") == "Dining Out"
    assert suggest_category("WALMART #1234") == "Shopping"
    assert suggest_category("LYFT RIDE") == "Transportation"
    assert suggest_category("SPOTIFY P0A1B2") == "Subscriptions"
    assert suggest_category("ACME PAYROLL") == "Income"


def test_no_match_is_uncategorized() -> None:
    assert suggest_category("INTERNET BILL") == "Uncategorized"
    assert suggest_category("") == "Uncategorized"
    assert suggest_category(None) == "Uncategorized"


def test_earliest_group_wins() -> None:
    # restaurant (Dining Out) outranks uber (Transportation)
    assert suggest_category("UBER EATS RESTAURANT") == "Dining Out"
    # amazon (Shopping) outranks monthly/subscription (Subscriptions)
    assert suggest_category("AMAZON MONTHLY SUBSCRIPTION") == "Shopping"
    # market (Groceries) outranks deposit (Income)
    assert suggest_category("MARKET DEPOSIT REFUND") == "Groceries"


def test_keywords_match_inside_words() -> None:
    assert suggest_category("SHOPRITE") == "Shopping"
    assert suggest_category("BARNES AND NOBLE") == "Dining Out"


def test_rule_order() -> None:
    assert [label for label, _ in CATEGORY_RULES] == [
        "Groceries", "Dining Out", "Shopping", "Transportation", "Subscriptions", "Income",
    ]


def test_known_categories_cover_rules_and_defaults() -> None:
    names = known_categories()

    assert {label for label, _ in CATEGORY_RULES} <= names
    assert "Uncategorized" in names
    assert all(category["type"] in ("income", "expense") for category in DEFAULT_CATEGORIES)
