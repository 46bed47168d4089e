from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.services.demand_history import (
    build_demand_profile,
    find_top_selling_product_id,
    get_average_daily_demand,
    get_current_stock,
    get_monthly_demand,
)
from tests.test_utils import (
    add_daily_sales,
    add_monthly_sales,
    add_sales,
    create_product,
    set_inventory,
)


AS_OF = date(2025, 6, 15)


@pytest.mark.usefixtures("db_session")
class TestDemandHistory:
    def test_monthly_demand_aggregates_and_fills_gaps(self, db_session):
        product = create_product(db_session, "SKU-H1")
        add_sales(db_session, product, date(2025, 1, 3), 10)
        add_sales(db_session, product, date(2025, 1, 20), 15)
        add_sales(db_session, product, date(2025, 4, 2), 7)

        series = get_monthly_demand(db_session, product.id, AS_OF, months=12)

        assert [(p.month, p.quantity) for p in series] == [
            ("2025-01", 25),
            ("2025-02", 0),
            ("2025-03", 0),
            ("2025-04", 7),
        ]

    def test_monthly_demand_respects_window(self, db_session):
        product = create_product(db_session, "SKU-H2")
        add_sales(db_session, product, date(2024, 6, 30), 99)
        add_sales(db_session, product, date(2024, 7, 1), 5)
        add_sales(db_session, product, date(2025, 6, 16), 99)

        series = get_monthly_demand(db_session, product.id, AS_OF, months=12)

        assert [(p.month, p.quantity) for p in series] == [("2024-07", 5)]

    def test_monthly_demand_empty_without_sales(self, db_session):
        product = create_product(db_session, "SKU-H3")

        assert get_monthly_demand(db_session, product.id, AS_OF) == []

    def test_average_daily_demand_counts_selling_days(self, db_session):
        product = create_product(db_session, "SKU-H4")
        add_daily_sales(db_session, product, quantity=5, days=10, as_of=AS_OF)
        add_sales(db_session, product, AS_OF, 10)
        add_sales(db_session, product, AS_OF - timedelta(days=90), 1000)

        assert get_average_daily_demand(db_session, product.id, AS_OF, window_days=90) == 6.0

    def test_average_daily_demand_zero_without_sales(self, db_session):
        product = create_product(db_session, "SKU-H5")

        assert get_average_daily_demand(db_session, product.id, AS_OF) == 0.0

    def test_current_stock_defaults_to_zero(self, db_session):
        product = create_product(db_session, "SKU-H6")
        assert get_current_stock(db_session, product.id) == 0

        set_inventory(db_session, product, 42)
        assert get_current_stock(db_session, product.id) == 42

    def test_top_selling_product_has_most_records(self, db_session):
        quiet = create_product(db_session, "SKU-H7")
        busy = create_product(db_session, "SKU-H8")
        add_daily_sales(db_session, quiet, quantity=100, days=2, as_of=AS_OF)
        add_daily_sales(db_session, busy, quantity=1, days=5, as_of=AS_OF)

        assert find_top_selling_product_id(db_session) == busy.id

    def test_profile_derives_signals(self, db_session):
        product = create_product(
            db_session,
            "SKU-H9",
            name="Signal",
            abc_grade="A",
            xyz_grade="Y",
            safety_stock=20,
            reorder_point=60,
            lead_time_days=0,
        )
        set_inventory(db_session, product, 100)
        add_monthly_sales(db_session, product, [100, 100, 100, 130, 130, 130], last_month=AS_OF)
        history = get_monthly_demand(db_session, product.id, AS_OF)

        profile = build_demand_profile(db_session, product, history)

        assert profile.yoy_growth_rate == 30.0
        # 690 units over 6 months, annualised, against 100 in stock.
        assert profile.turnover_rate == 13.8
        assert profile.is_overstock is True
        assert profile.lead_time_days == 1
        assert profile.current_safety_stock == 20
        assert profile.current_reorder_point == 60

    def test_profile_without_stock_or_long_history(self, db_session):
        product = create_product(db_session, "SKU-H10", safety_stock=20)
        add_monthly_sales(db_session, product, [10, 20, 30], last_month=AS_OF)
        history = get_monthly_demand(db_session, product.id, AS_OF)

        profile = build_demand_profile(db_session, product, history)

        assert profile.turnover_rate is None
        assert profile.yoy_growth_rate is None
        assert profile.is_overstock is False
