"""
tests/shared/aws/test_savings_plan_pivot.py - Savings Plan 요율 평탄화 테스트
"""

import pytest

from core.exceptions import TransformError
from core.shared.aws.price_bulk import SavingsPlanListResponse
from core.shared.aws.savings_plan import pivot


class TestPivot:
    """pivot 테스트"""

    def test_one_row_per_rate(self, sample_savings_plan_list):
        """요율 1개당 1행, 요율이 없는 term은 제외"""
        rows = pivot(SavingsPlanListResponse.from_dict(sample_savings_plan_list))

        assert len(rows) == 2
        assert [row.term_rate.discounted_sku for row in rows] == ["SKU1", "SKU4"]
        assert all(row.savings_plan_sku == "SP1" for row in rows)
        assert rows[0].lease_contract_length.duration == 1
        assert rows[0].savings_plan_effective_date.year == 2024

    def test_attributes_shared(self, sample_savings_plan_list):
        """같은 sku의 행은 같은 속성 객체를 공유"""
        response = SavingsPlanListResponse.from_dict(sample_savings_plan_list)
        rows = pivot(response)

        assert rows[0].savings_plan_attributes is rows[1].savings_plan_attributes
        assert rows[0].savings_plan_attributes is response.products[0].attributes

    def test_missing_product(self, sample_savings_plan_list):
        """term sku에 해당하는 상품이 없으면 TransformError"""
        sample_savings_plan_list["terms"]["savingsPlan"][0]["sku"] = "UNKNOWN"

        with pytest.raises(TransformError) as exc_info:
            pivot(SavingsPlanListResponse.from_dict(sample_savings_plan_list))
        assert exc_info.value.key == "UNKNOWN"

    def test_empty(self, sample_savings_plan_list):
        sample_savings_plan_list["terms"]["savingsPlan"] = []
        assert pivot(SavingsPlanListResponse.from_dict(sample_savings_plan_list)) == []
