"""
core/shared/aws/savings_plan.py - Savings Plan 요율표 평탄화

SavingsPlanListResponse의 (products, terms.savingsPlan[].rates[]) 구조를
요율 1개당 1행으로 펼친다. 각 행에는 term sku로 찾은 상품 속성이 붙는다.

사용법:
    from core.shared.aws.savings_plan import pivot

    rows = pivot(loaded.result)
    for row in rows:
        print(row.savings_plan_sku, row.term_rate.discounted_rate.price)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from core.exceptions import TransformError

from .price_bulk.types import (
    LeaseContractLength,
    SavingsPlanListResponse,
    SavingsPlanProductAttributes,
    SavingsPlanTermRate,
)


@dataclass(frozen=True)
class PivotedSavingsPlanTermRate:
    """평탄화된 Savings Plan 요율 1행

    Attributes:
        savings_plan_sku: Savings Plan 상품 sku
        savings_plan_effective_date: 요율 적용 시작일
        savings_plan_attributes: 상품 속성 (같은 sku의 행끼리 같은 객체를 공유)
        lease_contract_length: 약정 기간
        term_rate: 할인 요율
    """

    savings_plan_sku: str
    savings_plan_effective_date: datetime
    savings_plan_attributes: SavingsPlanProductAttributes
    lease_contract_length: LeaseContractLength
    term_rate: SavingsPlanTermRate


def pivot(response: SavingsPlanListResponse) -> list[PivotedSavingsPlanTermRate]:
    """Savings Plan 응답을 요율 단위 행 목록으로 변환

    Raises:
        TransformError: term sku에 해당하는 상품이 없는 경우
    """
    attribute_lookup = {product.sku: product.attributes for product in response.products}

    pivoted: list[PivotedSavingsPlanTermRate] = []
    for term in response.terms:
        if not term.rates:
            continue
        attributes = attribute_lookup.get(term.sku)
        if attributes is None:
            raise TransformError(f"Savings Plan 상품 속성 없음: {term.sku}", key=term.sku)
        for rate in term.rates:
            pivoted.append(
                PivotedSavingsPlanTermRate(
                    savings_plan_sku=term.sku,
                    savings_plan_effective_date=term.effective_date,
                    savings_plan_attributes=attributes,
                    lease_contract_length=term.lease_contract_length,
                    term_rate=rate,
                )
            )
    return pivoted
