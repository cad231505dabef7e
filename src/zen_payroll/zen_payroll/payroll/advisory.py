"""Remote payroll advisory.

The advisory model only explains numbers that were already computed locally
and flags anomalies; it is never the source of truth for amounts. Whatever
shape the provider answers with is adapted here into AdvisoryResult, and any
failure (no API key, network, timeout, malformed JSON) yields an absent
result.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import openai

from ..employees.model import Employee
from ..storage.codec import employee_to_dict
from .model import PayrollInputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdvisoryResult:
    tax_explanation: str
    warning: Optional[str] = None
    compliance_note: Optional[str] = None


@dataclass(frozen=True)
class Insight:
    type: str
    message: str
    action: Optional[str] = None


class PayrollAdvisor(Protocol):
    async def explain(self, employee: Employee, inputs: PayrollInputs) -> Optional[AdvisoryResult]:
        raise NotImplementedError

    async def insights(self, summary: dict) -> list[Insight]:
        raise NotImplementedError


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def adapt_advisory_response(data: Any) -> Optional[AdvisoryResult]:
    """Normalize flat `{taxExplanation, warning}` and the older full-breakdown shape."""
    if not isinstance(data, dict):
        return None
    breakdown = data.get("breakdown") if isinstance(data.get("breakdown"), dict) else {}
    explanation = _text(data.get("taxExplanation")) or _text(breakdown.get("taxExplanation"))
    if not explanation:
        return None
    return AdvisoryResult(
        tax_explanation=explanation,
        warning=_text(data.get("warning")) or _text(breakdown.get("warning")),
        compliance_note=_text(data.get("complianceNote")) or _text(breakdown.get("complianceNote")),
    )


def adapt_insights_response(data: Any) -> list[Insight]:
    if isinstance(data, dict):
        data = data.get("insights")
    if not isinstance(data, list):
        return []
    out = []
    for item in data:
        if not isinstance(item, dict) or not _text(item.get("message")):
            continue
        out.append(
            Insight(
                type=_text(item.get("type")) or "info",
                message=_text(item.get("message")),
                action=_text(item.get("action")),
            )
        )
    return out


class NullPayrollAdvisor(PayrollAdvisor):
    """Used when no API key is configured."""

    async def explain(self, employee: Employee, inputs: PayrollInputs) -> Optional[AdvisoryResult]:
        return None

    async def insights(self, summary: dict) -> list[Insight]:
        return []


EXPLAIN_PROMPT = """
Explain the payroll for the following employee based on their country's tax laws.
The amounts are computed by the payroll system; do not recompute them.
Employee: {employee}
Overtime Hours: {overtime_hours}
Overtime Rate: {overtime_rate}
Bonus: {bonus}
Unpaid Leave Days: {unpaid_leave_days}
Unpaid Leave Rate: {unpaid_leave_rate}
Tax Percent: {tax_percent}
VAT Percent: {vat_percent}

Country Context:
- BD: Bangladesh (Progressive tax slabs, 10-25% typically, standard allowances)
- KSA: Saudi Arabia (GOSI contribution 10% for locals, fixed rules for expats)
- UAE: No income tax, pension for nationals only.

Return a JSON object with "taxExplanation" (string), optional "warning" (string, only
if an input looks unrealistic) and optional "complianceNote" (string).
"""

INSIGHTS_PROMPT = """
Analyze the following payroll data summary and provide 3-4 actionable financial insights for a business owner.
Data: {summary}

Focus on:
1. Cost saving opportunities.
2. Budget anomalies.
3. Compliance risks.
Return a JSON object {{"insights": [...]}} where each item has 'type' (saving/warning/info), 'message', and 'action'.
"""


class OpenAIPayrollAdvisor(PayrollAdvisor):
    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        client: Optional[Any] = None,
    ):
        self._model = model
        self._client = client or openai.AsyncOpenAI(api_key=api_key, timeout=timeout)

    async def _complete_json(self, prompt: str) -> Any:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": "You are a payroll compliance assistant. Answer in JSON only."},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.2,
        )
        text = response.choices[0].message.content
        return json.loads(text) if text else None

    async def explain(self, employee: Employee, inputs: PayrollInputs) -> Optional[AdvisoryResult]:
        prompt = EXPLAIN_PROMPT.format(
            employee=json.dumps(employee_to_dict(employee), ensure_ascii=False),
            overtime_hours=inputs.overtime_hours,
            overtime_rate=inputs.overtime_rate,
            bonus=inputs.bonus,
            unpaid_leave_days=inputs.unpaid_leave_days,
            unpaid_leave_rate=inputs.unpaid_leave_rate,
            tax_percent=inputs.tax_percent,
            vat_percent=inputs.vat_percent,
        )
        try:
            data = await self._complete_json(prompt)
        except (openai.OpenAIError, ValueError, LookupError, AttributeError) as e:
            logger.warning("Payroll advisory unavailable: %s", e)
            return None
        result = adapt_advisory_response(data)
        if result is None:
            logger.warning("Payroll advisory returned an unusable payload")
        return result

    async def insights(self, summary: dict) -> list[Insight]:
        prompt = INSIGHTS_PROMPT.format(summary=json.dumps(summary, ensure_ascii=False))
        try:
            data = await self._complete_json(prompt)
        except (openai.OpenAIError, ValueError, LookupError, AttributeError) as e:
            logger.warning("Payroll insights unavailable: %s", e)
            return []
        return adapt_insights_response(data)


def build_advisor(*, api_key: Optional[str], model: str, timeout: float) -> PayrollAdvisor:
    if not api_key:
        logger.info("No advisory API key configured; payroll explanations fall back to local text")
        return NullPayrollAdvisor()
    return OpenAIPayrollAdvisor(api_key=api_key, model=model, timeout=timeout)
