"""Tests for the AI advisor: OpenRouter client parsing, model fallback and resilience."""
import json
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

import httpx
import pytest

from app.core.exceptions import AdvisorError
from app.models.transaction import Transaction, TransactionType
from app.services.advisor import (
    FallbackAdvisor,
    OpenRouterAdvisor,
    ResilientAdvisor,
    build_advisor,
    summarize_transactions,
)


def completion(content) -> httpx.Response:
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_advisor(handler, fallback_model=None) -> OpenRouterAdvisor:
    return OpenRouterAdvisor(
        api_key="test-key",
        base_url="https://openrouter.test/api/v1/",
        model="primary/model",
        fallback_model=fallback_model,
        transport=httpx.MockTransport(handler),
    )


class ExplodingAdvisor(FallbackAdvisor):
    async def analyze_expense(self, description, amount, location=None):
        raise AdvisorError("backend down")

    async def financial_advice(self, transactions, question):
        raise httpx.ConnectTimeout("timed out")

    async def spending_insights(self, transactions):
        raise ValueError("not json")


async def test_analyze_expense_parses_the_model_answer():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return completion({
            "suggestedCategory": "Food",
            "confidence": 0.92,
            "tags": ["coffee", "morning"],
            "insights": "Daily coffee adds up.",
        })

    analysis = await make_advisor(handler).analyze_expense("Starbucks latte", 5.5, "Seattle")

    assert analysis.suggested_category == "food"
    assert analysis.confidence == pytest.approx(0.92)
    assert analysis.tags == ["coffee", "morning"]
    assert analysis.insights == "Daily coffee adds up."

    request = requests[0]
    assert str(request.url) == "https://openrouter.test/api/v1/chat/completions"
    assert request.headers["Authorization"] == "Bearer test-key"
    body = json.loads(request.content)
    assert body["model"] == "primary/model"
    assert body["response_format"] == {"type": "json_object"}
    assert "Starbucks latte" in body["messages"][1]["content"]


async def test_unknown_category_and_out_of_range_confidence_are_sanitized():
    def handler(request):
        return completion({"suggestedCategory": "crypto", "confidence": 1.7, "tags": "oops"})

    analysis = await make_advisor(handler).analyze_expense("Bitcoin", 100)

    assert analysis.suggested_category == "other"
    assert analysis.confidence == 1.0
    assert analysis.tags == []


async def test_fenced_json_is_accepted():
    def handler(request):
        return completion('```json\n{"suggestedCategory": "transport", "confidence": 0.8}\n```')

    analysis = await make_advisor(handler).analyze_expense("Uber", 23)

    assert analysis.suggested_category == "transport"


async def test_falls_back_to_the_second_model():
    models = []

    def handler(request):
        model = json.loads(request.content)["model"]
        models.append(model)
        if model == "primary/model":
            return httpx.Response(503, text="overloaded")
        return completion({"advice": "Cook at home.", "recommendations": ["Plan meals"]})

    advice = await make_advisor(handler, fallback_model="backup/model").financial_advice([], "How do I save?")

    assert models == ["primary/model", "backup/model"]
    assert advice.advice == "Cook at home."
    assert advice.recommendations == ["Plan meals"]
    assert advice.category == "general"


async def test_all_models_failing_raises_advisor_error():
    def handler(request):
        raise httpx.ConnectError("no route to host")

    with pytest.raises(AdvisorError):
        await make_advisor(handler, fallback_model="backup/model").spending_insights([])


async def test_malformed_response_raises_advisor_error():
    def handler(request):
        return completion("this is not json")

    with pytest.raises(AdvisorError):
        await make_advisor(handler).analyze_expense("Lunch", 12)


async def test_negative_savings_potential_is_floored():
    def handler(request):
        return completion({"patterns": ["Weekend spikes"], "savingsPotential": -20})

    insights = await make_advisor(handler).spending_insights([])

    assert insights.patterns == ["Weekend spikes"]
    assert insights.savings_potential == 0.0


async def test_resilient_advisor_substitutes_fallback_answers():
    advisor = ResilientAdvisor(ExplodingAdvisor())

    analysis = await advisor.analyze_expense("Lunch", 12)
    advice = await advisor.financial_advice([], "Help?")
    insights = await advisor.spending_insights([])

    assert analysis.suggested_category == "other"
    assert analysis.confidence == 0.0
    assert analysis.tags == []
    assert advice.recommendations == []
    assert insights.savings_potential == 0.0


def test_build_advisor_without_api_key_uses_fallback():
    settings = SimpleNamespace(ai_enabled=False)

    assert isinstance(build_advisor(settings), FallbackAdvisor)


def test_build_advisor_with_api_key_is_resilient():
    settings = SimpleNamespace(
        ai_enabled=True,
        OPENROUTER_API_KEY="key",
        OPENROUTER_BASE_URL="https://openrouter.ai/api/v1",
        AI_MODEL="a",
        AI_FALLBACK_MODEL="b",
        AI_TIMEOUT_SECONDS=5,
        FRONTEND_URL="http://localhost:5173",
    )

    advisor = build_advisor(settings)

    assert isinstance(advisor, ResilientAdvisor)
    assert isinstance(advisor.backend, OpenRouterAdvisor)
    assert advisor.backend.models == ["a", "b"]


def test_summary_has_totals_but_no_descriptions():
    txs = [
        Transaction(amount=Decimal("1000"), type=TransactionType.income, category="salary",
                    description="ACME payroll", transaction_date=datetime(2024, 3, 1), tags=[]),
        Transaction(amount=Decimal("42.50"), type=TransactionType.expense, category="food",
                    description="Secret dinner", transaction_date=datetime(2024, 3, 2), tags=[]),
    ]

    summary = summarize_transactions(txs)

    assert "Total Income: $1000.00" in summary
    assert "Total Expenses: $42.50" in summary
    assert "- food: $42.50" in summary
    assert "Secret dinner" not in summary
