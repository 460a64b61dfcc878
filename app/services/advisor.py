# app/services/advisor.py
"""
AI advisor: expense categorization, financial advice and spending insights.

Routes depend on the narrow `Advisor` interface. `build_advisor` returns the
OpenRouter backend wrapped in `ResilientAdvisor` when an API key is configured,
and the plain `FallbackAdvisor` otherwise, so the rest of the app never sees an
advisor failure.
"""
import json
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

import httpx

from app.core.exceptions import AdvisorError
from app.models.transaction import Transaction, TransactionType
from app.schemas.advisor import ExpenseAnalysis, FinancialAdvice, SpendingInsights

logger = logging.getLogger(__name__)

EXPENSE_CATEGORIES = (
    "food",
    "transport",
    "entertainment",
    "shopping",
    "utilities",
    "healthcare",
    "education",
    "other",
)
FALLBACK_CATEGORY = "other"


class Advisor(ABC):
    """Capability interface for the text-generation collaborator."""

    @abstractmethod
    async def analyze_expense(
        self, description: str, amount: float, location: Optional[str] = None
    ) -> ExpenseAnalysis:
        ...

    @abstractmethod
    async def financial_advice(self, transactions: Sequence[Transaction], question: str) -> FinancialAdvice:
        ...

    @abstractmethod
    async def spending_insights(self, transactions: Sequence[Transaction]) -> SpendingInsights:
        ...


class FallbackAdvisor(Advisor):
    """Deterministic answers used when no backend is configured or it fails."""

    async def analyze_expense(self, description, amount, location=None) -> ExpenseAnalysis:
        return ExpenseAnalysis(
            suggested_category=FALLBACK_CATEGORY,
            confidence=0.0,
            tags=[],
            insights="Unable to analyze expense automatically.",
        )

    async def financial_advice(self, transactions, question) -> FinancialAdvice:
        return FinancialAdvice(
            advice="I'm here to help with your financial questions. Please try asking again.",
            recommendations=[],
            savings_opportunities=[],
            category="general",
        )

    async def spending_insights(self, transactions) -> SpendingInsights:
        return SpendingInsights(patterns=[], warnings=[], suggestions=[], savings_potential=0.0)


class ResilientAdvisor(Advisor):
    """
    Delegates to `backend` and substitutes the fallback answer on any failure
    (timeouts, HTTP errors, malformed JSON, bugs in the backend).
    """

    def __init__(self, backend: Advisor, fallback: Optional[Advisor] = None):
        self.backend = backend
        self.fallback = fallback or FallbackAdvisor()

    async def analyze_expense(self, description, amount, location=None) -> ExpenseAnalysis:
        try:
            return await self.backend.analyze_expense(description, amount, location)
        except Exception as e:
            logger.warning(f"AI expense analysis failed, using fallback: {e!r}")
            return await self.fallback.analyze_expense(description, amount, location)

    async def financial_advice(self, transactions, question) -> FinancialAdvice:
        try:
            return await self.backend.financial_advice(transactions, question)
        except Exception as e:
            logger.warning(f"AI financial advice failed, using fallback: {e!r}")
            return await self.fallback.financial_advice(transactions, question)

    async def spending_insights(self, transactions) -> SpendingInsights:
        try:
            return await self.backend.spending_insights(transactions)
        except Exception as e:
            logger.warning(f"AI spending insights failed, using fallback: {e!r}")
            return await self.fallback.spending_insights(transactions)


class OpenRouterAdvisor(Advisor):
    """OpenAI-compatible chat completions via OpenRouter, JSON responses only."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        fallback_model: Optional[str] = None,
        timeout: float = 30.0,
        referer: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.models = [m for m in (model, fallback_model) if m]
        self.timeout = timeout
        self.referer = referer
        self._transport = transport

    async def analyze_expense(self, description, amount, location=None) -> ExpenseAnalysis:
        prompt = f"""Analyze this expense and provide categorization suggestions:

        Description: "{description}"
        Amount: ${float(amount):.2f}
        Location: {location or "Not specified"}

        Please respond with JSON in this format:
        {{
          "suggestedCategory": "category_name",
          "confidence": confidence_score_0_to_1,
          "tags": ["tag1", "tag2"],
          "insights": "brief_insight_about_expense"
        }}

        Categories to choose from: {", ".join(EXPENSE_CATEGORIES)}"""

        result = await self._complete_json(
            "You are a financial categorization expert. Analyze expenses and provide accurate categorization with insights.",
            prompt,
            max_tokens=500,
        )
        category = str(result.get("suggestedCategory") or FALLBACK_CATEGORY).strip().lower()
        return ExpenseAnalysis(
            suggested_category=category if category in EXPENSE_CATEGORIES else FALLBACK_CATEGORY,
            confidence=_clamp_confidence(result.get("confidence", 0.5)),
            tags=_string_list(result.get("tags")),
            insights=str(result.get("insights") or "No specific insights available."),
        )

    async def financial_advice(self, transactions, question) -> FinancialAdvice:
        prompt = f"""Based on the user's spending data and their question, provide financial advice:

        User Question: "{question}"

        Spending Summary:
        {summarize_transactions(transactions)}

        Please respond with JSON in this format:
        {{
          "advice": "main_advice_response",
          "recommendations": ["recommendation1", "recommendation2"],
          "savingsOpportunities": ["opportunity1", "opportunity2"],
          "category": "advice_category"
        }}"""

        result = await self._complete_json(
            "You are a professional financial advisor. Provide helpful, practical advice based on spending patterns.",
            prompt,
            max_tokens=800,
        )
        return FinancialAdvice(
            advice=str(result.get("advice") or "I'd be happy to help with your financial questions."),
            recommendations=_string_list(result.get("recommendations")),
            savings_opportunities=_string_list(result.get("savingsOpportunities")),
            category=str(result.get("category") or "general"),
        )

    async def spending_insights(self, transactions) -> SpendingInsights:
        prompt = f"""Analyze the user's spending patterns and provide insights:

        {summarize_transactions(transactions)}

        Please respond with JSON in this format:
        {{
          "patterns": ["pattern1", "pattern2"],
          "warnings": ["warning1", "warning2"],
          "suggestions": ["suggestion1", "suggestion2"],
          "savingsPotential": estimated_monthly_savings_amount
        }}"""

        result = await self._complete_json(
            "You are a financial analyst. Identify spending patterns and provide actionable insights.",
            prompt,
            max_tokens=600,
        )
        try:
            savings_potential = max(0.0, float(result.get("savingsPotential") or 0))
        except (TypeError, ValueError):
            savings_potential = 0.0
        return SpendingInsights(
            patterns=_string_list(result.get("patterns")),
            warnings=_string_list(result.get("warnings")),
            suggestions=_string_list(result.get("suggestions")),
            savings_potential=savings_potential,
        )

    async def _complete_json(self, system_prompt: str, user_prompt: str, max_tokens: int) -> Dict[str, Any]:
        """Try each configured model in turn; raise AdvisorError when all fail"""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "X-Title": "Expense Tracker Financial Assistant",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer

        last_error = "no model configured"
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for model in self.models:
                payload = {
                    "model": model,
                    "messages": [
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    "response_format": {"type": "json_object"},
                    "temperature": 0.1,
                    "max_tokens": max_tokens,
                }
                try:
                    response = await client.post(f"{self.base_url}/chat/completions", headers=headers, json=payload)
                except httpx.HTTPError as e:
                    last_error = f"{type(e).__name__}: {e}"
                    logger.warning(f"Model {model} request failed: {last_error}")
                    continue

                if response.status_code != 200:
                    last_error = f"HTTP {response.status_code}: {response.text[:200]}"
                    logger.warning(f"Model {model} returned {last_error}")
                    continue

                try:
                    content = response.json()["choices"][0]["message"]["content"]
                    return _parse_json_object(content)
                except (KeyError, IndexError, TypeError, ValueError) as e:
                    last_error = f"malformed response: {e}"
                    logger.warning(f"Model {model} returned a {last_error}")

        raise AdvisorError(f"All models failed. Last error: {last_error}")


def build_advisor(settings) -> Advisor:
    if not settings.ai_enabled:
        logger.debug("OpenRouter API key not configured - using fallback advisor")
        return FallbackAdvisor()
    return ResilientAdvisor(
        OpenRouterAdvisor(
            api_key=settings.OPENROUTER_API_KEY,
            base_url=settings.OPENROUTER_BASE_URL,
            model=settings.AI_MODEL,
            fallback_model=settings.AI_FALLBACK_MODEL,
            timeout=settings.AI_TIMEOUT_SECONDS,
            referer=settings.FRONTEND_URL,
        )
    )


def summarize_transactions(transactions: Sequence[Transaction]) -> str:
    """Plain-text digest of a ledger for prompts; never includes raw descriptions"""
    total_expenses = Decimal("0")
    total_income = Decimal("0")
    per_category: Dict[str, Decimal] = defaultdict(Decimal)

    for tx in transactions:
        amount = Decimal(str(tx.amount))
        if tx.type == TransactionType.expense:
            total_expenses += amount
            per_category[tx.category] += amount
        elif tx.type == TransactionType.income:
            total_income += amount

    top_categories = sorted(per_category.items(), key=lambda item: item[1], reverse=True)[:5]
    category_lines = "\n".join(f"- {name}: ${amount:.2f}" for name, amount in top_categories) or "- none"

    return (
        f"Total Income: ${total_income:.2f}\n"
        f"Total Expenses: ${total_expenses:.2f}\n"
        f"Net: ${total_income - total_expenses:.2f}\n\n"
        f"Top Spending Categories:\n{category_lines}\n\n"
        f"Number of Transactions: {len(transactions)}"
    )


def _parse_json_object(content: str) -> Dict[str, Any]:
    text = (content or "").strip()
    # Some models wrap JSON in a markdown fence despite response_format
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    result = json.loads(text)
    if not isinstance(result, dict):
        raise ValueError("expected a JSON object")
    return result


def _clamp_confidence(value: Any) -> float:
    try:
        return max(0.0, min(1.0, float(value)))
    except (TypeError, ValueError):
        return 0.0


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if isinstance(item, (str, int, float)) and str(item).strip()]
