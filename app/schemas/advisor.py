# app/schemas/advisor.py
from typing import List, Optional
from pydantic import BaseModel, Field


class ExpenseAnalysisRequest(BaseModel):
    description: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    location: Optional[str] = None


class ExpenseAnalysis(BaseModel):
    suggested_category: str
    confidence: float = Field(..., ge=0, le=1)
    tags: List[str] = []
    insights: str


class FinancialAdviceRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class FinancialAdvice(BaseModel):
    advice: str
    recommendations: List[str] = []
    savings_opportunities: List[str] = []
    category: str = "general"


class SpendingInsights(BaseModel):
    patterns: List[str] = []
    warnings: List[str] = []
    suggestions: List[str] = []
    savings_potential: float = 0.0
