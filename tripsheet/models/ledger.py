"""
Expense summary models - Output of the ledger aggregation.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .itinerary import ItineraryEvent


class ExpenseLineItem(BaseModel):
    """One paid event in the summary list."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    event: ItineraryEvent
    day_title: str = ""
    total: float = Field(..., description="amountPerPerson x resolved people count")


class ExpenseSummary(BaseModel):
    """Trip-wide totals grouped by settlement method."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    cash_total: float = 0.0
    card_total: float = 0.0
    grand_total: float = 0.0
    line_items: list[ExpenseLineItem] = Field(default_factory=list)

    def to_display_dict(self) -> dict:
        """Convert to display-friendly dictionary."""
        return {
            "cashTotal": self.cash_total,
            "cardTotal": self.card_total,
            "grandTotal": self.grand_total,
            "lineItems": [
                {
                    "eventId": item.event.id,
                    "activity": item.event.activity,
                    "category": item.event.category.value,
                    "method": item.event.expense.method.value,
                    "dayTitle": item.day_title,
                    "total": item.total,
                }
                for item in self.line_items
            ],
        }
