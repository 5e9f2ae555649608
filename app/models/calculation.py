"""Calculation history models.

Calculations are append-only snapshots of a calculator result for a party.
They are never updated, only inserted and deleted.
"""

from sqlmodel import Field, SQLModel

from app.models.party import PartyType


class PizzaCalculation(SQLModel):
    id: int
    party_id: int
    guest_count: int
    pizzas_needed: int
    calculated_at: str | None = None


class PizzaRequest(SQLModel):
    guest_count: int = Field(ge=0)
    slices_per_person: float = Field(default=2.5, gt=0)
    slices_per_pizza: int = Field(default=8, gt=0)


class BeverageEstimate(SQLModel):
    """Quantities produced by the beverage calculator."""
    water_bottles: int = 0
    soft_drinks: int = 0
    beer_bottles: int = 0
    wine_bottles: int = 0
    cocktail_servings: int = 0


class BeverageRequest(SQLModel):
    guest_count: int = Field(ge=0)
    duration: int = Field(default=3, ge=0)
    party_type: PartyType = "mixed"
    include_alcohol: bool = True


class BeverageCalculation(BeverageEstimate):
    """A saved beverage estimate together with the inputs that produced it."""
    id: int
    party_id: int
    guest_count: int
    duration: int
    party_type: str
    include_alcohol: bool
    calculated_at: str | None = None
