"""Calculation history accessors.

History rows are append-only: a calculation is saved or deleted, never
edited. The newest calculation comes first.
"""
from app.core.database import Database
from app.core.errors import NotFoundError
from app.models import BeverageCalculation, BeverageEstimate, PizzaCalculation
from app.planner.base import Accessor


class PizzaCalculationAccessor(Accessor):

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.calculations: list[PizzaCalculation] = []

    def refresh(self) -> list[PizzaCalculation]:
        with self.guard("Failed to load pizza calculations"):
            rows = self.db.query(
                """
                SELECT * FROM pizza_calculations
                WHERE party_id = ?
                ORDER BY calculated_at DESC, id DESC
                """,
                (self.party_id,),
            )
        self.calculations = [PizzaCalculation.model_validate(row) for row in rows]
        self.error = None
        return self.calculations

    def save(self, guest_count: int, pizzas_needed: int) -> int:
        with self.guard("Failed to save calculation"):
            result = self.db.update(
                "INSERT INTO pizza_calculations (party_id, guest_count, pizzas_needed) VALUES (?, ?, ?)",
                (self.party_id, guest_count, pizzas_needed),
            )
        self.refresh()
        return result.last_insert_id

    def delete(self, calculation_id: int) -> None:
        with self.guard("Failed to delete calculation"):
            result = self.db.update(
                "DELETE FROM pizza_calculations WHERE id = ? AND party_id = ?",
                (calculation_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Calculation {calculation_id} not found")
        self.refresh()

    def latest(self) -> PizzaCalculation | None:
        return self.calculations[0] if self.calculations else None


class BeverageCalculationAccessor(Accessor):

    def __init__(self, db: Database, party_id: int):
        super().__init__(db)
        self.party_id = party_id
        self.calculations: list[BeverageCalculation] = []

    def refresh(self) -> list[BeverageCalculation]:
        with self.guard("Failed to load beverage calculations"):
            rows = self.db.query(
                """
                SELECT * FROM beverage_calculations
                WHERE party_id = ?
                ORDER BY calculated_at DESC, id DESC
                """,
                (self.party_id,),
            )
        self.calculations = [BeverageCalculation.model_validate(row) for row in rows]
        self.error = None
        return self.calculations

    def save(
        self,
        guest_count: int,
        duration: int,
        party_type: str,
        include_alcohol: bool,
        estimate: BeverageEstimate,
    ) -> int:
        with self.guard("Failed to save calculation"):
            result = self.db.update(
                """
                INSERT INTO beverage_calculations
                    (party_id, guest_count, duration, party_type, include_alcohol,
                     water_bottles, soft_drinks, beer_bottles, wine_bottles, cocktail_servings)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    self.party_id,
                    guest_count,
                    duration,
                    party_type,
                    int(include_alcohol),
                    estimate.water_bottles,
                    estimate.soft_drinks,
                    estimate.beer_bottles,
                    estimate.wine_bottles,
                    estimate.cocktail_servings,
                ),
            )
        self.refresh()
        return result.last_insert_id

    def delete(self, calculation_id: int) -> None:
        with self.guard("Failed to delete calculation"):
            result = self.db.update(
                "DELETE FROM beverage_calculations WHERE id = ? AND party_id = ?",
                (calculation_id, self.party_id),
            )
            if result.changes == 0:
                raise NotFoundError(f"Calculation {calculation_id} not found")
        self.refresh()

    def latest(self) -> BeverageCalculation | None:
        return self.calculations[0] if self.calculations else None
