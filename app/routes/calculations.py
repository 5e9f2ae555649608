"""Calculator routes and per-party calculation history."""
from fastapi import APIRouter, Depends, status

from app.core.database import Database, get_database
from app.models import (
    BeverageCalculation,
    BeverageEstimate,
    BeverageRequest,
    Party,
    PizzaCalculation,
    PizzaRequest,
)
from app.planner.calculations import BeverageCalculationAccessor, PizzaCalculationAccessor
from app.planner.calculators import estimate_beverages, estimate_pizzas
from app.routes.parties import require_party

router = APIRouter(tags=["calculations"])


@router.post("/calculators/pizza")
async def calculate_pizza(data: PizzaRequest):
    """Estimate pizzas without saving the result."""
    return {
        "guest_count": data.guest_count,
        "pizzas_needed": estimate_pizzas(data.guest_count, data.slices_per_person, data.slices_per_pizza),
    }


@router.post("/calculators/beverages", response_model=BeverageEstimate)
async def calculate_beverages(data: BeverageRequest):
    """Estimate beverages without saving the result."""
    return estimate_beverages(data.guest_count, data.duration, data.party_type, data.include_alcohol)


@router.get("/parties/{party_id}/calculations/pizza", response_model=list[PizzaCalculation])
async def pizza_history(party: Party = Depends(require_party), db: Database = Depends(get_database)):
    return PizzaCalculationAccessor(db, party.id).refresh()


@router.post(
    "/parties/{party_id}/calculations/pizza",
    response_model=PizzaCalculation,
    status_code=status.HTTP_201_CREATED,
)
async def save_pizza_calculation(
    data: PizzaRequest, party: Party = Depends(require_party), db: Database = Depends(get_database)
):
    """Run the pizza calculator and store the result in the party's history."""
    history = PizzaCalculationAccessor(db, party.id)
    history.save(
        data.guest_count,
        estimate_pizzas(data.guest_count, data.slices_per_person, data.slices_per_pizza),
    )
    return history.latest()


@router.delete("/parties/{party_id}/calculations/pizza/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pizza_calculation(
    calculation_id: int, party: Party = Depends(require_party), db: Database = Depends(get_database)
):
    PizzaCalculationAccessor(db, party.id).delete(calculation_id)


@router.get("/parties/{party_id}/calculations/beverages", response_model=list[BeverageCalculation])
async def beverage_history(party: Party = Depends(require_party), db: Database = Depends(get_database)):
    return BeverageCalculationAccessor(db, party.id).refresh()


@router.post(
    "/parties/{party_id}/calculations/beverages",
    response_model=BeverageCalculation,
    status_code=status.HTTP_201_CREATED,
)
async def save_beverage_calculation(
    data: BeverageRequest, party: Party = Depends(require_party), db: Database = Depends(get_database)
):
    """Run the beverage calculator and store the result in the party's history."""
    history = BeverageCalculationAccessor(db, party.id)
    estimate = estimate_beverages(data.guest_count, data.duration, data.party_type, data.include_alcohol)
    history.save(data.guest_count, data.duration, data.party_type, data.include_alcohol, estimate)
    return history.latest()


@router.delete(
    "/parties/{party_id}/calculations/beverages/{calculation_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def delete_beverage_calculation(
    calculation_id: int, party: Party = Depends(require_party), db: Database = Depends(get_database)
):
    BeverageCalculationAccessor(db, party.id).delete(calculation_id)
