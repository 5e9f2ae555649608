"""Pizza and beverage quantity estimates.

Rules of thumb:
    - Pizza: 2.5 slices per person, 8 slices per (large) pizza.
    - Drinks: 1 drink per person per hour at formal parties, 1.5 otherwise.
      With alcohol, 60% (formal) or 70% (casual/mixed) of drinks are
      alcoholic: half beer, 30% wine (5 glasses per bottle), 20% cocktails.
"""
import math

from app.models import BeverageEstimate

SLICES_PER_PERSON = 2.5
SLICES_PER_PIZZA = 8
GLASSES_PER_WINE_BOTTLE = 5


def estimate_pizzas(
    guest_count: int,
    slices_per_person: float = SLICES_PER_PERSON,
    slices_per_pizza: int = SLICES_PER_PIZZA,
) -> int:
    """Whole pizzas needed to feed ``guest_count`` people."""
    if guest_count <= 0:
        return 0
    return math.ceil(guest_count * slices_per_person / slices_per_pizza)


def estimate_beverages(
    guest_count: int,
    duration: int,
    party_type: str = "mixed",
    include_alcohol: bool = True,
) -> BeverageEstimate:
    if guest_count <= 0:
        return BeverageEstimate()

    drinks_per_person_per_hour = 1 if party_type == "formal" else 1.5
    total_drinks = guest_count * duration * drinks_per_person_per_hour

    if not include_alcohol:
        return BeverageEstimate(
            water_bottles=math.ceil(guest_count * 2),
            soft_drinks=math.ceil(total_drinks * 0.8),
        )

    alcohol_share = 0.6 if party_type == "formal" else 0.7
    alcoholic = total_drinks * alcohol_share
    non_alcoholic = total_drinks * (1 - alcohol_share)

    return BeverageEstimate(
        water_bottles=math.ceil(guest_count * 1.5),
        soft_drinks=math.ceil(non_alcoholic * 0.7),
        beer_bottles=math.ceil(alcoholic * 0.5),
        wine_bottles=math.ceil(alcoholic * 0.3 / GLASSES_PER_WINE_BOTTLE),
        cocktail_servings=math.ceil(alcoholic * 0.2),
    )
