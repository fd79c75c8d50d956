from .models import MIN_QUANTITY


def clamp_quantity(quantity) -> int:
    """Coerce a requested quantity up to the cart floor (1); never rejects."""
    return max(int(quantity), MIN_QUANTITY)
