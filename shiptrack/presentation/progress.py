from typing import Optional

TRACKING_STAGES = ("Pickup", "Shipped", "In Transit", "Out for Delivery", "Delivered")

def stage_index(progress: Optional[str]) -> int:
    """Position of ``progress`` in TRACKING_STAGES; exact match only, anything else is 0."""
    try:
        return TRACKING_STAGES.index(progress)
    except ValueError:
        return 0

def progress_fraction(index: int) -> float:
    return index / (len(TRACKING_STAGES) - 1)

def build_progress(progress: Optional[str]) -> dict:
    current = stage_index(progress)
    return {
        "stages": list(TRACKING_STAGES),
        "currentStage": TRACKING_STAGES[current],
        "currentIndex": current,
        "percent": round(progress_fraction(current) * 100, 2),
        "steps": [
            {"label": label, "completed": i < current, "active": i <= current}
            for i, label in enumerate(TRACKING_STAGES)
        ],
    }
