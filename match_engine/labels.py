# labels.py
"""Human readable bands for already computed sub-scores."""


def salary_compatibility_label(score: float) -> str:
    if score >= 90:
        return "Excellent"
    if score >= 70:
        return "Good"
    if score >= 50:
        return "Moderate"
    return "Poor"


def location_compatibility_label(score: float) -> str:
    if score >= 100:
        return "Perfect Match"
    if score >= 75:
        return "Same Region"
    if score >= 50:
        return "Same Country"
    return "Different Location"
