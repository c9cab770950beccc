"""Static reference text describing common medical billing errors."""

BILLING_ERROR_REFERENCE = """
- Upcoding: Billing for a more expensive service than what was provided (e.g., billing for a 60-min session when it was 30-min).
- Unbundling: Charging separately for services that should be a single charge.
- Duplicate Billing: Charging for the same service multiple times.
- Incorrect Patient Information: Mismatched name, policy number, or other details.
- Non-covered Services: Charging for services not covered by the patient's insurance plan.
- Typographical Errors: Simple typos in codes or prices.
- Balance Billing: Illegally billing a patient for the difference between what insurance paid and what the provider charged (in-network providers).
- Outdated codes: Using CPT codes that are no longer valid.
"""
