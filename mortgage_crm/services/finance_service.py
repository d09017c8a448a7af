"""Mortgage affordability calculator.

Closed-form amortization:

    M = P * r(1+r)^n / ((1+r)^n - 1)

with P the principal, r the monthly rate and n the number of payments.
GDS (gross debt service) is the mortgage payment over gross monthly
income; TDS (total debt service) adds the borrower's other monthly debts.
Ratios are percentages.
"""

DEFAULT_TERM_YEARS = 25


def monthly_payment(principal, annual_rate_percent, term_years):
    """Fixed monthly payment. A zero rate spreads the principal evenly."""
    payments = term_years * 12
    if payments <= 0 or principal <= 0:
        return 0.0

    monthly_rate = annual_rate_percent / 100 / 12
    if monthly_rate == 0:
        return principal / payments

    growth = (1 + monthly_rate) ** payments
    return principal * (monthly_rate * growth) / (growth - 1)


def calculate(
    property_value=None,
    down_payment=None,
    loan_amount=None,
    interest_rate=None,
    term_years=None,
    monthly_income=None,
    monthly_debts=None,
):
    """Compute payment and affordability figures from optional inputs.

    Missing inputs count as 0, except the loan amount, which falls back to
    property_value - down_payment, and the term, which defaults to 25 years.

    Returns:
        dict with loan_amount, monthly_payment, total_payments,
        total_interest, gds_ratio, tds_ratio, down_payment_percent
        (all rounded to 2 decimals).
    """
    property_value = property_value or 0
    down_payment = down_payment or 0
    loan = loan_amount or max(property_value - down_payment, 0)
    rate = interest_rate or 0
    term = term_years or DEFAULT_TERM_YEARS
    income = monthly_income or 0
    debts = monthly_debts or 0

    payment = monthly_payment(loan, rate, term)
    total_payments = payment * term * 12
    total_interest = total_payments - loan if loan else 0.0

    gds = payment / income * 100 if income > 0 else 0.0
    tds = (payment + debts) / income * 100 if income > 0 else 0.0
    down_pct = down_payment / property_value * 100 if property_value > 0 else 0.0

    return {
        "loan_amount": round(loan, 2),
        "monthly_payment": round(payment, 2),
        "total_payments": round(total_payments, 2),
        "total_interest": round(total_interest, 2),
        "gds_ratio": round(gds, 2),
        "tds_ratio": round(tds, 2),
        "down_payment_percent": round(down_pct, 2),
    }
