from pydantic import BaseModel, ConfigDict

# Numeric LoanRecord fields that are averaged per region, in output order.
NUMERIC_FIELDS: tuple[str, ...] = (
    "loan_amount",
    "loan_to_value_ratio",
    "interest_rate",
    "total_loan_costs",
    "loan_term_months",
    "property_value",
    "income",
)


class LoanRecord(BaseModel):
    """One HMDA loan row projected to the fields we aggregate.

    Values stay as the source text; numeric coercion is left to the
    aggregation fold so failures can be counted per field.
    """
    model_config = ConfigDict(frozen=True)

    region_id: str = ""
    census_tract: str = ""
    race_category: str = ""
    loan_amount: str = ""
    loan_to_value_ratio: str = ""
    interest_rate: str = ""
    total_loan_costs: str = ""
    loan_term_months: str = ""
    property_value: str = ""
    income: str = ""
    tract_minority_population_percent: str = ""
